"""Tests for settings parsing."""

import pytest
from pydantic import ValidationError

from app.config import Settings
from app.constants import MAX_DIFFICULTY


def test_cors_origins_from_comma_separated_string():
    settings = Settings(cors_origins="https://a.example, https://b.example,")
    assert settings.cors_origins == ["https://a.example", "https://b.example"]


def test_cors_origins_list_passthrough():
    settings = Settings(cors_origins=["https://a.example"])
    assert settings.cors_origins == ["https://a.example"]


def test_difficulty_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(challenge_difficulty=0)


def test_difficulty_upper_bound():
    assert Settings(challenge_difficulty=MAX_DIFFICULTY).challenge_difficulty == MAX_DIFFICULTY

    # Beyond this recommended_attempts would overflow a signed 64-bit integer
    with pytest.raises(ValidationError):
        Settings(challenge_difficulty=MAX_DIFFICULTY + 1)
    with pytest.raises(ValidationError):
        Settings(challenge_difficulty=2**256 + 1)


def test_keys_read_from_environment(monkeypatch):
    monkeypatch.setenv("IRONSHIELD_PRIVATE_KEY", "cHJpdmF0ZQ==")
    assert Settings().ironshield_private_key == "cHJpdmF0ZQ=="
