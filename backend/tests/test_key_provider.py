"""Tests for Ed25519 signing helpers and key loading."""

import base64

import pytest
from cryptography.hazmat.primitives import serialization

from app.errors import KeyConfigurationError, KeyLoadError
from app.services import signing
from app.services.key_provider import (
    EnvKeyProvider,
    StaticKeyProvider,
    check_key_configuration,
    parse_private_key,
    parse_public_key,
)


class TestSigning:
    """Tests for the signature primitive."""

    def test_sign_and_verify(self):
        private_key, public_key = signing.generate_keypair()
        signature = signing.sign(private_key, b"message")

        assert len(signature) == 64
        assert signing.verify(signing.public_key_bytes(public_key), b"message", signature)

    def test_verify_rejects_other_message(self):
        private_key, public_key = signing.generate_keypair()
        signature = signing.sign(private_key, b"message")

        assert not signing.verify(signing.public_key_bytes(public_key), b"other", signature)

    def test_verify_rejects_other_key(self):
        private_key, _ = signing.generate_keypair()
        _, other_public = signing.generate_keypair()
        signature = signing.sign(private_key, b"message")

        assert not signing.verify(signing.public_key_bytes(other_public), b"message", signature)

    def test_verify_rejects_wrong_lengths(self):
        private_key, public_key = signing.generate_keypair()
        signature = signing.sign(private_key, b"message")
        pubkey = signing.public_key_bytes(public_key)

        assert not signing.verify(pubkey[:31], b"message", signature)
        assert not signing.verify(pubkey, b"message", signature[:63])


class TestParseKeys:
    """Tests for parsing key material from configuration values."""

    def test_raw_keys_round_trip(self):
        private_key, public_key = signing.generate_keypair()

        parsed_private = parse_private_key(signing.encode_private_key(private_key))
        parsed_public = parse_public_key(signing.encode_public_key(public_key))

        assert signing.private_key_bytes(parsed_private) == signing.private_key_bytes(private_key)
        assert signing.public_key_bytes(parsed_public) == signing.public_key_bytes(public_key)

    def test_pem_keys_accepted(self):
        private_key, public_key = signing.generate_keypair()
        private_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        public_pem = public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

        parsed_private = parse_private_key(base64.b64encode(private_pem).decode())
        parsed_public = parse_public_key(base64.b64encode(public_pem).decode())

        assert signing.private_key_bytes(parsed_private) == signing.private_key_bytes(private_key)
        assert signing.public_key_bytes(parsed_public) == signing.public_key_bytes(public_key)

    def test_missing_key_rejected(self):
        with pytest.raises(KeyLoadError, match="not configured"):
            parse_private_key("")

    def test_invalid_base64_rejected(self):
        with pytest.raises(KeyLoadError, match="base64"):
            parse_public_key("not base64!!")

    def test_wrong_length_rejected(self):
        with pytest.raises(KeyLoadError, match="32 bytes"):
            parse_private_key(base64.b64encode(b"short").decode())


class TestKeyProviders:
    """Tests for the Key Provider implementations."""

    def test_env_provider_loads_and_caches(self):
        private_key, public_key = signing.generate_keypair()
        provider = EnvKeyProvider(
            signing.encode_private_key(private_key), signing.encode_public_key(public_key)
        )

        assert provider.signing_key() is provider.signing_key()
        assert signing.public_key_bytes(provider.verifying_key()) == signing.public_key_bytes(
            public_key
        )

    def test_env_provider_derives_public_key(self):
        private_key, public_key = signing.generate_keypair()
        provider = EnvKeyProvider(signing.encode_private_key(private_key), "")

        assert signing.public_key_bytes(provider.verifying_key()) == signing.public_key_bytes(
            public_key
        )

    def test_env_provider_raises_when_unconfigured(self):
        provider = EnvKeyProvider("", "")

        with pytest.raises(KeyLoadError):
            provider.signing_key()

    def test_static_provider_defaults_public_key(self):
        private_key, public_key = signing.generate_keypair()
        provider = StaticKeyProvider(private_key)

        assert signing.public_key_bytes(provider.verifying_key()) == signing.public_key_bytes(
            public_key
        )


class TestCheckKeyConfiguration:
    """Startup validation of the configured key pair."""

    def test_valid_pair_passes(self, key_provider):
        check_key_configuration(key_provider)

    def test_missing_signing_key_aborts(self):
        with pytest.raises(KeyConfigurationError):
            check_key_configuration(EnvKeyProvider("", ""))

    def test_mismatched_pair_aborts(self):
        private_key, _ = signing.generate_keypair()
        _, other_public = signing.generate_keypair()

        with pytest.raises(KeyConfigurationError, match="does not match"):
            check_key_configuration(StaticKeyProvider(private_key, other_public))
