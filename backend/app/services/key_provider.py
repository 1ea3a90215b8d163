"""
Key Provider: supplies the server's Ed25519 key pair to the issuers.

EnvKeyProvider loads key material from settings once and caches the parsed
keys. The parsed keys are immutable, so a single provider is shared by all
requests. StaticKeyProvider wraps keys that are already in memory.
"""

import base64
import binascii
from functools import lru_cache
from typing import Protocol

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from app.config import settings
from app.errors import KeyConfigurationError, KeyLoadError
from app.services.signing import public_key_bytes

PEM_PREFIX = b"-----BEGIN"
RAW_KEY_BYTES = 32


class KeyProvider(Protocol):
    def signing_key(self) -> Ed25519PrivateKey: ...

    def verifying_key(self) -> Ed25519PublicKey: ...


def _decode_base64(value: str, name: str) -> bytes:
    try:
        return base64.b64decode(value.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise KeyLoadError(f"{name}: invalid base64 encoding") from e


def parse_private_key(value: str) -> Ed25519PrivateKey:
    """Parse a base64 raw 32-byte key or a base64-wrapped PKCS8 PEM."""
    if not value:
        raise KeyLoadError("Signing key is not configured")
    decoded = _decode_base64(value, "signing key")
    try:
        if decoded.startswith(PEM_PREFIX):
            key = serialization.load_pem_private_key(decoded, password=None)
            if not isinstance(key, Ed25519PrivateKey):
                raise KeyLoadError("Signing key is not an Ed25519 key")
            return key
        if len(decoded) != RAW_KEY_BYTES:
            raise KeyLoadError(f"Signing key must be {RAW_KEY_BYTES} bytes, got {len(decoded)}")
        return Ed25519PrivateKey.from_private_bytes(decoded)
    except (ValueError, TypeError) as e:
        raise KeyLoadError(f"Signing key could not be parsed: {e}") from e


def parse_public_key(value: str) -> Ed25519PublicKey:
    """Parse a base64 raw 32-byte key or a base64-wrapped SubjectPublicKeyInfo PEM."""
    if not value:
        raise KeyLoadError("Verifying key is not configured")
    decoded = _decode_base64(value, "verifying key")
    try:
        if decoded.startswith(PEM_PREFIX):
            key = serialization.load_pem_public_key(decoded)
            if not isinstance(key, Ed25519PublicKey):
                raise KeyLoadError("Verifying key is not an Ed25519 key")
            return key
        if len(decoded) != RAW_KEY_BYTES:
            raise KeyLoadError(
                f"Verifying key must be {RAW_KEY_BYTES} bytes, got {len(decoded)}"
            )
        return Ed25519PublicKey.from_public_bytes(decoded)
    except (ValueError, TypeError) as e:
        raise KeyLoadError(f"Verifying key could not be parsed: {e}") from e


class StaticKeyProvider:
    def __init__(self, private_key: Ed25519PrivateKey, public_key: Ed25519PublicKey | None = None):
        self._private_key = private_key
        self._public_key = public_key or private_key.public_key()

    def signing_key(self) -> Ed25519PrivateKey:
        return self._private_key

    def verifying_key(self) -> Ed25519PublicKey:
        return self._public_key


class EnvKeyProvider:
    """Loads keys from IRONSHIELD_PRIVATE_KEY / IRONSHIELD_PUBLIC_KEY."""

    def __init__(self, private_key: str, public_key: str):
        self._private_value = private_key
        self._public_value = public_key
        self._private_key: Ed25519PrivateKey | None = None
        self._public_key: Ed25519PublicKey | None = None

    def signing_key(self) -> Ed25519PrivateKey:
        if self._private_key is None:
            self._private_key = parse_private_key(self._private_value)
        return self._private_key

    def verifying_key(self) -> Ed25519PublicKey:
        if self._public_key is None:
            if self._public_value:
                self._public_key = parse_public_key(self._public_value)
            else:
                # Derive from the signing key when only the private half is configured
                self._public_key = self.signing_key().public_key()
        return self._public_key


@lru_cache
def get_key_provider() -> KeyProvider:
    """Dependency returning the process-wide key provider."""
    return EnvKeyProvider(settings.ironshield_private_key, settings.ironshield_public_key)


def check_key_configuration(provider: KeyProvider) -> None:
    """
    Fail fast at startup when the key pair is unusable.

    Raises KeyConfigurationError so the application refuses to start rather
    than rejecting every request.
    """
    try:
        signing_key = provider.signing_key()
        verifying_key = provider.verifying_key()
    except KeyLoadError as e:
        raise KeyConfigurationError(str(e)) from e

    if public_key_bytes(signing_key.public_key()) != public_key_bytes(verifying_key):
        raise KeyConfigurationError("Verifying key does not match the signing key")
