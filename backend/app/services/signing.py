"""Ed25519 signing primitives shared by challenge and token issuance."""

import base64

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from app.constants import PUBLIC_KEY_BYTES, SIGNATURE_BYTES


def generate_keypair() -> tuple[Ed25519PrivateKey, Ed25519PublicKey]:
    private_key = Ed25519PrivateKey.generate()
    return private_key, private_key.public_key()


def public_key_bytes(key: Ed25519PublicKey) -> bytes:
    """Raw 32-byte encoding of a public key."""
    return key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def private_key_bytes(key: Ed25519PrivateKey) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )


def encode_private_key(key: Ed25519PrivateKey) -> str:
    """Base64 of the raw private key, as expected in IRONSHIELD_PRIVATE_KEY."""
    return base64.b64encode(private_key_bytes(key)).decode()


def encode_public_key(key: Ed25519PublicKey) -> str:
    """Base64 of the raw public key, as expected in IRONSHIELD_PUBLIC_KEY."""
    return base64.b64encode(public_key_bytes(key)).decode()


def sign(key: Ed25519PrivateKey, message: bytes) -> bytes:
    """Sign a message, returning the raw 64-byte signature."""
    signature = key.sign(message)
    if len(signature) != SIGNATURE_BYTES:
        raise ValueError(f"Unexpected signature length: {len(signature)}")
    return signature


def verify(pubkey: bytes, message: bytes, signature: bytes) -> bool:
    """Verify an Ed25519 signature over raw bytes."""
    if len(pubkey) != PUBLIC_KEY_BYTES or len(signature) != SIGNATURE_BYTES:
        return False
    try:
        Ed25519PublicKey.from_public_bytes(pubkey).verify(signature, message)
        return True
    except (InvalidSignature, ValueError):
        return False
