#!/usr/bin/env python3
"""
Generate an Ed25519 key pair for the IronShield API.

Prints lines suitable for a .env file:
    IRONSHIELD_PRIVATE_KEY=<base64 raw 32-byte key>
    IRONSHIELD_PUBLIC_KEY=<base64 raw 32-byte key>

Usage:
    ./scripts/generate-keys.py >> backend/.env
"""

import base64

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey


def main() -> None:
    private_key = Ed25519PrivateKey.generate()
    private_raw = private_key.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_raw = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )

    print(f"IRONSHIELD_PRIVATE_KEY={base64.b64encode(private_raw).decode()}")
    print(f"IRONSHIELD_PUBLIC_KEY={base64.b64encode(public_raw).decode()}")


if __name__ == "__main__":
    main()
