from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import HEX_32_BYTES, HEX_64_BYTES


class Token(BaseModel):
    """
    Signed proof that a challenge was solved.

    auth_signature covers challenge_signature and valid_for, so neither can be
    changed without invalidating the token.
    """

    model_config = ConfigDict(frozen=True)

    challenge_signature: str = Field(..., pattern=HEX_64_BYTES)
    valid_for: int
    issuer_public_key: str = Field(..., pattern=HEX_32_BYTES)
    auth_signature: str = Field(..., pattern=HEX_64_BYTES)

    @property
    def issuer_public_key_bytes(self) -> bytes:
        return bytes.fromhex(self.issuer_public_key)

    @property
    def auth_signature_bytes(self) -> bytes:
        return bytes.fromhex(self.auth_signature)

    def signing_message(self) -> bytes:
        return build_token_message(self.challenge_signature, self.valid_for)


def build_token_message(challenge_signature: str, valid_for: int) -> bytes:
    """Canonical bytes signed for a token: challenge_signature_hex|valid_for."""
    return f"{challenge_signature}|{valid_for}".encode()


class TokenEnvelope(BaseModel):
    status: int
    message: str
    token: Token
