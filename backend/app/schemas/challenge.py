from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import HEX_32_BYTES, HEX_64_BYTES, I64_MAX, I64_MIN, require_utf8


class Challenge(BaseModel):
    """
    A signed proof-of-work challenge.

    Every field except `signature` is covered by the signature, in the order
    produced by signing_message(). Binary values are lowercase hex.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str
    challenge_param: str = Field(..., pattern=HEX_32_BYTES)
    nonce: str = Field(..., pattern=r"^[0-9a-f]{2,128}$")
    created_time: int = Field(..., ge=I64_MIN, le=I64_MAX)
    expiration_time: int = Field(..., ge=I64_MIN, le=I64_MAX)
    recommended_attempts: int = Field(..., ge=0, le=I64_MAX)
    issuer_public_key: str = Field(..., pattern=HEX_32_BYTES)
    signature: str = Field(..., pattern=HEX_64_BYTES)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        return require_utf8(v)

    @property
    def challenge_param_bytes(self) -> bytes:
        return bytes.fromhex(self.challenge_param)

    @property
    def issuer_public_key_bytes(self) -> bytes:
        return bytes.fromhex(self.issuer_public_key)

    @property
    def signature_bytes(self) -> bytes:
        return bytes.fromhex(self.signature)

    def signing_message(self) -> bytes:
        return build_challenge_message(
            nonce=self.nonce,
            created_time=self.created_time,
            expiration_time=self.expiration_time,
            endpoint=self.endpoint,
            challenge_param=self.challenge_param,
            recommended_attempts=self.recommended_attempts,
            issuer_public_key=self.issuer_public_key,
        )

    def is_expired(self, now: int) -> bool:
        return self.expiration_time < now


def build_challenge_message(
    nonce: str,
    created_time: int,
    expiration_time: int,
    endpoint: str,
    challenge_param: str,
    recommended_attempts: int,
    issuer_public_key: str,
) -> bytes:
    """
    Canonical bytes signed for a challenge.

    Format: nonce|created_time|expiration_time|endpoint|param_hex|attempts|pubkey_hex
    """
    return "|".join(
        (
            nonce,
            str(created_time),
            str(expiration_time),
            endpoint,
            challenge_param,
            str(recommended_attempts),
            issuer_public_key,
        )
    ).encode()


class ChallengeResponse(BaseModel):
    """A challenge returned by the client together with its claimed solution."""

    model_config = ConfigDict(frozen=True)

    solved_challenge: Challenge
    solution: int = Field(..., ge=I64_MIN, le=I64_MAX)


class ChallengeEnvelope(BaseModel):
    status: int
    message: str
    challenge: Challenge
