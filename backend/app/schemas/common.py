from pydantic import BaseModel

HEX_32_BYTES = r"^[0-9a-f]{64}$"
HEX_64_BYTES = r"^[0-9a-f]{128}$"

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


def require_utf8(value: str) -> str:
    """Reject strings holding lone surrogates, which cannot be signed as UTF-8."""
    try:
        value.encode()
    except UnicodeEncodeError as e:
        raise ValueError("must be valid UTF-8 text") from e
    return value


class ErrorResponse(BaseModel):
    error: str
    success: bool = False


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    timestamp: int
