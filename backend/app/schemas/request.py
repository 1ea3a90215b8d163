from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import I64_MAX, I64_MIN, require_utf8


class AccessRequest(BaseModel):
    """Client request for a challenge guarding `endpoint`."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(..., description="URL of the protected resource")
    timestamp: int = Field(
        ..., ge=I64_MIN, le=I64_MAX, description="Client clock, epoch milliseconds"
    )

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        return require_utf8(v)


class SampleRequestResponse(BaseModel):
    description: str
    sample: AccessRequest
    usage: str
