from app.schemas.challenge import Challenge, ChallengeEnvelope, ChallengeResponse
from app.schemas.common import ErrorResponse, HealthResponse
from app.schemas.request import AccessRequest, SampleRequestResponse
from app.schemas.token import Token, TokenEnvelope

__all__ = [
    "AccessRequest",
    "Challenge",
    "ChallengeEnvelope",
    "ChallengeResponse",
    "ErrorResponse",
    "HealthResponse",
    "SampleRequestResponse",
    "Token",
    "TokenEnvelope",
]
