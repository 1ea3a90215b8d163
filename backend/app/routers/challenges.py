import structlog
from fastapi import APIRouter, Depends

from app.config import settings
from app.constants import CHALLENGE_ISSUED_MSG, REQUEST_ENDPOINT, STATUS_OK
from app.schemas.challenge import ChallengeEnvelope
from app.schemas.common import ErrorResponse
from app.schemas.request import AccessRequest, SampleRequestResponse
from app.services.challenge_service import issue_challenge, validate_access_request
from app.services.key_provider import KeyProvider, get_key_provider
from app.services.time_utils import now_ms

router = APIRouter()
logger = structlog.get_logger()


@router.post(
    REQUEST_ENDPOINT,
    response_model=ChallengeEnvelope,
    responses={
        400: {"model": ErrorResponse, "description": "Clock skew or malformed body"},
        422: {"model": ErrorResponse, "description": "Endpoint must be a valid HTTPS URL"},
        500: {"model": ErrorResponse, "description": "Processing error"},
    },
)
async def request_challenge(
    access_request: AccessRequest,
    key_provider: KeyProvider = Depends(get_key_provider),
):
    """
    Request a proof-of-work challenge for a protected endpoint.

    The challenge is signed and expires 30 seconds after issuance. Nothing is
    stored server-side.
    """
    validate_access_request(access_request)

    challenge = issue_challenge(
        access_request,
        difficulty=settings.challenge_difficulty,
        key_provider=key_provider,
    )

    logger.info(
        "challenge_issued",
        endpoint=challenge.endpoint,
        difficulty=settings.challenge_difficulty,
        expiration_time=challenge.expiration_time,
    )

    return ChallengeEnvelope(status=STATUS_OK, message=CHALLENGE_ISSUED_MSG, challenge=challenge)


@router.get(f"{REQUEST_ENDPOINT}/sample", response_model=SampleRequestResponse)
async def sample_request():
    """Example body for POST /request, stamped with the current server time."""
    return SampleRequestResponse(
        description="Sample request for the AccessRequest structure.",
        sample=AccessRequest(endpoint="https://example.com/protected", timestamp=now_ms()),
        usage=f"POST this JSON structure to {REQUEST_ENDPOINT} to get a challenge.",
    )
