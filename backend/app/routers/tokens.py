import structlog
from fastapi import APIRouter, Depends

from app.constants import RESPONSE_ENDPOINT, STATUS_OK, TOKEN_ISSUED_MSG
from app.schemas.challenge import ChallengeResponse
from app.schemas.common import ErrorResponse
from app.schemas.token import TokenEnvelope
from app.services.challenge_service import validate_challenge_response, verify_solution
from app.services.key_provider import KeyProvider, get_key_provider
from app.services.token_service import issue_token

router = APIRouter()
logger = structlog.get_logger()


@router.post(
    RESPONSE_ENDPOINT,
    response_model=TokenEnvelope,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed body"},
        410: {"model": ErrorResponse, "description": "Challenge has expired"},
        422: {"model": ErrorResponse, "description": "Invalid solution, parameters or endpoint"},
        500: {"model": ErrorResponse, "description": "Processing error"},
    },
)
async def submit_response(
    challenge_response: ChallengeResponse,
    key_provider: KeyProvider = Depends(get_key_provider),
):
    """
    Submit a solved challenge and receive an authentication token.

    Structural checks run first; the signature and proof-of-work are only
    verified for well-formed, unexpired challenges.
    """
    validate_challenge_response(challenge_response)
    verify_solution(challenge_response, key_provider)

    token = issue_token(challenge_response, key_provider)

    logger.info(
        "token_issued",
        endpoint=challenge_response.solved_challenge.endpoint,
        valid_for=token.valid_for,
    )

    return TokenEnvelope(status=STATUS_OK, message=TOKEN_ISSUED_MSG, token=token)
