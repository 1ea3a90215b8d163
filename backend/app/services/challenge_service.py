"""
Challenge issuance and response verification.

Nothing is stored between the two halves: a challenge returned by the client
is trusted only after its own signature checks out against the server's key.
"""

import secrets

import structlog

from app.constants import (
    CHALLENGE_VALIDITY_MS,
    MAX_CLOCK_SKEW_MS,
    NONCE_BYTES,
    SECURE_SCHEME,
)
from app.errors import ChallengeRejected, IssueError, IssueFailed, KeyLoadError, RejectReason
from app.schemas.challenge import Challenge, ChallengeResponse, build_challenge_message
from app.schemas.request import AccessRequest
from app.services import signing
from app.services.key_provider import KeyProvider
from app.services.pow_service import (
    check_solution,
    difficulty_to_challenge_param,
    recommended_attempts,
)
from app.services.time_utils import now_ms

logger = structlog.get_logger()

ZERO_PARAM = bytes(32)


def validate_access_request(request: AccessRequest, now: int | None = None) -> None:
    """Reject requests for non-HTTPS endpoints or with a skewed client clock."""
    now = now_ms() if now is None else now

    if not request.endpoint.startswith(SECURE_SCHEME):
        raise ChallengeRejected(RejectReason.INVALID_ENDPOINT)

    if abs(now - request.timestamp) > MAX_CLOCK_SKEW_MS:
        raise ChallengeRejected(RejectReason.CLOCK_SKEW)


def issue_challenge(
    request: AccessRequest,
    difficulty: int,
    key_provider: KeyProvider,
    now: int | None = None,
) -> Challenge:
    """Build and sign a new challenge for `request.endpoint`."""
    try:
        signing_key = key_provider.signing_key()
        public_key = signing.public_key_bytes(key_provider.verifying_key()).hex()
    except KeyLoadError as e:
        raise IssueFailed(IssueError.KEY_UNAVAILABLE, str(e)) from e

    created_time = now_ms() if now is None else now
    fields = {
        "endpoint": request.endpoint,
        "challenge_param": difficulty_to_challenge_param(difficulty).hex(),
        "nonce": secrets.token_hex(NONCE_BYTES),
        "created_time": created_time,
        "expiration_time": created_time + CHALLENGE_VALIDITY_MS,
        "recommended_attempts": recommended_attempts(difficulty),
        "issuer_public_key": public_key,
    }

    try:
        signature = signing.sign(signing_key, build_challenge_message(**fields))
    except (ValueError, TypeError) as e:
        raise IssueFailed(IssueError.SIGNING_FAILED, str(e)) from e

    return Challenge(**fields, signature=signature.hex())


def validate_challenge_response(response: ChallengeResponse, now: int | None = None) -> None:
    """
    Cheap structural checks, run before any cryptographic work.

    Order matters: the first failing check decides the rejection reason.
    """
    now = now_ms() if now is None else now
    challenge = response.solved_challenge

    if response.solution < 0:
        raise ChallengeRejected(RejectReason.INVALID_SOLUTION)
    if challenge.is_expired(now):
        raise ChallengeRejected(RejectReason.CHALLENGE_EXPIRED)
    if not challenge.endpoint:
        raise ChallengeRejected(RejectReason.INVALID_ENDPOINT)
    if challenge.challenge_param_bytes == ZERO_PARAM:
        raise ChallengeRejected(RejectReason.INVALID_PARAMS)


def verify_challenge_signature(challenge: Challenge, key_provider: KeyProvider) -> bool:
    """True when the challenge was signed by this server's key and is untampered."""
    try:
        server_key = signing.public_key_bytes(key_provider.verifying_key())
    except KeyLoadError as e:
        raise IssueFailed(IssueError.KEY_UNAVAILABLE, str(e), artifact="token") from e

    if not secrets.compare_digest(challenge.issuer_public_key_bytes, server_key):
        return False
    return signing.verify(server_key, challenge.signing_message(), challenge.signature_bytes)


def verify_solution(response: ChallengeResponse, key_provider: KeyProvider) -> None:
    """Confirm the challenge is genuine and the solution satisfies its target."""
    challenge = response.solved_challenge

    if not verify_challenge_signature(challenge, key_provider):
        raise ChallengeRejected(RejectReason.INVALID_SIGNATURE)

    if not check_solution(challenge.nonce, challenge.challenge_param_bytes, response.solution):
        raise ChallengeRejected(RejectReason.INVALID_SOLUTION)

    logger.debug("solution_verified", endpoint=challenge.endpoint)
