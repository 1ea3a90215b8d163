from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from app.constants import TOKEN_LIFETIME_MS
from app.errors import IssueError, IssueFailed, KeyLoadError
from app.schemas.challenge import ChallengeResponse
from app.schemas.token import Token, build_token_message
from app.services import signing
from app.services.key_provider import KeyProvider
from app.services.time_utils import now_ms


def issue_token(
    response: ChallengeResponse,
    key_provider: KeyProvider,
    now: int | None = None,
) -> Token:
    """
    Exchange a verified challenge response for a signed token.

    Only call this after validate_challenge_response and verify_solution have
    both passed. The token is valid for one hour from issuance.
    """
    try:
        signing_key = key_provider.signing_key()
        public_key = signing.public_key_bytes(key_provider.verifying_key()).hex()
    except KeyLoadError as e:
        raise IssueFailed(IssueError.KEY_UNAVAILABLE, str(e), artifact="token") from e

    challenge_signature = response.solved_challenge.signature
    valid_for = (now_ms() if now is None else now) + TOKEN_LIFETIME_MS

    try:
        auth_signature = signing.sign(
            signing_key, build_token_message(challenge_signature, valid_for)
        )
    except (ValueError, TypeError) as e:
        raise IssueFailed(IssueError.SIGNING_FAILED, str(e), artifact="token") from e

    return Token(
        challenge_signature=challenge_signature,
        valid_for=valid_for,
        issuer_public_key=public_key,
        auth_signature=auth_signature.hex(),
    )


def verify_token(token: Token, verifying_key: Ed25519PublicKey) -> bool:
    """True when the token was signed by `verifying_key` and has not been altered."""
    expected = signing.public_key_bytes(verifying_key)
    if token.issuer_public_key_bytes != expected:
        return False
    return signing.verify(expected, token.signing_message(), token.auth_signature_bytes)


def is_token_expired(token: Token, now: int | None = None) -> bool:
    now = now_ms() if now is None else now
    return now >= token.valid_for
