"""
Error taxonomy for the challenge/token protocol.

Client-caused rejections are RejectReason members; server-side failures are
IssueError members. Each maps to exactly one HTTP status through STATUS_CODES,
and every error reaches the client as {"error": str, "success": false}.
"""

from enum import Enum


class RejectReason(str, Enum):
    INVALID_ENDPOINT = "Endpoint must be a valid HTTPS URL"
    CLOCK_SKEW = "Request timestamp does not match the current time"
    INVALID_SOLUTION = "Invalid solution provided for the challenge"
    CHALLENGE_EXPIRED = "Challenge has expired"
    INVALID_PARAMS = "Invalid challenge parameters"
    INVALID_SIGNATURE = "Challenge signature verification failed"


class IssueError(str, Enum):
    KEY_UNAVAILABLE = "key_unavailable"
    SIGNING_FAILED = "signing_failed"


# Opaque label returned for every server-side failure
PROCESSING_ERROR_MSG = "Processing error"
INVALID_REQUEST_MSG = "Invalid request format"

STATUS_CODES: dict[RejectReason | IssueError, int] = {
    RejectReason.INVALID_ENDPOINT: 422,
    RejectReason.CLOCK_SKEW: 400,
    RejectReason.INVALID_SOLUTION: 422,
    RejectReason.CHALLENGE_EXPIRED: 410,
    RejectReason.INVALID_PARAMS: 422,
    RejectReason.INVALID_SIGNATURE: 422,
    IssueError.KEY_UNAVAILABLE: 500,
    IssueError.SIGNING_FAILED: 500,
}


class ChallengeRejected(Exception):
    """A client-submitted artifact failed validation or verification."""

    def __init__(self, reason: RejectReason):
        super().__init__(reason.value)
        self.reason = reason

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.reason]


class IssueFailed(Exception):
    """The server could not build or sign an artifact for this request."""

    def __init__(self, error: IssueError, detail: str = "", artifact: str = "challenge"):
        super().__init__(f"{error.value}: {detail}" if detail else error.value)
        self.error = error
        self.detail = detail
        # "challenge" or "token"
        self.artifact = artifact

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.error]

    @property
    def log_event(self) -> str:
        return f"{self.artifact}_issue_failed"


class KeyLoadError(Exception):
    """Key material is missing or cannot be parsed."""


class KeyConfigurationError(KeyLoadError):
    """No signing key is configured at all; the service cannot start."""


def error_body(message: str) -> dict:
    return {"error": message, "success": False}
