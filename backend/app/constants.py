from app import __version__

SERVICE_NAME = "ironshield-api"
VERSION = __version__

HEALTH_ENDPOINT = "/health"
REQUEST_ENDPOINT = "/request"
RESPONSE_ENDPOINT = "/response"

SECURE_SCHEME = "https://"

CHALLENGE_VALIDITY_MS = 30_000  # 30 seconds
MAX_CLOCK_SKEW_MS = 30_000
TOKEN_LIFETIME_MS = 60 * 60 * 1000  # 1 hour

CHALLENGE_PARAM_BYTES = 32
NONCE_BYTES = 16
PUBLIC_KEY_BYTES = 32
SIGNATURE_BYTES = 64

# recommended_attempts (difficulty * 2) must fit a signed 64-bit integer
MAX_DIFFICULTY = (2**63 - 1) // 2

STATUS_OK = 200
CHALLENGE_ISSUED_MSG = "Challenge issued"
TOKEN_ISSUED_MSG = "Solution verified, token issued"
