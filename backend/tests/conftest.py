import os

from app.services.signing import encode_private_key, encode_public_key
from tests.test_utils import TEST_DIFFICULTY, TEST_PRIVATE_KEY, TEST_PUBLIC_KEY, solve_challenge

# Keys and difficulty must be in the environment before app.config is imported
os.environ["IRONSHIELD_PRIVATE_KEY"] = encode_private_key(TEST_PRIVATE_KEY)
os.environ["IRONSHIELD_PUBLIC_KEY"] = encode_public_key(TEST_PUBLIC_KEY)
os.environ["CHALLENGE_DIFFICULTY"] = str(TEST_DIFFICULTY)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.main import app  # noqa: E402
from app.schemas.challenge import ChallengeResponse  # noqa: E402
from app.schemas.request import AccessRequest  # noqa: E402
from app.services.challenge_service import issue_challenge  # noqa: E402
from app.services.key_provider import StaticKeyProvider  # noqa: E402
from app.services.time_utils import now_ms  # noqa: E402


@pytest.fixture
def client():
    """Test client running the full lifespan (logging setup and key check)."""
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def key_provider():
    return StaticKeyProvider(TEST_PRIVATE_KEY, TEST_PUBLIC_KEY)


@pytest.fixture
def access_request():
    return AccessRequest(endpoint="https://example.com/protected", timestamp=now_ms())


@pytest.fixture
def challenge(access_request, key_provider):
    """A freshly issued, unexpired challenge."""
    return issue_challenge(access_request, TEST_DIFFICULTY, key_provider)


@pytest.fixture
def solved_response(challenge):
    return ChallengeResponse(solved_challenge=challenge, solution=solve_challenge(challenge))
