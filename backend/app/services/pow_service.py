import hashlib

from app.constants import CHALLENGE_PARAM_BYTES

MAX_TARGET = 2 ** (8 * CHALLENGE_PARAM_BYTES) - 1
SOLUTION_BYTES = 8
MAX_SOLUTION = 2 ** (8 * SOLUTION_BYTES) - 1


def difficulty_to_challenge_param(difficulty: int) -> bytes:
    """
    Map a difficulty level to a 32-byte big-endian target.

    A hash solves the challenge when it is below the target, so the expected
    number of attempts is roughly `difficulty`.
    """
    if difficulty < 1:
        raise ValueError("Difficulty must be at least 1")
    target = min(2**256 // difficulty, MAX_TARGET)
    return target.to_bytes(CHALLENGE_PARAM_BYTES, "big")


def recommended_attempts(difficulty: int) -> int:
    """Attempt budget hinted to clients: twice the expected work."""
    return difficulty * 2


def solution_hash(nonce: str, solution: int) -> bytes:
    # Format: nonce (utf-8) || solution (8 bytes, little-endian)
    return hashlib.sha256(nonce.encode() + solution.to_bytes(SOLUTION_BYTES, "little")).digest()


def check_solution(nonce: str, challenge_param: bytes, solution: int) -> bool:
    """Recompute the proof-of-work hash and compare it against the target."""
    if not 0 <= solution <= MAX_SOLUTION:
        return False
    if len(challenge_param) != CHALLENGE_PARAM_BYTES:
        return False

    hash_int = int.from_bytes(solution_hash(nonce, solution), "big")
    target = int.from_bytes(challenge_param, "big")
    return hash_int < target


def solve(nonce: str, challenge_param: bytes, max_attempts: int = 10_000_000) -> int:
    """Brute-force a solution. Used by tests and the smoke script, never by the server."""
    target = int.from_bytes(challenge_param, "big")

    for solution in range(max_attempts):
        if int.from_bytes(solution_hash(nonce, solution), "big") < target:
            return solution

    raise RuntimeError("Failed to solve PoW within iteration limit")
