#!/usr/bin/env python3
"""
Smoke test for IronShield API deployments.

Runs the whole challenge round trip against a live deployment using only the
standard library, so it can run on a bare CI runner without the app installed.

Flow (default):
1. Health check
2. Request a challenge (POST /request)
3. Reject an insecure endpoint (expects 422)
4. Solve the challenge locally
5. Reject a negative solution (expects 422)
6. Redeem the solution for a token (POST /response)

Usage:
    ./scripts/smoke-test.py https://staging.example.com
    ./scripts/smoke-test.py https://staging.example.com --health-only
"""

import argparse
import hashlib
import json
import sys
import time
from datetime import datetime, timezone
from typing import Any, Callable
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_RETRIES = 2
SOLVE_BUDGET_FACTOR = 4  # multiples of recommended_attempts before giving up
CHALLENGE_WINDOW_MS = 30_000
TOKEN_LIFETIME_MS = 60 * 60 * 1000


class SmokeFailure(RuntimeError):
    pass


def log(msg: str) -> None:
    print(f"[{datetime.now().strftime('%H:%M:%S')}] {msg}", flush=True)


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class ApiClient:
    """JSON client that retries only on connection failures."""

    def __init__(self, base_url: str, timeout: float, retries: int):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retries = retries

    def call(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> tuple[int, dict[str, Any]]:
        data = json.dumps(payload).encode() if payload is not None else None
        request = Request(
            f"{self.base_url}{path}",
            data=data,
            headers={"Content-Type": "application/json"},
            method=method,
        )
        for attempt in range(self.retries + 1):
            try:
                with urlopen(request, timeout=self.timeout) as response:
                    return response.status, self._parse(response.status, response.read())
            except HTTPError as e:
                return e.code, self._parse(e.code, e.read())
            except (URLError, TimeoutError) as e:
                if attempt == self.retries:
                    raise SmokeFailure(f"{method} {path} unreachable: {e}") from e
                time.sleep(0.5 * 2**attempt)
        raise SmokeFailure(f"{method} {path}: no attempts made")

    @staticmethod
    def _parse(status: int, raw: bytes) -> dict[str, Any]:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise SmokeFailure(f"HTTP {status} with non-JSON body: {raw[:200]!r}") from e


def solve(nonce: str, challenge_param_hex: str, budget: int) -> int:
    """Brute-force SHA256(nonce || solution as 8 LE bytes) below the target."""
    target = int(challenge_param_hex, 16)
    prefix = nonce.encode()
    started = time.time()
    for solution in range(budget):
        digest = hashlib.sha256(prefix + solution.to_bytes(8, "little")).digest()
        if int.from_bytes(digest, "big") < target:
            log(f"Solved with {solution + 1:,} hashes in {time.time() - started:.2f}s")
            return solution
    raise SmokeFailure(f"No solution within {budget:,} hashes")


def expect_rejection(status: int, body: dict[str, Any], expected: int) -> None:
    if status != expected:
        raise SmokeFailure(f"Expected {expected}, got {status}: {body}")
    if body.get("success") is not False or not body.get("error"):
        raise SmokeFailure(f"Rejection body has unexpected shape: {body}")


class SmokeRun:
    def __init__(self, client: ApiClient, endpoint: str, health_attempts: int):
        self.client = client
        self.endpoint = endpoint
        self.health_attempts = health_attempts
        self.challenge: dict[str, Any] = {}
        self.solution = -1

    def health(self) -> None:
        for attempt in range(1, self.health_attempts + 1):
            try:
                status, body = self.client.call("GET", "/health")
            except SmokeFailure as e:
                log(f"Health attempt {attempt} failed: {e}")
            else:
                if status == 200 and body.get("status") == "healthy":
                    log(f"Healthy, version {body.get('version')}")
                    return
            if attempt < self.health_attempts:
                time.sleep(2.0)
        raise SmokeFailure(f"Not healthy after {self.health_attempts} attempts")

    def request_challenge(self) -> None:
        status, body = self.client.call(
            "POST", "/request", {"endpoint": self.endpoint, "timestamp": now_ms()}
        )
        if status != 200:
            raise SmokeFailure(f"/request returned {status}: {body}")
        challenge = body["challenge"]
        if challenge["expiration_time"] - challenge["created_time"] != CHALLENGE_WINDOW_MS:
            raise SmokeFailure(f"Unexpected challenge window: {challenge}")
        if int(challenge["challenge_param"], 16) == 0:
            raise SmokeFailure("Server issued an all-zero challenge_param")
        log(f"Challenge issued, recommended_attempts={challenge['recommended_attempts']:,}")
        self.challenge = challenge

    def insecure_endpoint(self) -> None:
        status, body = self.client.call(
            "POST",
            "/request",
            {"endpoint": self.endpoint.replace("https://", "http://", 1), "timestamp": now_ms()},
        )
        expect_rejection(status, body, 422)

    def solve(self) -> None:
        budget = max(1, self.challenge["recommended_attempts"]) * SOLVE_BUDGET_FACTOR
        self.solution = solve(self.challenge["nonce"], self.challenge["challenge_param"], budget)

    def negative_solution(self) -> None:
        status, body = self.client.call(
            "POST", "/response", {"solved_challenge": self.challenge, "solution": -1}
        )
        expect_rejection(status, body, 422)

    def redeem(self) -> None:
        before = now_ms()
        status, body = self.client.call(
            "POST", "/response", {"solved_challenge": self.challenge, "solution": self.solution}
        )
        if status != 200:
            raise SmokeFailure(f"/response returned {status}: {body}")
        token = body["token"]
        if token["challenge_signature"] != self.challenge["signature"]:
            raise SmokeFailure("Token is not bound to the submitted challenge")
        # Allow a minute of skew between this machine and the server
        if abs(token["valid_for"] - (before + TOKEN_LIFETIME_MS)) > 60_000:
            raise SmokeFailure(f"Unexpected token lifetime: valid_for={token['valid_for']}")
        log("Token issued")


def run(steps: list[tuple[str, Callable[[], None]]]) -> bool:
    started = time.time()
    for name, step in steps:
        log(f"STEP: {name}")
        step_started = time.time()
        try:
            step()
        except (SmokeFailure, KeyError) as e:
            log(f"FAILED: {name}: {e!r}")
            return False
        log(f"OK: {name} ({time.time() - step_started:.2f}s)")
    log(f"All {len(steps)} steps passed in {time.time() - started:.2f}s")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="IronShield API smoke test")
    parser.add_argument("base_url", help="Base URL (e.g., https://staging.example.com)")
    parser.add_argument("--health-only", action="store_true", help="Only run the health check")
    parser.add_argument(
        "--endpoint",
        default="https://example.com/protected",
        help="Protected endpoint to request a challenge for",
    )
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_SECONDS)
    parser.add_argument("--retries", type=int, default=DEFAULT_RETRIES)
    parser.add_argument("--max-health-attempts", type=int, default=30)
    args = parser.parse_args()

    smoke = SmokeRun(
        ApiClient(args.base_url, args.timeout, max(0, args.retries)),
        args.endpoint,
        max(1, args.max_health_attempts),
    )
    steps = [("health", smoke.health)]
    if not args.health_only:
        steps += [
            ("request challenge", smoke.request_challenge),
            ("insecure endpoint rejected", smoke.insecure_endpoint),
            ("solve", smoke.solve),
            ("negative solution rejected", smoke.negative_solution),
            ("redeem token", smoke.redeem),
        ]
    return 0 if run(steps) else 1


if __name__ == "__main__":
    sys.exit(main())
