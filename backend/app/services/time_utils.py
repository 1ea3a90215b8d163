from datetime import UTC, datetime


def now_ms() -> int:
    """Current UTC time as epoch milliseconds."""
    return int(datetime.now(UTC).timestamp() * 1000)
