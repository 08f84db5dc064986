"""UTC datetime utilities."""

from collections.abc import Callable
from datetime import datetime, timezone

# Injected wherever "now" matters (session expiry, timestamps) so tests can move time.
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def to_epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def from_epoch_ms(ms: float) -> datetime:
    """Epoch milliseconds -> aware UTC datetime. Raises ValueError when out of range."""
    try:
        return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
    except (OverflowError, OSError) as exc:
        raise ValueError(f"Timestamp out of range: {ms}") from exc
