"""Sequential business IDs: user1, market1, bet1, ...

One generator per entity kind and per store instance, so independent stores
(e.g. one per test) never share a counter.
"""

import itertools
import threading


class PrefixedIdGenerator:
    """Monotonic ``<prefix><n>`` IDs, n starting at ``start``."""

    def __init__(self, prefix: str, start: int = 1) -> None:
        if not prefix:
            raise ValueError("prefix must be non-empty")
        if start < 0:
            raise ValueError(f"start must be >= 0, got {start}")
        self._prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    @property
    def prefix(self) -> str:
        return self._prefix

    def next_id(self) -> str:
        with self._lock:
            return f"{self._prefix}{next(self._counter)}"
