from __future__ import annotations

import time
from typing import Any, Callable, Hashable, Optional


class TTLCache:
    """Read-through memo of key -> (value, expiry).

    An optimization only: callers invalidate after writes and never rely on
    it for correctness. The clock is injectable for tests.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[Hashable, tuple[Any, float]] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        self._entries[key] = (value, self._clock() + ttl)

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def invalidate_prefix(self, prefix: str) -> None:
        for key in [k for k in self._entries if isinstance(k, str) and k.startswith(prefix)]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
