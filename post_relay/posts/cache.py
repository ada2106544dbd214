"""Time-bounded memo for the paged post listing.

The repository owns one :class:`PagedListCache` and calls
:meth:`PagedListCache.invalidate` from its write path; nothing else touches
it. Entries expire after ``ttl`` seconds regardless of access.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Hashable
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL = 180


class PagedListCache:
    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[Hashable, tuple[Any, float]] = {}
        self._generation = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def generation(self) -> int:
        return self._generation

    def get(self, key: Hashable) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: Hashable, value: Any, generation: int | None = None) -> bool:
        """Store ``value`` unless it is empty or the cache was invalidated.

        ``generation`` is the value of :attr:`generation` observed before the
        result was loaded; a mismatch means a write happened meanwhile.
        """

        if not value:
            return False
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            self._entries[key] = (value, self._clock() + self.ttl)
            return True

    def invalidate(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generation += 1
        logger.debug("Post listing cache invalidated")

    async def get_or_load(
        self,
        key: Hashable,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        cached = self.get(key)
        if cached is not None:
            return cached
        generation = self._generation
        value = await loader()
        self.set(key, value, generation)
        return value
