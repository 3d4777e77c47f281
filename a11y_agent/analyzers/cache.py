"""In-process cache of provider context handles, keyed by system prompt."""

import hashlib
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional


def cache_key(system_prompt: str) -> str:
    """Stable display name for a system prompt."""
    digest = hashlib.sha256(system_prompt.encode("utf-8")).hexdigest()[:16]
    return f"a11y-wcag-{digest}"


@dataclass(frozen=True)
class CacheEntry:
    """A provider-side cached context and when it stops being valid."""
    name: str
    expire_time: float  # epoch seconds

    def is_expired(self, now: float) -> bool:
        return self.expire_time <= now


class ContextCache:
    """
    Read-and-refresh cache of context handles.

    There is no locking: two concurrent runs may both miss and both create
    an entry. The last put wins; each entry expires on its own.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the live entry for key, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None or entry.is_expired(self._clock()):
            return None
        return entry

    def put(self, key: str, entry: CacheEntry) -> CacheEntry:
        self._entries[key] = entry
        return entry

    async def get_or_create(
        self,
        key: str,
        factory: Callable[[], Awaitable[Optional[CacheEntry]]],
    ) -> Optional[CacheEntry]:
        """Return the live entry, or create one. A factory returning None is not cached."""
        entry = self.get(key)
        if entry is not None:
            return entry
        created = await factory()
        if created is None:
            return None
        return self.put(key, created)

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
