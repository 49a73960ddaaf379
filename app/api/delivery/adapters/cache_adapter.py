import time
from threading import Lock
from typing import Any, Callable, Dict, Optional, Tuple

from app.api.delivery.contracts.cache_contract import ICacheAdapter


class TTLCacheAdapter(ICacheAdapter):
    """In-memory cache: key → (value, expires_at)."""

    def __init__(self, default_ttl: float = 600, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None):
        lifetime = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = (value, self._clock() + lifetime)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def clear(self, key: Optional[str] = None):
        with self._lock:
            if key:
                self._entries.pop(key, None)
            else:
                self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class NullCacheAdapter(ICacheAdapter):
    """Cache that never stores anything."""

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any, ttl: Optional[float] = None):
        pass

    def has(self, key: str) -> bool:
        return False

    def clear(self, key: Optional[str] = None):
        pass
