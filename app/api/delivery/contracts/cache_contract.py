from abc import ABC, abstractmethod
from typing import Any, Optional


class ICacheAdapter(ABC):
    """Interface for key/value caches with time-based expiry."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Returns the cached value, or None when missing or expired."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Stores a value.

        Args:
            key: Cache key
            value: Value to store
            ttl: Lifetime in seconds. Uses the adapter default when omitted.
        """
        pass

    @abstractmethod
    def has(self, key: str) -> bool:
        pass

    @abstractmethod
    def clear(self, key: Optional[str] = None) -> None:
        """Clears one key, or the whole cache when key is None."""
        pass
