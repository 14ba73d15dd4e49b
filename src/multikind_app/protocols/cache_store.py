"""Cache store protocol.

Defines the interface for a key/value store with per-key expiry.
Redis is the only implementation in this service.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends."""

    def set(self, key: str, value: str, ttl: int) -> None:
        """Store a string value that expires after ``ttl`` seconds.

        Args:
            key: The cache key
            value: The value to store
            ttl: Time-to-live in seconds
        """
        ...

    def get(self, key: str) -> str | None:
        """Read a value back.

        Args:
            key: The cache key

        Returns:
            The stored value, or None if missing or expired
        """
        ...

    def ping(self) -> bool:
        """Check if the cache is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...

    def close(self) -> None:
        """Release the underlying connection pool."""
        ...
