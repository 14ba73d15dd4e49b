"""Redis implementation of CacheStore."""

import logging

import redis

from multikind_app.config import Settings, get_redis_client, settings

logger = logging.getLogger(__name__)


class RedisCacheRepository:
    """Redis-backed cache with per-key expiry.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed. The client is created with
    ``decode_responses=True`` so reads come back as ``str``.
    """

    def __init__(self, redis_client: redis.Redis) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Redis client instance (required).
        """
        self._client = redis_client

    @classmethod
    def create(cls, config: Settings = settings) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository from settings.

        Args:
            config: Settings holding ``REDIS_ADDR`` and ``REDIS_PASSWORD``.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(redis_client=get_redis_client(config))

    def set(self, key: str, value: str, ttl: int) -> None:
        self._client.set(key, value, ex=ttl)

    def get(self, key: str) -> str | None:
        value = self._client.get(key)
        if isinstance(value, bytes):
            # Clients created outside get_redis_client may not decode
            return value.decode()
        return value  # type: ignore[return-value]

    def ping(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.warning("Redis ping failed: %s", e)
            return False

    def close(self) -> None:
        self._client.close()
