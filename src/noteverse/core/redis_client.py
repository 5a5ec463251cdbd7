"""Redis client for the access-token blacklist."""

from typing import Optional

import redis.asyncio as redis

from ..config import get_settings
from .logging import get_logger

logger = get_logger("redis")


class RedisClient:
    """Thin async Redis wrapper. Every call degrades to a no-op when not connected."""

    def __init__(self):
        self.settings = get_settings()
        self.redis: Optional[redis.Redis] = None

    @property
    def is_connected(self) -> bool:
        return self.redis is not None

    async def connect(self) -> None:
        """Connect to Redis."""
        if self.redis is not None:
            return
        client = redis.from_url(
            self.settings.redis_url,
            max_connections=self.settings.redis_max_connections,
            decode_responses=True,
        )
        try:
            # Test connection
            await client.ping()
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            await client.aclose()
            raise
        self.redis = client
        logger.info("Connected to Redis successfully")

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Disconnected from Redis")

    async def ping(self) -> bool:
        if not self.redis:
            return False
        return bool(await self.redis.ping())

    async def get(self, key: str) -> Optional[str]:
        """Get value from Redis."""
        if not self.redis:
            return None
        try:
            return await self.redis.get(key)
        except redis.RedisError as e:
            logger.error(f"Redis GET error for key {key}: {e}")
            return None

    async def set(self, key: str, value: str, expire: Optional[int] = None) -> bool:
        """Set value in Redis with optional expiration."""
        if not self.redis:
            return False
        try:
            if expire:
                return bool(await self.redis.setex(key, expire, value))
            return bool(await self.redis.set(key, value))
        except redis.RedisError as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def exists(self, key: str) -> bool:
        """Check if key exists in Redis."""
        if not self.redis:
            return False
        try:
            return await self.redis.exists(key) > 0
        except redis.RedisError as e:
            logger.error(f"Redis EXISTS error for key {key}: {e}")
            return False

    async def add_to_blacklist(self, token_jti: str, expire: int) -> bool:
        """Blacklist a token id until the token would have expired anyway."""
        return await self.set(f"blacklist:{token_jti}", "blacklisted", expire)

    async def is_token_blacklisted(self, token_jti: str) -> bool:
        return await self.exists(f"blacklist:{token_jti}")


_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """Get the process-wide Redis client."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client
