"""
Redis Client
============

Async Redis client holding the per-client rate limit counters, so limits
are shared by every worker serving the API.

Version: 0.1.0
"""

import time
from typing import Any

import redis.asyncio as aioredis
from redis.asyncio import Redis

from shared.config import settings
from shared.logging import get_logger

logger = get_logger(__name__)


class RedisClient:
    """
    Async Redis client wrapper.

    The connection pool is created lazily on first use and shared by the
    whole process.
    """

    _client: Redis | None = None  # type: ignore[type-arg]

    @classmethod
    def get_client(cls) -> Redis:  # type: ignore[type-arg]
        """Get or create the async client."""
        if cls._client is None:
            cls._client = aioredis.from_url(
                settings.redis.url,
                encoding="utf-8",
                decode_responses=True,
                max_connections=settings.redis.max_connections,
            )
            logger.info("redis_client_created", host=settings.redis.host)
        return cls._client

    @classmethod
    async def close(cls) -> None:
        """Close the client and release all connections."""
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None
            logger.info("redis_client_closed")

    @classmethod
    async def health_check(cls) -> dict[str, Any]:
        """
        Check Redis health.

        Returns:
            dict with status and latency
        """
        try:
            start = time.perf_counter()
            pong = await cls.get_client().ping()
            latency_ms = (time.perf_counter() - start) * 1000

            return {
                "status": "healthy" if pong else "unhealthy",
                "latency_ms": round(latency_ms, 2),
            }
        except Exception as e:
            logger.error("redis_health_check_failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e),
            }

    # =========================================================================
    # Rate Limiting
    # =========================================================================

    @classmethod
    async def check_rate_limit(
        cls,
        key: str,
        max_requests: int,
        window_seconds: int,
    ) -> tuple[bool, int]:
        """
        Count a request against a fixed-window limit.

        The first request in a window sets the key's expiry, so Redis
        discards the counter once the window has passed.

        Args:
            key: Rate limit key (e.g., "rate:export:203.0.113.7")
            max_requests: Maximum requests allowed per window
            window_seconds: Window length in seconds

        Returns:
            Tuple of (allowed: bool, remaining: int)
        """
        client = cls.get_client()

        current = await client.incr(key)
        if current == 1:
            await client.expire(key, window_seconds)

        remaining = max(0, max_requests - current)
        return current <= max_requests, remaining
