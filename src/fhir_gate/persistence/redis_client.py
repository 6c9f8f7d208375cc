"""
Redis client with connection pooling for the shared processed set.

Only needed when PROCESSED_BACKEND=redis (several gate instances watching the
same location, or claims that must survive a restart).
"""

import logging
from typing import Optional

from redis import ConnectionPool, Redis

from fhir_gate.config import Settings

logger = logging.getLogger(__name__)


class RedisClient:
    """
    Redis client wrapper with a process-wide connection pool.

    Dispatcher worker threads share the pool; redis-py clients are thread-safe.
    """

    _pool: Optional[ConnectionPool] = None

    @classmethod
    def get_client(cls, settings: Settings) -> Redis:
        """
        Get Redis client with connection pooling.

        Args:
            settings: Application settings

        Returns:
            Redis client instance
        """
        if cls._pool is None:
            cls._pool = ConnectionPool.from_url(
                settings.REDIS_URL,
                max_connections=max(4, settings.WORKER_CONCURRENCY * 2),
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
            )
            logger.info("Initialized Redis connection pool")

        return Redis(connection_pool=cls._pool)

    @classmethod
    def close_pool(cls) -> None:
        """Close connection pool (cleanup on shutdown)."""
        if cls._pool is not None:
            cls._pool.disconnect()
            cls._pool = None
            logger.info("Closed Redis connection pool")
