import logging

from redis import Redis
from classroom.core.config import settings

logger = logging.getLogger(__name__)

_redis: Redis | None = None


def get_redis() -> Redis:
    """
    Returns the singleton Redis client. TLS works through the rediss:// scheme,
    the timeouts are tuned for managed providers (Upstash, Redis Cloud).
    """
    global _redis
    if _redis is None:
        _redis = Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            health_check_interval=30,
            socket_timeout=3,
            socket_connect_timeout=3,
            retry_on_timeout=True,
            max_connections=50,
        )
        # fail at startup rather than on the first request
        _redis.ping()
        logger.info("Connected to Redis at %s", settings.REDIS_URL)
    return _redis


def close_redis() -> None:
    global _redis
    if _redis is not None:
        _redis.close()
        _redis = None
