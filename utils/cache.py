"""
Redis Connection for Interview Sessions

One lazily created redis.asyncio client, shared by the session store.
When REDIS_URL is unset or the server cannot be reached at first use,
callers get None and keep sessions in memory for the life of the process.

Usage:
    from utils.cache import get_redis_client, interview_key

    redis = await get_redis_client()
    if redis:
        await redis.get(interview_key(session_id))
"""

import time
from typing import Any, Dict, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from config.settings import settings
from utils.logging import get_logger

logger = get_logger(__name__)

CONNECT_TIMEOUT_SECONDS = 5

_redis_client = None
# None until the first connection attempt
_redis_available: Optional[bool] = None


def interview_key(session_id: str) -> str:
    """Redis key holding one interview's state."""
    return f"{settings.REDIS_KEY_PREFIX}:interview:{session_id}"


async def get_redis_client():
    """
    Shared client, connecting on first call.

    Returns None when Redis is not configured or the first ping failed.
    The outcome is remembered so a missing server is probed only once.
    """
    global _redis_client, _redis_available

    if _redis_available is False:
        return None
    if _redis_client is not None:
        return _redis_client

    if not settings.REDIS_URL:
        logger.info("Redis not configured, interview sessions stay in memory")
        _redis_available = False
        return None

    client = redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=CONNECT_TIMEOUT_SECONDS,
        socket_connect_timeout=CONNECT_TIMEOUT_SECONDS,
    )
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        logger.warning(f"Redis unreachable ({e}), interview sessions stay in memory")
        await client.aclose()
        _redis_available = False
        return None

    logger.info("✅ Redis connected for interview sessions")
    _redis_client = client
    _redis_available = True
    return _redis_client


async def close_redis_client() -> None:
    """Close the shared client on shutdown and allow a fresh connect later."""
    global _redis_client, _redis_available
    if _redis_client is not None:
        await _redis_client.aclose()
    _redis_client = None
    _redis_available = None


# =============================================================================
# Health Check
# =============================================================================

async def check_redis_health() -> Dict[str, Any]:
    """
    Session backend report for /health.

    Returns:
        {"backend": "redis" | "memory", "healthy": bool, "latency_ms": float | None}
    """
    if not settings.REDIS_URL:
        return {"backend": "memory", "healthy": True, "latency_ms": None}

    client = await get_redis_client()
    if client is None:
        return {"backend": "redis", "healthy": False, "latency_ms": None}

    started = time.perf_counter()
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        logger.warning(f"Redis health check failed: {e}")
        return {"backend": "redis", "healthy": False, "latency_ms": None}

    latency_ms = round((time.perf_counter() - started) * 1000, 1)
    return {"backend": "redis", "healthy": True, "latency_ms": latency_ms}
