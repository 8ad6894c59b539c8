"""
Rate Limiting

slowapi limits for the interview API. Starting interviews and the read
endpoints are limited per client address; answers are limited per
interview session, so one chatty session cannot starve others behind
the same NAT.

Usage:
    from utils.rate_limit import limiter, limit_answers, rate_limit_exceeded_handler

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from config.settings import settings
from utils.logging import get_logger

logger = get_logger(__name__)

SESSION_KEY_PREFIX = "session:"


# =============================================================================
# Rate Limit Keys
# =============================================================================

def client_key(request: Request) -> str:
    """Client address, honoring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def session_key(request: Request) -> str:
    """Interview session from the path, or the client address when absent."""
    session_id = request.path_params.get("session_id")
    if session_id:
        return f"{SESSION_KEY_PREFIX}{session_id}"
    return client_key(request)


def _storage_uri() -> str:
    if settings.REDIS_URL:
        logger.info("Rate limiter counters stored in Redis")
        return settings.REDIS_URL
    logger.info("Rate limiter counters stored in memory")
    return "memory://"


limiter = Limiter(
    key_func=client_key,
    default_limits=[settings.RATE_LIMIT_READS],
    storage_uri=_storage_uri(),
    key_prefix=f"{settings.REDIS_KEY_PREFIX}:ratelimit",
)


RATE_LIMITS = {
    "start": settings.RATE_LIMIT_STARTS,
    "answer": settings.RATE_LIMIT_ANSWERS,
    "read": settings.RATE_LIMIT_READS,
}


# =============================================================================
# Exception Handler
# =============================================================================

async def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded
) -> JSONResponse:
    """429 naming the session when the limit was per session."""
    session_id = request.path_params.get("session_id")
    who = f"session {session_id}" if session_id else client_key(request)
    logger.warning(
        f"Rate limit exceeded for {who} on {request.url.path}",
        extra={"session_id": session_id} if session_id else None,
    )

    content = {
        "error": "RateLimitExceeded",
        "message": f"Too many requests. Limit: {exc.detail}",
        "retry_after": "60 seconds",
    }
    if session_id:
        content["session_id"] = session_id

    return JSONResponse(status_code=429, content=content, headers={"Retry-After": "60"})


# =============================================================================
# Decorators
# =============================================================================

def limit_starts(func):
    return limiter.limit(RATE_LIMITS["start"])(func)


def limit_answers(func):
    """Per-session answer limit."""
    return limiter.limit(RATE_LIMITS["answer"], key_func=session_key)(func)


def limit_reads(func):
    return limiter.limit(RATE_LIMITS["read"])(func)
