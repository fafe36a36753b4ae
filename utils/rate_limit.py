"""
Rate Limiting

slowapi limiter shared by the public submission endpoint and the admin
form endpoints. Counters live in Redis when REDIS_URL is set, in process
memory otherwise.

Usage:
    from utils.rate_limit import limiter, RATE_LIMITS

    @router.post("")
    @limiter.limit(RATE_LIMITS["submit"])
    async def create_application(request: Request, ...):
        ...
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from config.settings import settings
from utils.logging import get_logger

logger = get_logger(__name__)


# Per-endpoint-group limits
RATE_LIMITS = {
    "submit": "30/minute",     # POST /api/applications
    "admin": "120/minute",     # /api/admin/forms
    "default": "200/minute",
}


def client_key(request: Request) -> str:
    """First X-Forwarded-For hop, else the socket peer address."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or get_remote_address(request)


def _storage_uri() -> str:
    if settings.REDIS_URL:
        logger.info("Rate limiter storage: redis")
        return settings.REDIS_URL
    logger.info("Rate limiter storage: memory")
    return "memory://"


limiter = Limiter(
    key_func=client_key,
    default_limits=[RATE_LIMITS["default"]],
    storage_uri=_storage_uri(),
)


async def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded
) -> JSONResponse:
    """429 in the shared error envelope, with Retry-After set to the limit window."""
    retry_after = exc.limit.limit.get_expiry() if exc.limit is not None else 60
    logger.warning(f"Rate limit {exc.detail} hit by {client_key(request)} on {request.url.path}")

    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "error": f"Too many requests. Limit: {exc.detail}",
            "errorType": "RATE_LIMIT_EXCEEDED",
        },
        headers={"Retry-After": str(retry_after)},
    )
