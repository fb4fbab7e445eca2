from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
from app.config import Settings, settings
from app.core.logging import get_logger

logger = get_logger(__name__)

# Current budget; create_app replaces it with the settings the app was built from
_limits = {
    "requests": settings.rate_limit_requests,
    "period": settings.rate_limit_period,
}

# Create limiter instance
limiter = Limiter(key_func=get_remote_address)


def configure_rate_limits(app_settings: Settings) -> None:
    """Apply the request budget from ``app_settings`` to every limited route."""
    _limits["requests"] = app_settings.rate_limit_requests
    _limits["period"] = app_settings.rate_limit_period


# Limits are resolved per request so they follow configure_rate_limits
def products_rate_limit() -> str:
    return f"{_limits['requests']}/{_limits['period']} seconds"


def generation_rate_limit() -> str:
    return f"{max(_limits['requests'] // 10, 1)}/{_limits['period']} seconds"


def health_rate_limit() -> str:
    return f"{_limits['requests'] * 2}/{_limits['period']} seconds"


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Custom rate limit exceeded handler."""
    logger.warning(
        "Rate limit exceeded",
        client_ip=get_remote_address(request),
        path=request.url.path,
        method=request.method,
        rate_limit=str(exc.detail)
    )

    retry_after = getattr(exc, 'retry_after', _limits["period"])

    response_data = {
        "error": "Rate limit exceeded",
        "message": "Too many requests. Please try again later.",
        "retry_after": retry_after
    }

    return JSONResponse(
        status_code=429,
        content=response_data,
        headers={"Retry-After": str(retry_after)}
    )
