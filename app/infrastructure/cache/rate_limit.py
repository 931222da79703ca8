import asyncio
import logging
import os
from functools import wraps

from fastapi import Request
from redis.exceptions import RedisError
from starlette.responses import JSONResponse

from app.infrastructure.cache.redis_client import get_redis_client

log = logging.getLogger("app.rate_limit")

DEFAULT_RATE_LIMIT_MAX_REQUESTS = 5
DEFAULT_RATE_LIMIT_WINDOW = 60


def get_env_variable(var_name: str, default=None):
    """Read an env variable, converting digit-only values to int."""
    value = os.getenv(var_name)
    if value is None:
        return default
    if value.isdigit():
        return int(value)
    return value


def rate_limit_enabled() -> bool:
    return str(get_env_variable("RATE_LIMIT_ENABLED", "false")).lower() in ("1", "true", "yes")


def client_identifier(fastapi_request: Request) -> str:
    x_forwarded_for = fastapi_request.headers.get("x-forwarded-for")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return fastapi_request.client.host if fastapi_request.client else "unknown"


def hit_counter(key: str, window: int) -> int:
    """Count one hit; the first hit of a window also starts its TTL.

    INCR and EXPIRE go through one MULTI/EXEC so a key never outlives its
    window without a TTL. EXPIRE NX needs Redis 7+.
    """
    pipe = get_redis_client().pipeline()
    pipe.incr(key)
    pipe.expire(key, window, nx=True)
    current, _ = pipe.execute()
    return int(current)


def rate_limit(scope: str, max_requests=None, window=None):
    """Fixed-window limit per client address, stored in Redis.

    Off unless RATE_LIMIT_ENABLED is set. The wrapped endpoint must accept a
    ``fastapi_request`` keyword argument. Redis outages fail open.
    """
    def decorator(f):
        @wraps(f)
        async def decorated_function(*args, **kwargs):
            if not rate_limit_enabled():
                return await f(*args, **kwargs)

            actual_max_requests = max_requests or get_env_variable("RATE_LIMIT_MAX_REQUESTS", DEFAULT_RATE_LIMIT_MAX_REQUESTS)
            actual_window = window or get_env_variable("RATE_LIMIT_WINDOW", DEFAULT_RATE_LIMIT_WINDOW)

            fastapi_request = kwargs.get("fastapi_request")
            if fastapi_request is None:
                raise RuntimeError(f"{f.__name__} must take fastapi_request to be rate limited")

            key = f"rate_limit:{scope}:{client_identifier(fastapi_request)}"
            try:
                current = await asyncio.to_thread(hit_counter, key, actual_window)
            except RedisError:
                log.warning("Rate limit check skipped, Redis unavailable", exc_info=True)
                return await f(*args, **kwargs)

            if current > actual_max_requests:
                return JSONResponse(
                    status_code=429,
                    content={"message": "Rate limit exceeded. Try again later."},
                )
            return await f(*args, **kwargs)
        return decorated_function
    return decorator
