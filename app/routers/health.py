"""
Health Check Router - AI Use-Case Portfolio
app/routers/health.py

Returns health status of all dependencies with real connection checks.
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Dict, Optional
from datetime import datetime, timezone

import redis

from app.config import settings
from app.core.exceptions import DatabaseConnectionException
from app.services.snowflake import get_snowflake_connection

router = APIRouter(prefix=settings.API_PREFIX, tags=["Health"])



#  Schemas


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]


class CacheStatsResponse(BaseModel):
    redis_connected: bool
    keys_count: Optional[int] = None
    memory_used: Optional[str] = None
    error: Optional[str] = None



#  Dependency Health Checks


def _short(error: Exception) -> str:
    msg = str(error)
    return msg[:100] + "..." if len(msg) > 100 else msg


async def check_snowflake() -> str:
    """Check Snowflake connection health."""
    try:
        conn = get_snowflake_connection()
    except DatabaseConnectionException as e:
        return f"unhealthy: {e}"
    except Exception as e:
        return f"unhealthy: {_short(e)}"

    try:
        cursor = conn.cursor()
        cursor.execute("SELECT CURRENT_USER()")
        result = cursor.fetchone()
        cursor.close()
        return f"healthy (User: {result[0]})"
    except Exception as e:
        return f"unhealthy: {_short(e)}"
    finally:
        conn.close()


async def check_redis() -> str:
    """Check Redis connection health. A disabled cache counts as healthy."""
    if not settings.CACHE_ENABLED:
        return "healthy (cache disabled)"
    try:
        client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )
        client.ping()
        client.close()
        return "healthy"
    except (redis.RedisError, ConnectionError) as e:
        return f"unhealthy: {_short(e)}"



#  Main Health Check Route


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "All dependencies healthy"},
        503: {"description": "One or more dependencies unhealthy"},
    },
    summary="Health check",
    description="Check health of all dependencies.",
)
async def health_check():
    """Check health of all dependencies."""
    dependencies = {
        "snowflake": await check_snowflake(),
        "redis": await check_redis(),
    }

    all_healthy = all(v.startswith("healthy") for v in dependencies.values())

    response = HealthResponse(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        dependencies=dependencies,
    )

    if all_healthy:
        return response
    else:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(mode="json"),
        )


@router.get(
    "/health/cache/stats",
    response_model=CacheStatsResponse,
    summary="Redis cache statistics",
)
async def cache_stats() -> CacheStatsResponse:
    """Get Redis cache connection status and statistics."""
    from app.services.cache import get_cache

    cache = get_cache()
    if not cache:
        return CacheStatsResponse(
            redis_connected=False,
            error="Redis not configured or unreachable",
        )
    try:
        info = cache.client.info()
        return CacheStatsResponse(
            redis_connected=True,
            keys_count=cache.client.dbsize(),
            memory_used=info.get("used_memory_human"),
        )
    except redis.RedisError as e:
        return CacheStatsResponse(redis_connected=False, error=str(e))
