from __future__ import annotations

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from src.api.deps import get_db_session, get_lookup_cache
from src.core.config import get_settings
from src.infrastructure.cache import CacheUnavailableError, LookupCache

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()


async def check_database(session: AsyncSession) -> dict:
    """Check the relational store with a trivial query."""
    try:
        await session.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "error", "message": str(e)[:100]}


async def check_cache(cache: LookupCache) -> dict:
    """Check the lookup cache backend; lookups still work when it is down."""
    try:
        await cache.ping()
        return {"status": "ok", "backend": get_settings().cache_backend}
    except CacheUnavailableError as e:
        return {"status": "error", "message": str(e)[:100]}


@router.get("/health", summary="Service health probe")
async def health_check(
    session: AsyncSession = Depends(get_db_session),
    cache: LookupCache = Depends(get_lookup_cache),
) -> dict:
    """Return basic service and datastore status information."""
    settings = get_settings()

    database_status = await check_database(session)
    cache_status = await check_cache(cache)

    overall_status = "ok"
    if database_status.get("status") != "ok" or cache_status.get("status") != "ok":
        overall_status = "degraded"

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "status": overall_status,
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": {
            "database": database_status,
            "cache": cache_status,
        },
    }
    logger.info("health_probe", **payload)
    return payload
