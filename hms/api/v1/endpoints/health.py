"""
Public health check — database and Redis connectivity.
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hms.api.v1.deps import get_db
from hms.schemas.common import ApiResponse, envelope

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


class HealthStatus(BaseModel):
    db: bool
    redis: bool


@router.get("/health", response_model=ApiResponse[HealthStatus])
async def health(request: Request, db: AsyncSession = Depends(get_db)) -> ApiResponse:
    result = HealthStatus(db=False, redis=False)

    try:
        await db.execute(select(1))
        result.db = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)

    try:
        r = aioredis.from_url(request.app.state.settings.REDIS_URL)
        try:
            await r.ping()
            result.redis = True
        finally:
            await r.aclose()
    except Exception as e:
        logger.error("Health check Redis failure: %s", e)

    message = "ok" if result.db and result.redis else "degraded"
    return envelope(result, message)
