# app/routers/v1/endpoints/ping.py

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.redis import get_redis_client, redis_is_available
from app.dependencies import get_db

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/ping")
async def ping(
    db: Session = Depends(get_db),
    redis: Redis = Depends(get_redis_client)
):
    """Проверка живости: БД и Redis."""
    checks = {"database": "ok", "redis": "ok"}
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.error("Health check: database is unavailable.", exc_info=True)
        checks["database"] = "unavailable"
    if not await redis_is_available(redis):
        checks["redis"] = "unavailable"

    status_code = 200 if all(value == "ok" for value in checks.values()) else 503
    return JSONResponse(status_code=status_code, content={"status": "ok" if status_code == 200 else "degraded", **checks})
