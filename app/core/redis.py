# app/core/redis.py
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)

# Общий клиент: хранилище лимитера и проверка живости сервиса
redis_client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)


async def get_redis_client():
    """Зависимость для получения клиента Redis в эндпоинтах."""
    return redis_client


async def redis_is_available(client: redis.Redis) -> bool:
    try:
        await client.ping()
    except (RedisError, ConnectionError, OSError):
        logger.error("Health check: redis is unavailable.", exc_info=True)
        return False
    return True


async def close_redis_client() -> None:
    await redis_client.aclose()
    logger.info("Redis client closed.")
