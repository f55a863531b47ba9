# app/main.py

import logging
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Конфигурация и ядро
from app.core.config import settings as config
from app.core.exceptions import RewardServiceError
from app.core.limiter import limiter
from app.core.logging_config import setup_logging
from app.core.redis import close_redis_client

# Роутеры FastAPI
from app.routers.v1.api import api_router as v1_router

# --- Инициализация ---
logger = logging.getLogger(__name__)

# --- Обработчики ошибок ---
async def reward_service_exception_handler(request: Request, exc: RewardServiceError):
    """Доменные ошибки -> 4xx/503 со стабильным кодом ошибки."""
    logger.info(f"{request.method} {request.url.path} rejected: {exc.kind} ({exc.message})")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error_code": exc.kind},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Глобальный обработчик для всех необработанных исключений.
    Логирует ошибку, клиенту подробности не отдаются.
    """
    logger.critical(f"Unhandled exception for request: {request.method} {request.url}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error.", "error_code": "INTERNAL_ERROR"},
    )

# --- Lifespan Manager (запуск и остановка приложения) ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL)
    logger.info("Application lifespan startup...")
    if not config.CODE_HMAC_SECRET:
        logger.warning("CODE_HMAC_SECRET is not set: referral and redemption codes use the legacy MD5 scheme.")

    yield

    await close_redis_client()
    logger.info("Application shut down.")

# --- Создание FastAPI приложения ---
app = FastAPI(
    title="Referral Rewards Service",
    description="Backend for referral campaigns, rewards and point redemption",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Лимитер запросов ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Регистрация обработчиков исключений ---
app.add_exception_handler(RewardServiceError, reward_service_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Подключение роутеров FastAPI ---
app.include_router(v1_router, prefix="/api")
