# app/core/security.py

from datetime import datetime, timedelta, timezone

from jose import jwt

from app.core.config import settings


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Создает JWT токен. Используется сервисом авторизации и в тестах."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Декодирует и проверяет JWT. Бросает jose.JWTError, если токен невалиден."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
