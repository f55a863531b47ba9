# app/dependencies.py

import logging
from typing import Callable, Iterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.security import decode_access_token
from app.db.session import SessionLocal
from app.models.user import User, UserRole

# --- Инициализация логгера ---
logger = logging.getLogger(__name__)

# --- Схемы аутентификации ---
strict_bearer_scheme = HTTPBearer(auto_error=True)

# --- Управление сессией БД ---
def get_db() -> Iterator[Session]:
    """
    Основная зависимость FastAPI для получения сессии БД.
    Это генератор, который корректно работает с `Depends`.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# --- Зависимости аутентификации и авторизации ---

def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(strict_bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    ОБЯЗАТЕЛЬНАЯ зависимость.
    Требует валидный токен. Если его нет или он невалиден - вызывает ошибку 401.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(credentials.credentials)
        user_id = payload.get("sub")
        if user_id is None:
            logger.warning("Token payload is missing 'sub' (user_id).")
            raise credentials_exception
    except JWTError as e:
        logger.warning(f"JWT Error during token decoding: {e}")
        raise credentials_exception

    try:
        user = db.query(User).filter(User.id == int(user_id)).first()
    except ValueError:
        logger.warning(f"Token 'sub' is not a valid user id: {user_id!r}")
        raise credentials_exception

    if user is None:
        logger.warning(f"User with ID {user_id} from token not found in DB.")
        raise credentials_exception
    request.state.user = user
    logger.debug(f"Successfully authenticated user ID: {user.id} (role: {user.role})")
    return user


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """
    Фабрика зависимостей: пропускает только пользователей с одной из указанных ролей.
    ADMIN допускается всегда.
    """
    allowed = {role.value for role in roles} | {UserRole.ADMIN.value}

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(f"Permission denied for user {current_user.id} with role {current_user.role}. Allowed: {sorted(allowed)}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to access this resource."
            )
        return current_user

    return dependency


get_customer_user = require_roles(UserRole.CUSTOMER)
get_merchant_user = require_roles(UserRole.BUSINESS_OWNER, UserRole.BUSINESS_STAFF)
