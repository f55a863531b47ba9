# app/crud/user.py
from sqlalchemy import update
from sqlalchemy.orm import Session
from app.models.user import User


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Получает пользователя по его первичному ключу."""
    return db.query(User).filter(User.id == user_id).first()


def apply_point_delta(db: Session, user_id: int, delta: int) -> int:
    """
    Атомарно изменяет баланс на знаковую дельту (`point = point + delta`).
    Никакого read-modify-write: параллельные расчеты по разным наградам
    не теряют изменения друг друга. Возвращает число обновленных строк.
    Требует внешнего вызова db.commit().
    """
    result = db.execute(
        update(User)
        .where(User.id == user_id)
        .values(point=User.point + delta)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def debit_points_if_sufficient(db: Session, user_id: int, amount: int) -> bool:
    """
    Списывает `amount` баллов, только если их хватает на балансе.
    Условие проверяется в том же UPDATE, поэтому уйти в минус при гонке нельзя.
    """
    result = db.execute(
        update(User)
        .where(User.id == user_id, User.point >= amount)
        .values(point=User.point - amount)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def get_user_balance(db: Session, user_id: int) -> int:
    """Читает актуальный баланс напрямую из БД, минуя кеш сессии."""
    balance = db.query(User.point).filter(User.id == user_id).scalar()
    return balance or 0
