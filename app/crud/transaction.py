# app/crud/transaction.py
from typing import List
from datetime import datetime
from sqlalchemy.orm import Session
from app.models.transaction import PointTransaction


def append(
    db: Session,
    user_id: int,
    delta: int,
    reason: str,
    outlet_id: int | None = None,
    reward_id: int | None = None,
    created_at: datetime | None = None
) -> PointTransaction:
    """
    Добавляет неизменяемую запись в журнал операций с баллами.
    Требует внешнего вызова db.commit().
    """
    transaction = PointTransaction(
        user_id=user_id,
        outlet_id=outlet_id,
        point_delta=delta,
        content=reason,
        reward_id=reward_id,
    )
    if created_at is not None:
        transaction.created_at = created_at
    db.add(transaction)
    db.flush()
    return transaction


def get_recent_transactions(db: Session, user_id: int, limit: int = 5) -> List[PointTransaction]:
    """Последние операции пользователя (от новых к старым)."""
    return db.query(PointTransaction).filter(
        PointTransaction.user_id == user_id
    ).order_by(PointTransaction.created_at.desc(), PointTransaction.id.desc()).limit(limit).all()


def get_reward_transactions(db: Session, reward_id: int) -> List[PointTransaction]:
    return db.query(PointTransaction).filter(
        PointTransaction.reward_id == reward_id
    ).order_by(PointTransaction.id).all()
