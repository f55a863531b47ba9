# app/crud/withdrawal.py
from typing import List
from sqlalchemy import update
from sqlalchemy.orm import Session
from app.models.withdrawal import WithdrawalRequest, WithdrawalStatus


def create_request(db: Session, user_id: int, point: int) -> WithdrawalRequest:
    db_request = WithdrawalRequest(user_id=user_id, point=point, status=WithdrawalStatus.PENDING.value)
    db.add(db_request)
    db.commit()
    db.refresh(db_request)
    return db_request


def get_request(db: Session, request_id: int) -> WithdrawalRequest | None:
    return db.query(WithdrawalRequest).filter(WithdrawalRequest.id == request_id).first()


def list_requests(
    db: Session,
    status: str | None = None,
    user_id: int | None = None,
    skip: int = 0,
    limit: int = 50
) -> List[WithdrawalRequest]:
    query = db.query(WithdrawalRequest)
    if status:
        query = query.filter(WithdrawalRequest.status == status)
    if user_id is not None:
        query = query.filter(WithdrawalRequest.user_id == user_id)
    return query.order_by(WithdrawalRequest.id.desc()).offset(skip).limit(limit).all()


def set_status_if_pending(
    db: Session,
    request_id: int,
    new_status: str,
    processed_by_user_id: int | None = None
) -> bool:
    """
    Переводит заявку из PENDING в новый статус. Вернет False, если заявку
    уже кто-то обработал. Требует внешнего вызова db.commit().
    """
    stmt = update(WithdrawalRequest).where(
        WithdrawalRequest.id == request_id,
        WithdrawalRequest.status == WithdrawalStatus.PENDING.value
    ).values(
        status=new_status,
        processed_by_user_id=processed_by_user_id
    ).execution_options(synchronize_session=False)
    return db.execute(stmt).rowcount == 1
