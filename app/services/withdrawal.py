# app/services/withdrawal.py

import logging
from typing import List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    InsufficientBalanceError,
    InvalidStatusError,
    NotFoundError,
    PermissionDeniedError,
    SettlementFailedError,
    ValidationError,
)
from app.crud import transaction as crud_transaction
from app.crud import user as crud_user
from app.crud import withdrawal as crud_withdrawal
from app.db.session import scoped_transaction
from app.models.withdrawal import WithdrawalRequest, WithdrawalStatus

logger = logging.getLogger(__name__)


def request_withdrawal(db: Session, user_id: int, point: int) -> WithdrawalRequest:
    """Создает заявку на вывод баллов. Баллы списываются только при одобрении."""
    if not point or point <= 0:
        raise ValidationError("Количество баллов должно быть положительным.")

    balance = crud_user.get_user_balance(db, user_id)
    if balance < point:
        raise InsufficientBalanceError()

    withdrawal = crud_withdrawal.create_request(db, user_id=user_id, point=point)
    logger.info(f"User {user_id} requested withdrawal of {point} points (request {withdrawal.id}).")
    return withdrawal


def _get_pending(db: Session, request_id: int) -> WithdrawalRequest:
    withdrawal = crud_withdrawal.get_request(db, request_id)
    if not withdrawal:
        raise NotFoundError("WithdrawalRequest", request_id)
    if withdrawal.status != WithdrawalStatus.PENDING.value:
        raise InvalidStatusError()
    return withdrawal


def approve_withdrawal(db: Session, request_id: int, acting_user_id: int) -> WithdrawalRequest:
    """
    Одобряет заявку: смена статуса, списание и строка журнала - одной транзакцией.
    Если к моменту одобрения баллов уже не хватает, заявка остается в PENDING.
    """
    withdrawal = _get_pending(db, request_id)
    user_id, point = withdrawal.user_id, withdrawal.point

    if not crud_user.get_user_by_id(db, user_id):
        raise NotFoundError("User", user_id)

    try:
        with scoped_transaction(db):
            if not crud_withdrawal.set_status_if_pending(
                db, request_id, WithdrawalStatus.APPROVED.value, processed_by_user_id=acting_user_id
            ):
                raise InvalidStatusError()
            if not crud_user.debit_points_if_sufficient(db, user_id, point):
                raise InsufficientBalanceError()
            crud_transaction.append(db, user_id=user_id, delta=-point, reason=f"Вывод баллов, заявка #{request_id}")
    except SQLAlchemyError as e:
        logger.error(f"Approval of withdrawal {request_id} failed and was rolled back.", exc_info=True)
        raise SettlementFailedError() from e

    logger.info(f"Withdrawal {request_id} approved by user {acting_user_id}: {point} points debited from user {user_id}.")
    db.refresh(withdrawal)
    return withdrawal


def _close_withdrawal(db: Session, request_id: int, new_status: str, acting_user_id: int) -> WithdrawalRequest:
    withdrawal = _get_pending(db, request_id)
    if not crud_withdrawal.set_status_if_pending(db, request_id, new_status, processed_by_user_id=acting_user_id):
        db.rollback()
        raise InvalidStatusError()
    db.commit()
    db.refresh(withdrawal)
    logger.info(f"Withdrawal {request_id} moved to {new_status} by user {acting_user_id}.")
    return withdrawal


def reject_withdrawal(db: Session, request_id: int, acting_user_id: int) -> WithdrawalRequest:
    return _close_withdrawal(db, request_id, WithdrawalStatus.REJECTED.value, acting_user_id)


def cancel_withdrawal(db: Session, request_id: int, user_id: int) -> WithdrawalRequest:
    """Клиент отзывает свою заявку, пока она не обработана."""
    withdrawal = crud_withdrawal.get_request(db, request_id)
    if not withdrawal:
        raise NotFoundError("WithdrawalRequest", request_id)
    if withdrawal.user_id != user_id:
        raise PermissionDeniedError()
    return _close_withdrawal(db, request_id, WithdrawalStatus.CANCELLED.value, user_id)


def list_withdrawals(db: Session, status: str | None = None, user_id: int | None = None) -> List[WithdrawalRequest]:
    if status and status not in WithdrawalStatus.__members__:
        raise ValidationError(f"Неизвестный статус заявки: {status}")
    return crud_withdrawal.list_requests(db, status=status, user_id=user_id)
