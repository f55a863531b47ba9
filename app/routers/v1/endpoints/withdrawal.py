# app/routers/v1/endpoints/withdrawal.py

import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.dependencies import get_customer_user, get_db, get_merchant_user
from app.models.user import User
from app.schemas.withdrawal import WithdrawalCreate, WithdrawalList, WithdrawalRequest
from app.services import withdrawal as withdrawal_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/withdraw/request", response_model=WithdrawalRequest, status_code=status.HTTP_201_CREATED)
def request_withdrawal_endpoint(
    payload: WithdrawalCreate,
    current_user: User = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    return withdrawal_service.request_withdrawal(db, user_id=current_user.id, point=payload.point)


@router.put("/withdraw/{request_id}/cancel", response_model=WithdrawalRequest)
def cancel_withdrawal_endpoint(
    request_id: int,
    current_user: User = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    return withdrawal_service.cancel_withdrawal(db, request_id=request_id, user_id=current_user.id)


@router.put("/withdraw/{request_id}/approve", response_model=WithdrawalRequest)
def approve_withdrawal_endpoint(
    request_id: int,
    current_user: User = Depends(get_merchant_user),
    db: Session = Depends(get_db)
):
    """[МЕРЧАНТ] Одобряет заявку и списывает баллы."""
    return withdrawal_service.approve_withdrawal(db, request_id=request_id, acting_user_id=current_user.id)


@router.put("/withdraw/{request_id}/reject", response_model=WithdrawalRequest)
def reject_withdrawal_endpoint(
    request_id: int,
    current_user: User = Depends(get_merchant_user),
    db: Session = Depends(get_db)
):
    """[МЕРЧАНТ] Отклоняет заявку, баланс не меняется."""
    return withdrawal_service.reject_withdrawal(db, request_id=request_id, acting_user_id=current_user.id)


@router.get("/withdraw", response_model=WithdrawalList)
def list_withdrawals_endpoint(
    status_filter: str | None = Query(None, alias="status", description="PENDING, APPROVED, REJECTED, CANCELLED"),
    current_user: User = Depends(get_merchant_user),
    db: Session = Depends(get_db)
):
    """[МЕРЧАНТ] Список заявок на вывод с фильтром по статусу."""
    requests = withdrawal_service.list_withdrawals(db, status=status_filter)
    return WithdrawalList(withdrawal_requests=requests)
