# app/routers/v1/endpoints/voucher.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.dependencies import get_current_user, get_customer_user, get_db
from app.models.user import User
from app.schemas.reward import Reward
from app.schemas.voucher import VoucherOfferList
from app.services import settlement as settlement_service
from app.services import voucher as voucher_service

router = APIRouter()


@router.get("/redemption", response_model=VoucherOfferList)
def list_voucher_offers_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Доступные предложения обмена баллов на ваучеры."""
    return VoucherOfferList(redemptions=voucher_service.list_voucher_offers(db))


@router.post("/redemption/{offer_id}/exchange", response_model=Reward, status_code=status.HTTP_201_CREATED)
def exchange_voucher_endpoint(
    offer_id: int,
    current_user: User = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    """Обменивает баллы текущего пользователя на ваучер."""
    return settlement_service.exchange_voucher(db, customer_id=current_user.id, offer_id=offer_id)
