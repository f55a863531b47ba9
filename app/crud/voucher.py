# app/crud/voucher.py
from typing import List
from sqlalchemy.orm import Session
from app.models.voucher import VoucherOffer

def get_active_offer(db: Session, offer_id: int) -> VoucherOffer | None:
    """Предложение обмена, только если оно существует и активно."""
    return db.query(VoucherOffer).filter(
        VoucherOffer.id == offer_id,
        VoucherOffer.is_active == True
    ).first()

def get_active_offers(db: Session) -> List[VoucherOffer]:
    return db.query(VoucherOffer).filter(VoucherOffer.is_active == True).order_by(VoucherOffer.point.asc()).all()

def create_offer(
    db: Session,
    point: int,
    value: float,
    discount_type: str = "DISCOUNT_AMOUNT",
    image_url: str | None = None,
    merchant_user_id: int | None = None
) -> VoucherOffer:
    """Создает объект предложения и добавляет его в сессию. Требует внешнего вызова db.commit()."""
    offer = VoucherOffer(
        point=point,
        value=value,
        discount_type=discount_type,
        image_url=image_url,
        merchant_user_id=merchant_user_id,
        is_active=True,
    )
    db.add(offer)
    return offer
