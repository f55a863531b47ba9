# app/models/voucher.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Float, func
from app.db.session import Base

class VoucherOffer(Base):
    """Предложение обменять баллы на скидочный ваучер."""
    __tablename__ = "voucher_offers"

    id = Column(Integer, primary_key=True, index=True)
    # NULL - предложение платформы, иначе - конкретного мерчанта
    merchant_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    discount_type = Column(String, default="DISCOUNT_AMOUNT", nullable=False) # DISCOUNT_AMOUNT | DISCOUNT_PERCENT
    point = Column(Integer, nullable=False) # стоимость в баллах
    value = Column(Float, nullable=False)   # размер скидки
    image_url = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, server_default='true')
    created_at = Column(DateTime, server_default=func.now())
