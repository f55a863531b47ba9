# app/models/redeem_request.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from app.db.session import Base

class RedemptionRequest(Base):
    __tablename__ = "redemption_requests"

    id = Column(Integer, primary_key=True, index=True)
    # Не больше одной заявки на награду: повторный запрос перезаписывает код
    reward_id = Column(Integer, ForeignKey("rewards.id"), nullable=False, unique=True)
    code = Column(String(12), nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now())
    # Точка отсчета окна действия кода
    updated_at = Column(DateTime, nullable=False)
