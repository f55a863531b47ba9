# app/models/transaction.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from .user import User
from app.db.session import Base

class PointTransaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    outlet_id = Column(Integer, ForeignKey("outlets.id"), nullable=True)

    # Положительное число - начисление, отрицательное - списание
    point_delta = Column(Integer, nullable=False)
    # Причина изменения баланса
    content = Column(String, nullable=False)

    reward_id = Column(Integer, ForeignKey("rewards.id"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("User")
