# app/models/user.py

import enum

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from app.db.session import Base


class UserRole(str, enum.Enum):
    CUSTOMER = "CUSTOMER"
    BUSINESS_OWNER = "BUSINESS_OWNER"
    BUSINESS_STAFF = "BUSINESS_STAFF"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    role = Column(String, default=UserRole.CUSTOMER.value, nullable=False, server_default=UserRole.CUSTOMER.value)

    # Баланс баллов. Меняется только через атомарные дельты (crud.user.apply_point_delta)
    point = Column(Integer, default=0, nullable=False, server_default='0')

    # Для сотрудников - ID владельца бизнеса, на которого они работают
    merchant_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)
