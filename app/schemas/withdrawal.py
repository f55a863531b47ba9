# app/schemas/withdrawal.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Literal

class WithdrawalCreate(BaseModel):
    point: int = Field(..., gt=0, description="Сколько баллов вывести")

class WithdrawalRequest(BaseModel):
    id: int
    user_id: int
    point: int
    status: Literal["PENDING", "APPROVED", "REJECTED", "CANCELLED"]
    processed_by_user_id: int | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True

class WithdrawalList(BaseModel):
    withdrawal_requests: List[WithdrawalRequest]
