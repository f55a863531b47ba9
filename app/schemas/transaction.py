# app/schemas/transaction.py
from pydantic import BaseModel
from datetime import datetime
from typing import List

class PointTransaction(BaseModel):
    id: int
    outlet_id: int | None = None
    point_delta: int
    content: str
    reward_id: int | None = None
    created_at: datetime

    class Config:
        from_attributes = True

class RecentTransactions(BaseModel):
    transactions: List[PointTransaction]
