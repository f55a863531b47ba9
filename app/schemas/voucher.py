# app/schemas/voucher.py
from pydantic import BaseModel
from typing import List

from app.schemas.reward import VoucherOfferBrief

class VoucherOfferList(BaseModel):
    redemptions: List[VoucherOfferBrief]
