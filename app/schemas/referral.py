# app/schemas/referral.py
from pydantic import BaseModel, Field

class ReferralClaimRequest(BaseModel):
    """Данные из QR-кода пригласившего. Принимаем только эти поля."""
    campaign_id: int | None = None
    referrer_id: int | None = None
    code: str | None = Field(default=None, max_length=12)

class ReferralCode(BaseModel):
    campaign_id: int
    code: str
