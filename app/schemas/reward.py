# app/schemas/reward.py
from pydantic import BaseModel
from datetime import datetime
from typing import List, Literal

PayoutKindLiteral = Literal["POINT", "DISCOUNT_PERCENT", "DISCOUNT_AMOUNT"]
PayoutSourceLiteral = Literal["REFERRER", "REFERRED", "REDEEM"]


class RewardPayout(BaseModel):
    beneficiary_user_id: int
    kind: PayoutKindLiteral
    value: float
    source: PayoutSourceLiteral

    class Config:
        from_attributes = True


class Reward(BaseModel):
    id: int
    owner_user_id: int
    campaign_id: int | None = None
    voucher_offer_id: int | None = None
    referred_by_user_id: int | None = None
    expire_date: datetime
    is_used: bool
    use_date: datetime | None = None
    use_place_id: int | None = None
    payouts: List[RewardPayout] = []

    class Config:
        from_attributes = True


class UserBrief(BaseModel):
    id: int
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None

    class Config:
        from_attributes = True


class CampaignBrief(BaseModel):
    id: int
    owner_user_id: int
    name: str
    description: str | None = None
    terms_and_conditions: str | None = None
    is_active: bool
    end_date: datetime | None = None
    days_to_redeem: int
    max_participants: int | None = None
    participants_count: int
    min_spend: float | None = None
    referrer_reward_point: int
    referred_reward_type: str
    referred_reward_value: float

    class Config:
        from_attributes = True


class OutletBrief(BaseModel):
    id: int
    name: str
    address: str
    phone: str | None = None
    image_url: str | None = None

    class Config:
        from_attributes = True


class VoucherOfferBrief(BaseModel):
    id: int
    discount_type: str
    point: int
    value: float
    image_url: str | None = None

    class Config:
        from_attributes = True


class RewardInfo(BaseModel):
    """Полное представление награды: сама награда, кампания, владелец, пригласивший и точки."""
    reward: Reward
    owner: UserBrief
    campaign: CampaignBrief | None = None
    referrer: UserBrief | None = None
    outlets: List[OutletBrief] = []
    redemption: VoucherOfferBrief | None = None

    class Config:
        from_attributes = True


class RedemptionCode(BaseModel):
    reward_id: int
    code: str
    expires_at: datetime


class CompleteRedemptionRequest(BaseModel):
    outlet_id: int


class SuccessResponse(BaseModel):
    success: bool = True
    message: str = "success"
