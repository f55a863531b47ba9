# app/models/reward.py

import enum

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Float, UniqueConstraint, func
from sqlalchemy.orm import relationship
from .campaign import ReferralCampaign
from .voucher import VoucherOffer
from app.db.session import Base


class PayoutKind(str, enum.Enum):
    POINT = "POINT"
    DISCOUNT_PERCENT = "DISCOUNT_PERCENT"
    DISCOUNT_AMOUNT = "DISCOUNT_AMOUNT"


class PayoutSource(str, enum.Enum):
    REFERRER = "REFERRER"
    REFERRED = "REFERRED"
    REDEEM = "REDEEM"


class Reward(Base):
    __tablename__ = "rewards"
    # Один пользователь - одна награда на кампанию.
    # Для наград из обмена ваучеров campaign_id = NULL, и ограничение на них не действует.
    __table_args__ = (
        UniqueConstraint("owner_user_id", "campaign_id", name="uq_rewards_owner_campaign"),
    )

    id = Column(Integer, primary_key=True, index=True)
    owner_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Награда появляется либо из реферальной кампании, либо из обмена баллов на ваучер
    campaign_id = Column(Integer, ForeignKey("referral_campaigns.id"), nullable=True, index=True)
    voucher_offer_id = Column(Integer, ForeignKey("voucher_offers.id"), nullable=True)
    referred_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    expire_date = Column(DateTime, nullable=False)

    # Флаг выставляется ровно один раз, вместе с use_date и use_place_id
    is_used = Column(Boolean, default=False, nullable=False, server_default='false')
    use_date = Column(DateTime, nullable=True)
    use_place_id = Column(Integer, ForeignKey("outlets.id"), nullable=True)
    redeemed_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    payouts = relationship(
        "RewardPayout",
        order_by="RewardPayout.position",
        cascade="all, delete-orphan",
        back_populates="reward",
    )
    campaign = relationship("ReferralCampaign")
    voucher_offer = relationship("VoucherOffer")


class RewardPayout(Base):
    __tablename__ = "reward_payouts"

    id = Column(Integer, primary_key=True, index=True)
    reward_id = Column(Integer, ForeignKey("rewards.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    beneficiary_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    kind = Column(String, nullable=False)    # PayoutKind
    value = Column(Float, nullable=False)
    source = Column(String, nullable=False)  # PayoutSource

    reward = relationship("Reward", back_populates="payouts")
