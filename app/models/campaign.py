# app/models/campaign.py
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Boolean, Float, func
from sqlalchemy.orm import relationship
from .user import User
from app.db.session import Base

class ReferralCampaign(Base):
    __tablename__ = "referral_campaigns"

    id = Column(Integer, primary_key=True, index=True)
    # Мерчант, который создал кампанию и оплачивает ее награды
    owner_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    terms_and_conditions = Column(Text, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False, server_default='true')
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True) # NULL - кампания бессрочная

    days_to_redeem = Column(Integer, default=7, nullable=False)
    max_participants = Column(Integer, nullable=True) # NULL - без ограничений
    participants_count = Column(Integer, default=0, nullable=False, server_default='0')
    min_spend = Column(Float, nullable=True)

    # Награды: пригласившему - всегда баллы, приглашенному - POINT / DISCOUNT_PERCENT / DISCOUNT_AMOUNT
    referrer_reward_point = Column(Integer, default=0, nullable=False)
    referred_reward_type = Column(String, default="POINT", nullable=False)
    referred_reward_value = Column(Float, default=0, nullable=False)

    created_at = Column(DateTime, server_default=func.now())

    owner = relationship("User")
