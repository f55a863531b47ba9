# app/services/reward_lookup.py

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import (
    CampaignDisabledError,
    CampaignExpiredError,
    CapacityReachedError,
    ExpiredOrUsedError,
    NotFoundError,
    OwnerNotFoundError,
    PermissionDeniedError,
    ReferrerNotFoundError,
)
from app.crud import campaign as crud_campaign
from app.crud import outlet as crud_outlet
from app.crud import reward as crud_reward
from app.crud import user as crud_user
from app.models.campaign import ReferralCampaign
from app.models.outlet import Outlet
from app.models.reward import Reward
from app.models.user import User, UserRole
from app.models.voucher import VoucherOffer
from app.utils.clock import Clock, utcnow

logger = logging.getLogger(__name__)


@dataclass
class RewardInfo:
    reward: Reward
    owner: User
    campaign: ReferralCampaign | None = None
    referrer: User | None = None
    outlets: List[Outlet] = field(default_factory=list)
    redemption: VoucherOffer | None = None

    @property
    def merchant_user_id(self) -> int | None:
        """Мерчант, который оплачивает баллы по этой награде."""
        if self.campaign is not None:
            return self.campaign.owner_user_id
        if self.redemption is not None:
            return self.redemption.merchant_user_id
        return None


def served_merchant_id(user: User) -> int | None:
    """ID мерчанта, от имени которого работает пользователь: свой для владельца, владельца - для сотрудника."""
    if user.role == UserRole.BUSINESS_OWNER.value:
        return user.id
    if user.role == UserRole.BUSINESS_STAFF.value:
        return user.merchant_id
    return None


def ensure_can_view(info: RewardInfo, user: User) -> None:
    """
    Карточку награды (с контактами владельца и пригласившего) видят владелец награды,
    мерчант, который ее оплачивает, с его сотрудниками и ADMIN.
    Награды платформы без мерчанта видит любой мерчант - гасить их можно в любой точке.
    """
    if user.role == UserRole.ADMIN.value or user.id == info.owner.id:
        return
    merchant_id = served_merchant_id(user)
    if merchant_id is not None and info.merchant_user_id in (None, merchant_id):
        return
    logger.warning(f"User {user.id} is not allowed to view reward {info.reward.id}.")
    raise PermissionDeniedError()


def ensure_reward_is_redeemable(reward: Reward, now: datetime) -> None:
    """Награда не использована и срок ее действия не истек."""
    if reward.is_used or reward.expire_date <= now:
        raise ExpiredOrUsedError()


def ensure_campaign_is_valid(campaign: ReferralCampaign, now: datetime) -> None:
    if not campaign.is_active:
        raise CampaignDisabledError()
    # Лимит проверяется строго "больше": последний принятый участник уже учтен в счетчике
    if campaign.max_participants is not None and campaign.participants_count > campaign.max_participants:
        raise CapacityReachedError()
    if campaign.end_date is not None and campaign.end_date <= now:
        raise CampaignExpiredError()


def get_reward_info(db: Session, reward_id: int, clock: Clock = utcnow) -> RewardInfo:
    """
    Собирает полное представление награды и проверяет, что ее можно погасить.
    Только чтение, ничего не меняет.
    """
    reward = crud_reward.get_reward_by_id(db, reward_id)
    if not reward:
        raise NotFoundError("Reward", reward_id)

    now = clock()
    ensure_reward_is_redeemable(reward, now)

    campaign = None
    if reward.campaign_id is not None:
        campaign = crud_campaign.get_campaign_by_id(db, reward.campaign_id)
        if not campaign:
            raise NotFoundError("Campaign", reward.campaign_id)
        ensure_campaign_is_valid(campaign, now)

    owner = crud_user.get_user_by_id(db, reward.owner_user_id)
    if not owner:
        raise OwnerNotFoundError()

    referrer = None
    if reward.referred_by_user_id is not None:
        referrer = crud_user.get_user_by_id(db, reward.referred_by_user_id)
        if not referrer:
            raise ReferrerNotFoundError()

    info = RewardInfo(reward=reward, owner=owner, campaign=campaign, referrer=referrer, redemption=reward.voucher_offer)

    merchant_id = info.merchant_user_id
    if merchant_id is not None:
        info.outlets = crud_outlet.get_outlets_by_owner(db, merchant_id)

    logger.debug(f"Resolved reward info for reward {reward.id} (campaign {reward.campaign_id}).")
    return info
