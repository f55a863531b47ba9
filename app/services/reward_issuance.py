# app/services/reward_issuance.py

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    AlreadyClaimedError,
    CampaignDisabledError,
    CampaignEndedError,
    CapacityReachedError,
    InvalidCodeError,
    NotFoundError,
    NotNewCustomerError,
    SelfReferralError,
    ValidationError,
)
from app.crud import campaign as crud_campaign
from app.crud import checkin as crud_checkin
from app.crud import reward as crud_reward
from app.crud import user as crud_user
from app.models.campaign import ReferralCampaign
from app.models.reward import PayoutKind, PayoutSource, Reward
from app.utils.clock import Clock, utcnow
from app.utils.codes import CodeGenerator, get_code_generator

logger = logging.getLogger(__name__)


def referral_code_for(referrer_id: int, campaign_id: int, code_generator: CodeGenerator | None = None) -> str:
    """
    Код, который пригласивший показывает в QR для конкретной кампании.
    Порядок частей (referrer, campaign) одинаков при выдаче и при проверке.
    """
    generator = code_generator or get_code_generator()
    return generator.generate(str(referrer_id), str(campaign_id))


def calculate_expire_date(campaign: ReferralCampaign, now: datetime) -> datetime:
    """now + days_to_redeem, но не позже окончания кампании (если оно задано)."""
    expire_date = now + timedelta(days=campaign.days_to_redeem)
    if campaign.end_date is not None and campaign.end_date < expire_date:
        return campaign.end_date
    return expire_date


def payout_value(kind: PayoutKind, value: float) -> float:
    """Баллы начисляются только целыми: дробное значение POINT округляется при выдаче награды."""
    if kind != PayoutKind.POINT:
        return value
    rounded = int(round(value))
    if rounded != value:
        logger.warning(f"Fractional point payout {value} rounded to {rounded}.")
    return rounded


def get_referral_code(
    db: Session,
    referrer_id: int,
    campaign_id: int,
    code_generator: CodeGenerator | None = None
) -> str:
    """Возвращает реферальный код пользователя для кампании."""
    if not campaign_id:
        raise ValidationError()

    campaign = crud_campaign.get_campaign_by_id(db, campaign_id)
    if not campaign:
        raise NotFoundError("Campaign", campaign_id)

    return referral_code_for(referrer_id, campaign.id, code_generator)


def claim_referral(
    db: Session,
    claiming_user_id: int,
    campaign_id: int | None,
    referrer_id: int | None,
    presented_code: str | None,
    clock: Clock = utcnow,
    code_generator: CodeGenerator | None = None
) -> Reward:
    """
    Проверяет реферальный код и выдает награду по кампании.
    Баланс здесь не меняется: баллы переводятся только при погашении награды.
    """
    if not campaign_id or not referrer_id or not presented_code:
        raise ValidationError()

    if referrer_id == claiming_user_id:
        logger.warning(f"User {claiming_user_id} tried to claim own referral code for campaign {campaign_id}.")
        raise SelfReferralError()

    expected_code = referral_code_for(referrer_id, campaign_id, code_generator)
    if presented_code != expected_code:
        logger.warning(f"Invalid referral code from user {claiming_user_id} for campaign {campaign_id}.")
        raise InvalidCodeError("Неверный код подтверждения.")

    campaign = crud_campaign.get_campaign_by_id(db, campaign_id)
    if not campaign:
        raise NotFoundError("Campaign", campaign_id)

    now = clock()
    if campaign.end_date is not None and campaign.end_date < now:
        raise CampaignEndedError()
    if not campaign.is_active:
        raise CampaignDisabledError()

    if crud_reward.find_by_owner_and_campaign(db, claiming_user_id, campaign.id):
        logger.info(f"User {claiming_user_id} has already claimed a reward for campaign {campaign.id}.")
        raise AlreadyClaimedError()

    if not crud_user.get_user_by_id(db, referrer_id):
        raise NotFoundError("Referrer", referrer_id)

    if settings.REFERRAL_NEW_CUSTOMERS_ONLY and crud_checkin.exists_for_merchant(
        db, user_id=claiming_user_id, merchant_owner_id=campaign.owner_user_id
    ):
        raise NotNewCustomerError()

    referred_kind = PayoutKind(campaign.referred_reward_type)
    payouts = [
        {
            "beneficiary_user_id": referrer_id,
            "kind": PayoutKind.POINT.value,
            "value": payout_value(PayoutKind.POINT, campaign.referrer_reward_point),
            "source": PayoutSource.REFERRER.value,
        },
        {
            "beneficiary_user_id": claiming_user_id,
            "kind": referred_kind.value,
            "value": payout_value(referred_kind, campaign.referred_reward_value),
            "source": PayoutSource.REFERRED.value,
        },
    ]

    try:
        if not crud_campaign.increment_participants(db, campaign.id):
            raise CapacityReachedError()
        reward = crud_reward.create_reward(
            db,
            owner_user_id=claiming_user_id,
            campaign_id=campaign.id,
            referred_by_user_id=referrer_id,
            expire_date=calculate_expire_date(campaign, now),
            payouts=payouts,
        )
        db.commit()
    except IntegrityError:
        # Параллельный запрос успел создать награду первым
        db.rollback()
        logger.warning(f"Concurrent claim detected for user {claiming_user_id}, campaign {campaign.id}.")
        raise AlreadyClaimedError()
    except CapacityReachedError:
        db.rollback()
        logger.info(f"Campaign {campaign.id} has no free participant slots.")
        raise

    db.refresh(reward)
    logger.info(
        f"Issued reward {reward.id} to user {claiming_user_id} for campaign {campaign.id} "
        f"(referrer {referrer_id}, expires {reward.expire_date.isoformat()})."
    )
    return reward
