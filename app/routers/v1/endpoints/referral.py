# app/routers/v1/endpoints/referral.py

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.dependencies import get_customer_user, get_db
from app.models.user import User
from app.schemas.referral import ReferralClaimRequest, ReferralCode
from app.schemas.reward import Reward
from app.services import reward_issuance

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/referrals/{campaign_id}/code", response_model=ReferralCode)
def get_referral_code_endpoint(
    campaign_id: int,
    current_user: User = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    """Реферальный код текущего пользователя для кампании (для QR-кода)."""
    code = reward_issuance.get_referral_code(db, referrer_id=current_user.id, campaign_id=campaign_id)
    return ReferralCode(campaign_id=campaign_id, code=code)


@router.post("/referrals/claim", response_model=Reward, status_code=status.HTTP_201_CREATED)
def claim_referral_endpoint(
    claim: ReferralClaimRequest,
    current_user: User = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    """
    Приглашенный клиент предъявляет код пригласившего и получает награду.
    Баллы будут начислены при погашении награды в торговой точке.
    """
    return reward_issuance.claim_referral(
        db,
        claiming_user_id=current_user.id,
        campaign_id=claim.campaign_id,
        referrer_id=claim.referrer_id,
        presented_code=claim.code,
    )
