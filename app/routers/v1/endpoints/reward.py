# app/routers/v1/endpoints/reward.py

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.limiter import limiter
from app.crud import reward as crud_reward
from app.dependencies import get_current_user, get_customer_user, get_db, get_merchant_user
from app.models.user import User
from app.schemas.reward import (
    CompleteRedemptionRequest,
    RedemptionCode,
    Reward,
    RewardInfo,
    SuccessResponse,
)
from app.services import redemption as redemption_service
from app.services import reward_lookup
from app.services import settlement as settlement_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/rewards", response_model=List[Reward])
def list_my_rewards(
    include_used: bool = Query(False, description="Показывать уже использованные награды"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Награды текущего пользователя (от новых к старым)."""
    return crud_reward.get_user_rewards(db, owner_user_id=current_user.id, include_used=include_used)


@router.get("/rewards/{reward_id}", response_model=RewardInfo)
def get_reward_info_endpoint(
    reward_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Полная информация о награде: кампания, владелец, пригласивший и точки погашения.
    Доступна владельцу награды и мерчанту, который ее оплачивает.
    """
    info = reward_lookup.get_reward_info(db, reward_id)
    reward_lookup.ensure_can_view(info, current_user)
    return RewardInfo.model_validate(info)


@router.post("/rewards/{reward_id}/redeem-request", response_model=RedemptionCode)
def request_redemption_code(
    reward_id: int,
    current_user: User = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    """Выдает клиенту свежий код для предъявления на кассе."""
    request = redemption_service.request_redemption(db, reward_id=reward_id, requesting_user_id=current_user.id)
    return RedemptionCode(
        reward_id=request.reward_id,
        code=request.code,
        expires_at=request.updated_at + redemption_service.code_ttl(),
    )


@router.get("/redemption-codes/{code}", response_model=RewardInfo)
@limiter.limit(settings.CODE_LOOKUP_RATE_LIMIT)
def resolve_redemption_code(
    request: Request,
    code: str,
    current_user: User = Depends(get_merchant_user),
    db: Session = Depends(get_db)
):
    """[МЕРЧАНТ] Находит награду по коду, который показал клиент."""
    info = redemption_service.resolve_by_code(db, code)
    reward_lookup.ensure_can_view(info, current_user)
    return RewardInfo.model_validate(info)


@router.post("/rewards/{reward_id}/complete", response_model=SuccessResponse)
def complete_redemption_endpoint(
    reward_id: int,
    payload: CompleteRedemptionRequest,
    current_user: User = Depends(get_merchant_user),
    db: Session = Depends(get_db)
):
    """[МЕРЧАНТ] Погашает награду в торговой точке и проводит начисления."""
    settlement_service.complete_redemption(
        db, reward_id=reward_id, outlet_id=payload.outlet_id, acting_staff_user_id=current_user.id
    )
    return SuccessResponse()
