# app/services/redemption.py

import logging
from datetime import timedelta, timezone

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import CodeExpiredError, InvalidCodeError, NotFoundError
from app.crud import redeem_request as crud_redeem_request
from app.crud import reward as crud_reward
from app.models.redeem_request import RedemptionRequest
from app.services import reward_lookup
from app.utils.clock import Clock, utcnow
from app.utils.codes import CodeGenerator, get_code_generator

logger = logging.getLogger(__name__)

# Сколько раз пробуем подобрать код, не совпадающий с действующими кодами других наград
MAX_CODE_ATTEMPTS = 10


def code_ttl() -> timedelta:
    return timedelta(seconds=settings.REDEMPTION_CODE_TTL_SECONDS)


def request_redemption(
    db: Session,
    reward_id: int,
    requesting_user_id: int,
    clock: Clock = utcnow,
    code_generator: CodeGenerator | None = None
) -> RedemptionRequest:
    """
    Выдает клиенту свежий код для погашения награды на кассе.
    Код "подсолен" временем запроса, поэтому каждый запрос дает новый код.
    """
    reward = crud_reward.get_owned_reward(db, reward_id, requesting_user_id)
    if not reward:
        raise NotFoundError("Reward", reward_id)

    now = clock()
    reward_lookup.ensure_reward_is_redeemable(reward, now)

    generator = code_generator or get_code_generator()
    fresh_since = now - code_ttl()
    timestamp = str(int(now.replace(tzinfo=timezone.utc).timestamp() * 1000))

    code = generator.generate(str(reward.id), timestamp)
    attempt = 1
    # Шестизначных кодов мало: не выдаем код, который сейчас действует у другой награды
    while crud_redeem_request.code_in_use(db, code, fresh_since, exclude_reward_id=reward.id):
        if attempt >= MAX_CODE_ATTEMPTS:
            logger.error(f"Could not find a free redemption code for reward {reward.id} after {attempt} attempts.")
            break
        code = generator.generate(str(reward.id), timestamp, str(attempt))
        attempt += 1

    request = crud_redeem_request.upsert_code(db, reward_id=reward.id, code=code, now=now)
    logger.info(f"Issued redemption code for reward {reward.id} (user {requesting_user_id}).")
    return request


def resolve_by_code(db: Session, code: str, clock: Clock = utcnow) -> reward_lookup.RewardInfo:
    """Поиск награды мерчантом по коду, который показал клиент."""
    if not code:
        raise InvalidCodeError()

    request = crud_redeem_request.get_latest_by_code(db, code)
    if not request:
        logger.warning("Redemption code lookup failed: no matching request.")
        raise InvalidCodeError()

    if clock() > request.updated_at + code_ttl():
        logger.info(f"Redemption code for reward {request.reward_id} has expired.")
        raise CodeExpiredError()

    return reward_lookup.get_reward_info(db, request.reward_id, clock=clock)
