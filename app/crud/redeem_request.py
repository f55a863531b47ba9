# app/crud/redeem_request.py
import logging
from datetime import datetime
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.redeem_request import RedemptionRequest

logger = logging.getLogger(__name__)


def get_by_reward_id(db: Session, reward_id: int) -> RedemptionRequest | None:
    return db.query(RedemptionRequest).filter(RedemptionRequest.reward_id == reward_id).first()


def get_latest_by_code(db: Session, code: str) -> RedemptionRequest | None:
    """Самая свежая заявка с таким кодом."""
    return db.query(RedemptionRequest).filter(
        RedemptionRequest.code == code
    ).order_by(RedemptionRequest.updated_at.desc(), RedemptionRequest.id.desc()).first()


def code_in_use(db: Session, code: str, fresh_since: datetime, exclude_reward_id: int | None = None) -> bool:
    """Есть ли у другой награды действующая заявка с таким же кодом."""
    query = db.query(RedemptionRequest.id).filter(
        RedemptionRequest.code == code,
        RedemptionRequest.updated_at >= fresh_since
    )
    if exclude_reward_id is not None:
        query = query.filter(RedemptionRequest.reward_id != exclude_reward_id)
    return query.first() is not None


def upsert_code(db: Session, reward_id: int, code: str, now: datetime) -> RedemptionRequest:
    """
    Заявка на награду одна: повторный запрос заменяет код и обновляет
    точку отсчета, а не создает новую строку.
    Если параллельный запрос успел вставить заявку первым, перезаписываем ее.
    """
    request = get_by_reward_id(db, reward_id)
    if request is None:
        request = RedemptionRequest(reward_id=reward_id, code=code, created_at=now, updated_at=now)
        db.add(request)
        try:
            db.commit()
            db.refresh(request)
            return request
        except IntegrityError:
            db.rollback()
            logger.info(f"Redemption request for reward {reward_id} was created concurrently, overwriting it.")
            request = get_by_reward_id(db, reward_id)

    request.code = code
    request.updated_at = now
    db.commit()
    db.refresh(request)
    return request
