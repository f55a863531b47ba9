# app/crud/reward.py
from typing import List, Iterable
from datetime import datetime
from sqlalchemy import update
from sqlalchemy.orm import Session, selectinload
from app.models.reward import Reward, RewardPayout


def create_reward(
    db: Session,
    owner_user_id: int,
    expire_date: datetime,
    payouts: Iterable[dict],
    campaign_id: int | None = None,
    voucher_offer_id: int | None = None,
    referred_by_user_id: int | None = None
) -> Reward:
    """
    Создает награду вместе с ее выплатами (порядок выплат сохраняется).
    Требует внешнего вызова db.commit().
    """
    reward = Reward(
        owner_user_id=owner_user_id,
        campaign_id=campaign_id,
        voucher_offer_id=voucher_offer_id,
        referred_by_user_id=referred_by_user_id,
        expire_date=expire_date,
        is_used=False,
    )
    for position, payout in enumerate(payouts):
        reward.payouts.append(RewardPayout(position=position, **payout))
    db.add(reward)
    db.flush()
    return reward


def get_reward_by_id(db: Session, reward_id: int) -> Reward | None:
    return db.query(Reward).options(selectinload(Reward.payouts)).filter(Reward.id == reward_id).first()


def get_owned_reward(db: Session, reward_id: int, owner_user_id: int) -> Reward | None:
    """Награда с указанным ID, только если она принадлежит пользователю."""
    return db.query(Reward).filter(
        Reward.id == reward_id,
        Reward.owner_user_id == owner_user_id
    ).first()


def find_by_owner_and_campaign(db: Session, owner_user_id: int, campaign_id: int) -> Reward | None:
    return db.query(Reward).filter_by(owner_user_id=owner_user_id, campaign_id=campaign_id).first()


def mark_used_if_unused(
    db: Session,
    reward_id: int,
    outlet_id: int,
    used_at: datetime,
    redeemed_by_user_id: int | None = None
) -> bool:
    """
    Compare-and-set: помечает награду использованной, только если она еще не использована.
    Из двух параллельных расчетов по одной награде строку обновит только один.
    Требует внешнего вызова db.commit().
    """
    stmt = update(Reward).where(
        Reward.id == reward_id,
        Reward.is_used == False
    ).values(
        is_used=True,
        use_date=used_at,
        use_place_id=outlet_id,
        redeemed_by_user_id=redeemed_by_user_id
    ).execution_options(synchronize_session=False)
    return db.execute(stmt).rowcount == 1


def get_user_rewards(
    db: Session,
    owner_user_id: int,
    include_used: bool = False,
    skip: int = 0,
    limit: int = 50
) -> List[Reward]:
    """Награды пользователя (от новых к старым)."""
    query = db.query(Reward).options(selectinload(Reward.payouts)).filter(Reward.owner_user_id == owner_user_id)
    if not include_used:
        query = query.filter(Reward.is_used == False)
    return query.order_by(Reward.id.desc()).offset(skip).limit(limit).all()
