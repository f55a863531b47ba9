# app/services/settlement.py
"""
Погашение наград и обмен баллов на ваучеры.

Все записи одной операции (визит, флаг использования, дельты балансов,
строки журнала) выполняются внутри одной `scoped_transaction`: либо видны все,
либо ни одной. Повторное погашение отсекается compare-and-set по `is_used`.
"""

import logging
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    ExpiredOrUsedError,
    InsufficientBalanceError,
    NotFoundError,
    PermissionDeniedError,
    RewardServiceError,
    SettlementFailedError,
)
from app.crud import checkin as crud_checkin
from app.crud import outlet as crud_outlet
from app.crud import reward as crud_reward
from app.crud import transaction as crud_transaction
from app.crud import user as crud_user
from app.crud import voucher as crud_voucher
from app.db.session import scoped_transaction
from app.models.outlet import Outlet
from app.models.reward import PayoutKind, PayoutSource, Reward
from app.models.user import UserRole
from app.services import reward_lookup
from app.utils.clock import Clock, utcnow

logger = logging.getLogger(__name__)


def ensure_staff_serves_outlet(db: Session, staff_user_id: int, outlet: Outlet) -> None:
    """Владелец работает в своих точках, сотрудник - в точках своего владельца. ADMIN - везде."""
    staff = crud_user.get_user_by_id(db, staff_user_id)
    if not staff:
        raise NotFoundError("User", staff_user_id)
    if staff.role == UserRole.ADMIN.value:
        return

    staff_merchant_id = reward_lookup.served_merchant_id(staff)
    if staff_merchant_id is None or staff_merchant_id != outlet.owner_user_id:
        logger.warning(f"User {staff_user_id} is not allowed to settle rewards at outlet {outlet.id}.")
        raise PermissionDeniedError()


def complete_redemption(
    db: Session,
    reward_id: int,
    outlet_id: int,
    acting_staff_user_id: int | None = None,
    clock: Clock = utcnow
) -> bool:
    """
    Гасит награду в торговой точке: отмечает визит, помечает награду
    использованной и переводит баллы по каждой POINT-выплате
    (бенефициару +value, мерчанту кампании -value).
    Скидочные выплаты баланс не двигают - скидка дается на кассе.
    Гасить можно только в точке мерчанта, который оплачивает награду,
    и только сотрудником этого мерчанта.
    """
    # Шаг 1: Проверки. Любая ошибка здесь - до каких-либо записей
    info = reward_lookup.get_reward_info(db, reward_id, clock=clock)

    outlet = crud_outlet.get_outlet_by_id(db, outlet_id)
    if not outlet:
        raise NotFoundError("Outlet", outlet_id)

    # Награду гасят только в точке того мерчанта, который ее оплачивает
    if info.merchant_user_id is not None and info.merchant_user_id != outlet.owner_user_id:
        logger.warning(
            f"Reward {reward_id} of merchant {info.merchant_user_id} presented at outlet {outlet.id} "
            f"of merchant {outlet.owner_user_id}."
        )
        raise PermissionDeniedError("Награду нельзя погасить в этой торговой точке.")
    if acting_staff_user_id is not None:
        ensure_staff_serves_outlet(db, acting_staff_user_id, outlet)

    reward = info.reward
    merchant_id = info.merchant_user_id or outlet.owner_user_id
    now = clock()
    # Снимок выплат до начала записи: после отката ORM-объекты будут просрочены
    payouts = [(p.beneficiary_user_id, p.kind, int(p.value), p.source) for p in reward.payouts]

    # Шаг 2: Все записи - одной транзакцией
    try:
        with scoped_transaction(db):
            crud_checkin.upsert_visit(db, user_id=info.owner.id, outlet_id=outlet.id)

            if not crud_reward.mark_used_if_unused(
                db, reward.id, outlet_id=outlet.id, used_at=now, redeemed_by_user_id=acting_staff_user_id
            ):
                # Параллельный расчет уже погасил эту награду
                raise ExpiredOrUsedError()

            for beneficiary_id, kind, value, source in payouts:
                if kind != PayoutKind.POINT:
                    continue
                crud_user.apply_point_delta(db, beneficiary_id, value)
                crud_transaction.append(
                    db, user_id=beneficiary_id, delta=value, outlet_id=outlet.id, reward_id=reward.id,
                    reason=f"Награда за реферальную программу ({source.lower()}), награда #{reward.id}",
                    created_at=now
                )
                crud_user.apply_point_delta(db, merchant_id, -value)
                crud_transaction.append(
                    db, user_id=merchant_id, delta=-value, outlet_id=outlet.id, reward_id=reward.id,
                    reason=f"Оплата награды #{reward.id} клиенту {beneficiary_id}",
                    created_at=now
                )
    except RewardServiceError:
        logger.warning(f"Settlement of reward {reward_id} rejected, nothing was written.")
        raise
    except SQLAlchemyError as e:
        logger.error(f"Settlement of reward {reward_id} at outlet {outlet_id} failed and was rolled back.", exc_info=True)
        raise SettlementFailedError() from e

    logger.info(
        f"Reward {reward_id} redeemed at outlet {outlet_id} by staff {acting_staff_user_id}. "
        f"Merchant {merchant_id} funded {sum(v for _, k, v, _ in payouts if k == PayoutKind.POINT)} points."
    )
    return True


def exchange_voucher(
    db: Session,
    customer_id: int,
    offer_id: int,
    clock: Clock = utcnow
) -> Reward:
    """
    Обменивает баллы клиента на скидочный ваучер: списание, награда
    и строка журнала создаются одной транзакцией.
    """
    offer = crud_voucher.get_active_offer(db, offer_id)
    if not offer:
        raise NotFoundError("Redemption", offer_id)

    customer = crud_user.get_user_by_id(db, customer_id)
    if not customer:
        raise NotFoundError("User", customer_id)

    now = clock()
    cost = offer.point
    offer_id, discount_type, value = offer.id, offer.discount_type, offer.value

    try:
        with scoped_transaction(db):
            if settings.VOUCHER_REQUIRE_SUFFICIENT_BALANCE:
                if not crud_user.debit_points_if_sufficient(db, customer_id, cost):
                    raise InsufficientBalanceError()
            else:
                crud_user.apply_point_delta(db, customer_id, -cost)

            reward = crud_reward.create_reward(
                db,
                owner_user_id=customer_id,
                voucher_offer_id=offer_id,
                expire_date=now + timedelta(days=settings.VOUCHER_LIFETIME_DAYS),
                payouts=[{
                    "beneficiary_user_id": customer_id,
                    "kind": PayoutKind(discount_type).value,
                    "value": value,
                    "source": PayoutSource.REDEEM.value,
                }],
            )
            crud_transaction.append(
                db, user_id=customer_id, delta=-cost, reward_id=reward.id,
                reason=f"Обмен баллов на ваучер #{offer_id}", created_at=now
            )
    except InsufficientBalanceError:
        logger.info(f"User {customer_id} has not enough points for voucher {offer_id} (cost {cost}).")
        raise
    except SQLAlchemyError as e:
        logger.error(f"Voucher exchange for user {customer_id} failed and was rolled back.", exc_info=True)
        raise SettlementFailedError() from e

    db.refresh(reward)
    logger.info(f"User {customer_id} exchanged {cost} points for voucher {offer_id}, reward {reward.id}.")
    return reward
