# tests/test_voucher_exchange.py

from datetime import timedelta

import pytest

from app.core.exceptions import InsufficientBalanceError, NotFoundError
from app.models.reward import Reward
from app.models.transaction import PointTransaction
from app.models.voucher import VoucherOffer
from app.services import settlement
from app.services.voucher import DEFAULT_VOUCHER_OFFERS, list_voucher_offers


def test_exchange_debits_points_and_issues_voucher(db_session, clock, make_user, voucher_offer):
    customer = make_user(point=1_000)

    reward = settlement.exchange_voucher(db_session, customer.id, voucher_offer.id, clock=clock)

    db_session.refresh(customer)
    assert customer.point == 800
    assert reward.owner_user_id == customer.id
    assert reward.voucher_offer_id == voucher_offer.id
    assert reward.campaign_id is None
    assert reward.expire_date == clock.now + timedelta(days=30)
    assert reward.is_used is False
    assert [(p.beneficiary_user_id, p.kind, p.value, p.source) for p in reward.payouts] == [
        (customer.id, "DISCOUNT_AMOUNT", 20000, "REDEEM"),
    ]

    ledger = db_session.query(PointTransaction).filter_by(user_id=customer.id).all()
    assert [(t.point_delta, t.reward_id) for t in ledger] == [(-200, reward.id)]


def test_user_can_exchange_same_offer_twice(db_session, clock, make_user, voucher_offer):
    customer = make_user(point=400)

    settlement.exchange_voucher(db_session, customer.id, voucher_offer.id, clock=clock)
    settlement.exchange_voucher(db_session, customer.id, voucher_offer.id, clock=clock)

    db_session.refresh(customer)
    assert customer.point == 0
    assert db_session.query(Reward).filter_by(owner_user_id=customer.id).count() == 2


def test_insufficient_balance_writes_nothing(db_session, clock, make_user, voucher_offer):
    customer = make_user(point=50)

    with pytest.raises(InsufficientBalanceError):
        settlement.exchange_voucher(db_session, customer.id, voucher_offer.id, clock=clock)

    db_session.refresh(customer)
    assert customer.point == 50
    assert db_session.query(Reward).count() == 0
    assert db_session.query(PointTransaction).count() == 0


def test_balance_check_can_be_switched_off(db_session, clock, make_user, voucher_offer, mocker):
    mocker.patch.object(settlement.settings, "VOUCHER_REQUIRE_SUFFICIENT_BALANCE", False)
    customer = make_user(point=50)

    settlement.exchange_voucher(db_session, customer.id, voucher_offer.id, clock=clock)

    db_session.refresh(customer)
    assert customer.point == -150


def test_inactive_offer(db_session, clock, make_user, voucher_offer):
    voucher_offer.is_active = False
    db_session.commit()
    customer = make_user(point=1_000)

    with pytest.raises(NotFoundError):
        settlement.exchange_voucher(db_session, customer.id, voucher_offer.id, clock=clock)


def test_unknown_customer(db_session, clock, voucher_offer):
    with pytest.raises(NotFoundError):
        settlement.exchange_voucher(db_session, 777, voucher_offer.id, clock=clock)


def test_default_offers_are_seeded_once(db_session):
    offers = list_voucher_offers(db_session)

    assert [(o.point, o.value) for o in offers] == [(i["point"], i["value"]) for i in DEFAULT_VOUCHER_OFFERS]

    list_voucher_offers(db_session)
    assert db_session.query(VoucherOffer).count() == len(DEFAULT_VOUCHER_OFFERS)


def test_existing_offers_are_not_replaced(db_session, voucher_offer):
    offers = list_voucher_offers(db_session)
    assert [o.id for o in offers] == [voucher_offer.id]
