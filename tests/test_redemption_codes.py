# tests/test_redemption_codes.py

import pytest

from app.core.exceptions import CodeExpiredError, ExpiredOrUsedError, InvalidCodeError, NotFoundError
from app.crud import redeem_request as crud_redeem_request
from app.models.redeem_request import RedemptionRequest
from app.services import redemption, reward_issuance


@pytest.fixture
def issued_reward(db_session, clock, customer, referrer, campaign):
    code = reward_issuance.referral_code_for(referrer.id, campaign.id)
    return reward_issuance.claim_referral(db_session, customer.id, campaign.id, referrer.id, code, clock=clock)


def _request(db_session, clock, code_generator, reward, user):
    return redemption.request_redemption(
        db_session, reward.id, user.id, clock=clock, code_generator=code_generator
    )


def test_request_issues_six_digit_code(db_session, clock, code_generator, issued_reward, customer):
    request = _request(db_session, clock, code_generator, issued_reward, customer)

    assert request.reward_id == issued_reward.id
    assert len(request.code) == 6 and request.code.isdigit()
    assert request.updated_at == clock.now


def test_repeated_request_replaces_code_in_place(db_session, clock, code_generator, issued_reward, customer):
    first = _request(db_session, clock, code_generator, issued_reward, customer)
    first_code = first.code
    clock.advance(seconds=30)

    second = _request(db_session, clock, code_generator, issued_reward, customer)

    assert db_session.query(RedemptionRequest).filter_by(reward_id=issued_reward.id).count() == 1
    assert second.code != first_code
    assert second.updated_at == clock.now

    # Старый код больше ничего не находит
    with pytest.raises(InvalidCodeError):
        redemption.resolve_by_code(db_session, first_code, clock=clock)


def test_request_for_foreign_reward(db_session, clock, code_generator, issued_reward, referrer):
    with pytest.raises(NotFoundError):
        _request(db_session, clock, code_generator, issued_reward, referrer)


def test_request_for_expired_reward(db_session, clock, code_generator, issued_reward, customer):
    clock.advance(days=8)
    with pytest.raises(ExpiredOrUsedError):
        _request(db_session, clock, code_generator, issued_reward, customer)
    assert db_session.query(RedemptionRequest).count() == 0


def test_code_is_accepted_within_window(db_session, clock, code_generator, issued_reward, customer):
    request = _request(db_session, clock, code_generator, issued_reward, customer)
    clock.advance(minutes=4, seconds=59)

    info = redemption.resolve_by_code(db_session, request.code, clock=clock)

    assert info.reward.id == issued_reward.id
    assert info.owner.id == customer.id


def test_code_is_rejected_after_window(db_session, clock, code_generator, issued_reward, customer):
    request = _request(db_session, clock, code_generator, issued_reward, customer)
    clock.advance(minutes=5, seconds=1)

    with pytest.raises(CodeExpiredError):
        redemption.resolve_by_code(db_session, request.code, clock=clock)


def test_new_request_restarts_window(db_session, clock, code_generator, issued_reward, customer):
    _request(db_session, clock, code_generator, issued_reward, customer)
    clock.advance(minutes=10)
    request = _request(db_session, clock, code_generator, issued_reward, customer)
    clock.advance(minutes=1)

    info = redemption.resolve_by_code(db_session, request.code, clock=clock)
    assert info.reward.id == issued_reward.id


@pytest.mark.parametrize("code", ["", "999999x"])
def test_unknown_code(db_session, clock, code):
    with pytest.raises(InvalidCodeError):
        redemption.resolve_by_code(db_session, code, clock=clock)


def test_colliding_code_is_regenerated(db_session, clock, issued_reward, customer, make_user, make_campaign, referrer):
    """Если сгенерированный код уже действует у другой награды, подбирается другой."""

    class SequenceGenerator:
        def __init__(self):
            self.calls = 0

        def generate(self, *parts):
            self.calls += 1
            return "123456" if self.calls <= 2 else "654321"

    generator = SequenceGenerator()
    first = _request(db_session, clock, generator, issued_reward, customer)
    assert first.code == "123456"

    other_customer = make_user()
    other_campaign = make_campaign()
    code = reward_issuance.referral_code_for(referrer.id, other_campaign.id)
    other_reward = reward_issuance.claim_referral(
        db_session, other_customer.id, other_campaign.id, referrer.id, code, clock=clock
    )

    second = _request(db_session, clock, generator, other_reward, other_customer)

    assert second.code == "654321"
    assert generator.calls == 3


def test_concurrent_first_request_overwrites_instead_of_failing(db_session, clock, issued_reward, mocker):
    """Второй "первый" запрос натыкается на уникальный reward_id и перезаписывает заявку."""
    crud_redeem_request.upsert_code(db_session, reward_id=issued_reward.id, code="111111", now=clock.now)

    real_get = crud_redeem_request.get_by_reward_id
    calls = {"n": 0}

    def missed_first_lookup(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_get(*args, **kwargs)

    mocker.patch("app.crud.redeem_request.get_by_reward_id", side_effect=missed_first_lookup)
    clock.advance(seconds=10)

    request = crud_redeem_request.upsert_code(db_session, reward_id=issued_reward.id, code="222222", now=clock.now)

    assert request.code == "222222"
    assert request.updated_at == clock.now
    assert db_session.query(RedemptionRequest).filter_by(reward_id=issued_reward.id).count() == 1
