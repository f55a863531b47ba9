# tests/conftest.py
import os

# Настройки должны быть в окружении до первого импорта app.*
os.environ.setdefault("DATABASE_USER", "test")
os.environ.setdefault("DATABASE_PASSWORD", "test")
os.environ.setdefault("DATABASE_HOST", "localhost")
os.environ.setdefault("DATABASE_PORT", "5432")
os.environ.setdefault("DATABASE_NAME", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("REDIS_PORT", "6379")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_STORAGE_URI", "memory://")

from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.db.session import Base
from app.dependencies import get_db
# Импортируем все модели для создания таблиц
from app.models.user import User, UserRole
from app.models.outlet import Outlet
from app.models.campaign import ReferralCampaign
from app.models.voucher import VoucherOffer
from app.models.reward import Reward
from app.models.redeem_request import RedemptionRequest
from app.models.checkin import CheckIn
from app.models.transaction import PointTransaction
from app.models.withdrawal import WithdrawalRequest
from app.utils.codes import Md5DigitCodeGenerator

# In-memory SQLite: одно соединение на все потоки, чтобы эндпоинты видели данные теста
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2024, 5, 1, 12, 0, 0)


class FixedClock:
    """Управляемые часы для сервисов: clock() возвращает текущее "время теста"."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="function")
def db_session() -> Session:
    """
    Фикстура для создания чистой базы данных для каждого теста.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def code_generator() -> Md5DigitCodeGenerator:
    return Md5DigitCodeGenerator()


@pytest.fixture
def make_user(db_session):
    def _make_user(role: UserRole = UserRole.CUSTOMER, point: int = 0, **kwargs) -> User:
        user = User(role=role.value, point=point, **kwargs)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def merchant(make_user) -> User:
    return make_user(UserRole.BUSINESS_OWNER, point=10_000, email="owner@cafe.test")


@pytest.fixture
def staff(make_user, merchant) -> User:
    return make_user(UserRole.BUSINESS_STAFF, merchant_id=merchant.id)


@pytest.fixture
def referrer(make_user) -> User:
    return make_user(first_name="Anna")


@pytest.fixture
def customer(make_user) -> User:
    return make_user(first_name="Boris")


@pytest.fixture
def outlet(db_session, merchant) -> Outlet:
    outlet = Outlet(owner_user_id=merchant.id, name="Coffee Point", address="Main st. 1")
    db_session.add(outlet)
    db_session.commit()
    db_session.refresh(outlet)
    return outlet


@pytest.fixture
def make_campaign(db_session, merchant):
    def _make_campaign(**kwargs) -> ReferralCampaign:
        values = {
            "owner_user_id": merchant.id,
            "name": "Bring a friend",
            "is_active": True,
            "days_to_redeem": 7,
            "end_date": None,
            "referrer_reward_point": 500,
            "referred_reward_type": "POINT",
            "referred_reward_value": 200,
        }
        values.update(kwargs)
        campaign = ReferralCampaign(**values)
        db_session.add(campaign)
        db_session.commit()
        db_session.refresh(campaign)
        return campaign
    return _make_campaign


@pytest.fixture
def campaign(make_campaign) -> ReferralCampaign:
    return make_campaign()


@pytest.fixture
def voucher_offer(db_session) -> VoucherOffer:
    offer = VoucherOffer(point=200, value=20000, discount_type="DISCOUNT_AMOUNT", is_active=True)
    db_session.add(offer)
    db_session.commit()
    db_session.refresh(offer)
    return offer


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture
async def client(db_session):
    from app.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as async_client:
        yield async_client
    app.dependency_overrides.clear()
