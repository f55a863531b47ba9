# tests/v1/test_points.py

from unittest.mock import AsyncMock

from httpx import AsyncClient

from app.core.redis import get_redis_client


async def test_voucher_exchange(client: AsyncClient, auth_headers, db_session, make_user):
    customer = make_user(point=300)

    response = await client.get("/api/v1/redemption", headers=auth_headers(customer))
    assert response.status_code == 200
    offers = response.json()["redemptions"]
    assert [o["point"] for o in offers] == [200, 500, 1000]

    response = await client.post(f"/api/v1/redemption/{offers[0]['id']}/exchange", headers=auth_headers(customer))
    assert response.status_code == 201
    assert response.json()["payouts"][0]["source"] == "REDEEM"

    response = await client.post(f"/api/v1/redemption/{offers[0]['id']}/exchange", headers=auth_headers(customer))
    assert response.status_code == 409
    assert response.json()["error_code"] == "INSUFFICIENT_BALANCE"

    db_session.refresh(customer)
    assert customer.point == 100


async def test_withdrawal_lifecycle(client: AsyncClient, auth_headers, db_session, make_user, merchant):
    customer = make_user(point=1_000)

    response = await client.post("/api/v1/withdraw/request", json={"point": 400}, headers=auth_headers(customer))
    assert response.status_code == 201
    request_id = response.json()["id"]

    response = await client.get("/api/v1/withdraw?status=PENDING", headers=auth_headers(merchant))
    assert [r["id"] for r in response.json()["withdrawal_requests"]] == [request_id]

    response = await client.put(f"/api/v1/withdraw/{request_id}/approve", headers=auth_headers(customer))
    assert response.status_code == 403

    response = await client.put(f"/api/v1/withdraw/{request_id}/approve", headers=auth_headers(merchant))
    assert response.status_code == 200
    assert response.json()["status"] == "APPROVED"

    response = await client.put(f"/api/v1/withdraw/{request_id}/cancel", headers=auth_headers(customer))
    assert response.status_code == 409
    assert response.json()["error_code"] == "INVALID_STATUS"

    db_session.refresh(customer)
    assert customer.point == 600


async def test_withdrawal_amount_must_be_positive(client: AsyncClient, auth_headers, customer):
    response = await client.post("/api/v1/withdraw/request", json={"point": 0}, headers=auth_headers(customer))
    assert response.status_code == 422


async def test_check_in_counts_visits(client: AsyncClient, auth_headers, customer, outlet):
    payload = {"outlet_id": outlet.id, "consents": {"email": True}}

    first = await client.post("/api/v1/checkin", json=payload, headers=auth_headers(customer))
    second = await client.post("/api/v1/checkin", json=payload, headers=auth_headers(customer))

    assert first.status_code == 201
    assert second.json()["visit_count"] == 2


async def test_check_in_unknown_outlet(client: AsyncClient, auth_headers, customer):
    response = await client.post("/api/v1/checkin", json={"outlet_id": 404}, headers=auth_headers(customer))
    assert response.status_code == 404


async def test_ping(client: AsyncClient):
    from app.main import app

    fake_redis = AsyncMock()
    app.dependency_overrides[get_redis_client] = lambda: fake_redis

    response = await client.get("/api/v1/ping")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    fake_redis.ping.assert_awaited_once()


async def test_ping_reports_redis_outage(client: AsyncClient):
    from app.main import app

    fake_redis = AsyncMock()
    fake_redis.ping.side_effect = ConnectionError("redis is down")
    app.dependency_overrides[get_redis_client] = lambda: fake_redis

    response = await client.get("/api/v1/ping")

    assert response.status_code == 503
    assert response.json()["redis"] == "unavailable"
