# app/routers/v1/api.py

from fastapi import APIRouter

from app.routers.v1.endpoints import checkin, ping, referral, reward, transaction, voucher, withdrawal

# Создаем главный роутер для API версии v1
# Все пути, подключенные к нему, будут иметь префикс /api/v1
api_router = APIRouter(prefix="/v1")

api_router.include_router(ping.router, tags=["Health"])
api_router.include_router(referral.router, tags=["Referrals"])
api_router.include_router(reward.router, tags=["Rewards & Redemption"])
api_router.include_router(voucher.router, tags=["Vouchers"])
api_router.include_router(transaction.router, tags=["Transactions"])
api_router.include_router(withdrawal.router, tags=["Withdrawals"])
api_router.include_router(checkin.router, tags=["Check-ins"])
