from fastapi import APIRouter
from app.api.v1.endpoints import customers, entries, payments, rates, reward, stats

api_router = APIRouter()

api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(entries.router, prefix="/entries", tags=["entries"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(rates.router, prefix="/rates", tags=["rates"])
api_router.include_router(reward.router, prefix="/reward", tags=["reward"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
