import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.api.v1.router import api_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Lotto Ledger API",
    description="ระบบบันทึกโพย รับชำระ และตรวจรางวัลสำหรับเจ้ามือหวย",
    version="1.0.0"
)

# 1. CORS (หน้าบ้านอยู่คนละ Origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2. รวม API Router
app.include_router(api_router, prefix="/api/v1")

# 3. Health Check
@app.get("/")
def root():
    return {
        "status": "online",
        "message": "Welcome to Lotto Ledger API",
        "version": "1.0.0"
    }
