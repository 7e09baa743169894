# app/api/deps.py
from decimal import Decimal
from typing import Dict
from uuid import UUID

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.game_logic import BetType, get_reward_rate
from app.core.lotto_results import ResultSource, get_result_source
from app.db.session import get_db
from app.models.ledger import Customer, PayoutRate


# 1. ตารางเรทจ่ายปัจจุบัน (ค่าใน DB ทับค่า default ใน settings)
def load_rate_table(db: Session) -> Dict[str, Decimal]:
    rates = {t.value: get_reward_rate(t, settings.DEFAULT_PAYOUT_RATES) for t in BetType}
    for row in db.query(PayoutRate).all():
        if row.bet_type in rates:
            rates[row.bet_type] = Decimal(row.rate)
    return rates

def get_rate_table(db: Session = Depends(get_db)) -> Dict[str, Decimal]:
    return load_rate_table(db)

# 2. แหล่งผลรางวัล (override ได้ใน test)
def get_results() -> ResultSource:
    return get_result_source()

# 3. ดึงลูกค้า ถ้าไม่เจอ 404
def get_customer_or_404(db: Session, customer_id: UUID) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise HTTPException(status_code=404, detail="ไม่พบลูกค้า")
    return customer
