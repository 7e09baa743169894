import logging
from decimal import Decimal
from typing import Dict
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.models.ledger import PayoutRate
from app.schemas import RatesResponse, RatesUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/", response_model=RatesResponse)
def get_rates(rates: Dict[str, Decimal] = Depends(deps.get_rate_table)):
    return {"rates": rates}

@router.put("/", response_model=RatesResponse)
def update_rates(data: RatesUpdate, db: Session = Depends(get_db)):
    # Upsert ทีละประเภท ประเภทที่ไม่ได้ส่งมาคงค่าเดิม
    for bet_type, rate in data.rates.items():
        row = db.query(PayoutRate).filter(PayoutRate.bet_type == bet_type.value).first()
        if row:
            row.rate = rate
        else:
            db.add(PayoutRate(bet_type=bet_type.value, rate=rate))
    db.commit()

    logger.info("Payout rates updated: %s", {t.value: str(r) for t, r in data.rates.items()})
    return {"rates": deps.load_rate_table(db)}
