import logging
from decimal import Decimal
from typing import Dict, List, Optional
from datetime import date
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.models.ledger import LotteryEntry
from app.schemas import EntryBatchCreate, EntryBatchResponse, EntryResponse
from app.core.config import get_thai_now, get_round_date, settings

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/", response_model=EntryBatchResponse)
def submit_entries(
    batch: EntryBatchCreate,
    db: Session = Depends(get_db),
    rates: Dict[str, Decimal] = Depends(deps.get_rate_table),
):
    customer = deps.get_customer_or_404(db, batch.customer_id)

    # งวดที่โพยนี้ผูกไว้ (ไม่ระบุ = งวดปัจจุบันตามเวลาตัดรอบ)
    target_date = batch.draw_date or get_round_date(get_thai_now(), settings.DAY_CUTOFF_TIME)

    created = []
    total_amount = Decimal(0)
    for item in batch.items:
        # เก็บเรท ณ ตอนแทงไว้กับโพย เปลี่ยนเรททีหลังไม่กระทบโพยเก่า
        rate = item.payout_rate if item.payout_rate is not None else rates.get(item.bet_type.value, Decimal(0))
        entry = LotteryEntry(
            customer_id=customer.id,
            draw_date=target_date,
            bet_type=item.bet_type,
            number=item.number,
            amount=item.amount,
            payout_rate=rate,
        )
        db.add(entry)
        created.append(entry)
        total_amount += item.amount

    db.commit()
    for entry in created:
        db.refresh(entry)

    logger.info("Recorded %d entries for customer %s (draw %s, total %s)",
                len(created), customer.id, target_date, total_amount)

    return EntryBatchResponse(
        customer_id=customer.id,
        customer_name=customer.name,
        draw_date=target_date,
        total_amount=total_amount,
        entries=[EntryResponse.model_validate(e) for e in created],
    )

@router.get("/", response_model=List[EntryResponse])
def list_entries(
    draw_date: Optional[date] = None,
    customer_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
):
    query = db.query(LotteryEntry)
    if draw_date is not None:
        query = query.filter(LotteryEntry.draw_date == draw_date)
    if customer_id is not None:
        query = query.filter(LotteryEntry.customer_id == customer_id)
    return query.order_by(LotteryEntry.created_at).all()
