import logging
from decimal import Decimal
from datetime import date
from typing import Dict, List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.models.ledger import Customer, DrawResult, LotteryEntry
from app.schemas import (
    DrawResultResponse, EntryResponse, RewardCheckRequest, RewardCheckResponse,
    WinningEntryResponse, WinningNumbersOut,
)
from app.core.config import settings
from app.core.game_logic import directory_lookup, evaluate_draw, total_payout
from app.core.lotto_results import ResultSource

logger = logging.getLogger(__name__)

router = APIRouter()

def _save_result(db: Session, draw_date: date, data: RewardCheckRequest) -> None:
    # บันทึก/อัปเดตผลรางวัลของงวด (1 งวด 1 แถว)
    reward_data = {
        "front3": [data.front_3_1, data.front_3_2],
        "bottom3": [data.bottom_3_1, data.bottom_3_2],
    }
    existing = db.query(DrawResult).filter(DrawResult.draw_date == draw_date).first()
    if existing:
        existing.top_3 = data.top_3
        existing.bottom_2 = data.bottom_2
        existing.reward_data = reward_data
    else:
        db.add(DrawResult(
            draw_date=draw_date,
            top_3=data.top_3,
            bottom_2=data.bottom_2,
            reward_data=reward_data,
        ))
    db.commit()

@router.post("/check", response_model=RewardCheckResponse)
def check_winners(
    data: RewardCheckRequest,
    db: Session = Depends(get_db),
    rates: Dict[str, Decimal] = Depends(deps.get_rate_table),
):
    # 1. ดึงโพยของงวดนี้ (โพยไม่ถูกแก้ไข ผลตรวจคำนวณใหม่ทุกครั้ง)
    rows = db.query(LotteryEntry).filter(
        LotteryEntry.draw_date == data.draw_date
    ).order_by(LotteryEntry.created_at).all()
    names = {c.id: c.name for c in db.query(Customer).all()}

    # 2. ตรวจรางวัล
    winners = evaluate_draw(
        [r.to_bet_entry() for r in rows],
        data.draw_date,
        data.to_winning_numbers(),
        rates,
        customer_lookup=directory_lookup(names),
    )
    payout = total_payout(winners)

    if data.save_result:
        _save_result(db, data.draw_date, data)

    logger.info("Checked draw %s: %d entries, %d winners, payout %s",
                data.draw_date, len(rows), len(winners), payout)

    rows_by_id = {r.id: r for r in rows}
    return RewardCheckResponse(
        draw_date=data.draw_date,
        total_entries_checked=len(rows),
        total_winners=len(winners),
        total_payout=payout,
        winners=[
            WinningEntryResponse(
                entry=EntryResponse.model_validate(rows_by_id[w.entry.id]),
                customer_name=w.customer_name,
                rate_used=w.rate_used,
                prize_amount=w.prize_amount,
            )
            for w in winners
        ],
    )

@router.get("/fetch", response_model=DrawResultResponse)
def fetch_result(draw_date: date, source: ResultSource = Depends(deps.get_results)):
    result = source.fetch(draw_date)
    if result is None:
        raise HTTPException(status_code=404, detail="ไม่พบข้อมูลสำหรับวันที่ระบุ กรุณากรอกผลรางวัลเอง")
    return {"draw_date": draw_date, "numbers": WinningNumbersOut.from_winning_numbers(result)}

@router.get("/latest", response_model=DrawResultResponse)
def latest_result(source: ResultSource = Depends(deps.get_results)):
    latest = source.latest()
    if latest is None:
        raise HTTPException(status_code=404, detail="ไม่สามารถดึงข้อมูลรางวัลงวดล่าสุดได้")
    draw_date, result = latest
    return {"draw_date": draw_date, "numbers": WinningNumbersOut.from_winning_numbers(result)}

@router.get("/history", response_model=List[DrawResultResponse])
def result_history(
    limit: int = Query(settings.RESULT_HISTORY_LIMIT, ge=1, le=settings.RESULT_HISTORY_MAX),
    source: ResultSource = Depends(deps.get_results),
):
    return [
        {"draw_date": d, "numbers": WinningNumbersOut.from_winning_numbers(r)}
        for d, r in source.history(limit)
    ]

@router.get("/saved", response_model=DrawResultResponse)
def saved_result(draw_date: date, db: Session = Depends(get_db)):
    result = db.query(DrawResult).filter(DrawResult.draw_date == draw_date).first()
    if not result:
        raise HTTPException(status_code=404, detail="ยังไม่มีผลรางวัลของงวดนี้")
    return {"draw_date": result.draw_date, "numbers": WinningNumbersOut.from_winning_numbers(result.to_winning_numbers())}
