from typing import Optional, List, Dict, Any
from uuid import UUID
from pydantic import BaseModel, field_validator, model_validator
import datetime as dt
from datetime import datetime, date
from decimal import Decimal
from app.core.game_logic import BetType, NUMBER_LENGTHS, WinningNumbers, is_digits, q2, sanitize_digits
from app.core.ledger import PaymentMethod, PaymentStatus

# --- Customer Schemas ---
class CustomerCreate(BaseModel):
    name: str
    phone: str

    @field_validator('name', 'phone')
    @classmethod
    def validate_required(cls, v):
        v = v.strip()
        if not v: raise ValueError("ต้องกรอกชื่อและเบอร์โทร")
        return v

class CustomerResponse(BaseModel):
    id: UUID
    name: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CustomerSummaryResponse(CustomerResponse):
    total_purchase: Decimal
    total_paid: Decimal
    balance: Decimal
    status: PaymentStatus

# --- Entry Schemas ---
class BetItemCreate(BaseModel):
    number: str
    bet_type: BetType
    amount: Decimal
    payout_rate: Optional[Decimal] = None  # ไม่ส่งมา = ใช้เรทปัจจุบันจากตาราง

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        # เก็บเป็นสตางค์ (2 ตำแหน่ง) ปัดก่อนแล้วค่อยเช็ค
        v = q2(v)
        if v <= 0: raise ValueError("ยอดแทงต้องมากกว่า 0")
        return v

    @field_validator('payout_rate')
    @classmethod
    def validate_rate(cls, v):
        if v is None: return v
        v = q2(v)
        if v < 0: raise ValueError("เรทจ่ายต้องไม่ติดลบ")
        return v

    @model_validator(mode='after')
    def validate_number(self):
        length = NUMBER_LENGTHS[self.bet_type]
        if not is_digits(self.number, length):
            raise ValueError(f"เลข {self.bet_type.value} ต้องเป็นตัวเลข {length} หลัก")
        return self

class EntryBatchCreate(BaseModel):
    customer_id: UUID
    items: List[BetItemCreate]
    draw_date: Optional[date] = None  # ไม่ส่งมา = งวดปัจจุบัน

    @field_validator('items')
    @classmethod
    def validate_items(cls, v):
        if not v: raise ValueError("ต้องมีอย่างน้อย 1 รายการ")
        return v

class EntryResponse(BaseModel):
    id: UUID
    customer_id: UUID
    draw_date: date
    bet_type: BetType
    number: str
    amount: Decimal
    payout_rate: Decimal
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class EntryBatchResponse(BaseModel):
    customer_id: UUID
    customer_name: str
    draw_date: date
    total_amount: Decimal
    entries: List[EntryResponse]

# --- Payment Schemas ---
class PaymentCreate(BaseModel):
    customer_id: UUID
    amount: Decimal
    method: PaymentMethod = PaymentMethod.TRANSFER
    date: Optional[dt.date] = None  # ไม่ส่งมา = วันนี้

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v):
        v = q2(v)
        if v <= 0: raise ValueError("ยอดเงินต้องมากกว่า 0")
        return v

class PaymentResponse(BaseModel):
    id: UUID
    customer_id: UUID
    amount: Decimal
    method: PaymentMethod
    date: dt.date
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class BalanceResponse(BaseModel):
    customer_id: UUID
    balance_due: Decimal

# --- Rate Schemas ---
class RatesUpdate(BaseModel):
    rates: Dict[BetType, Decimal]

    @field_validator('rates')
    @classmethod
    def validate_rates(cls, v):
        v = {bet_type: q2(rate) for bet_type, rate in v.items()}
        for bet_type, rate in v.items():
            if rate <= 0: raise ValueError(f"เรทจ่าย {bet_type.value} ต้องมากกว่า 0")
        return v

class RatesResponse(BaseModel):
    rates: Dict[str, Decimal]

# --- Reward Schemas ---
# ช่องกรอกผลรางวัลเอง: ตัดตัวอักษรที่ไม่ใช่ตัวเลขทิ้ง และจำกัดจำนวนหลัก
_WINNING_FIELD_LENGTHS = {
    'top_3': 3, 'bottom_2': 2,
    'front_3_1': 3, 'front_3_2': 3,
    'bottom_3_1': 3, 'bottom_3_2': 3,
}

class WinningNumbersIn(BaseModel):
    top_3: str = ""
    bottom_2: str = ""
    front_3_1: str = ""
    front_3_2: str = ""
    bottom_3_1: str = ""
    bottom_3_2: str = ""

    @field_validator(*_WINNING_FIELD_LENGTHS.keys(), mode='before')
    @classmethod
    def digits_only(cls, v, info):
        return sanitize_digits(v if v is None else str(v), _WINNING_FIELD_LENGTHS[info.field_name])

    def to_winning_numbers(self) -> WinningNumbers:
        return WinningNumbers(
            top3=self.top_3,
            bottom2=self.bottom_2,
            front3=(self.front_3_1, self.front_3_2),
            bottom3=(self.bottom_3_1, self.bottom_3_2),
        )

class WinningNumbersOut(WinningNumbersIn):
    first_prize: str = ""

    @classmethod
    def from_winning_numbers(cls, w: WinningNumbers) -> "WinningNumbersOut":
        return cls(
            top_3=w.top3, bottom_2=w.bottom2,
            front_3_1=w.front3[0], front_3_2=w.front3[1],
            bottom_3_1=w.bottom3[0], bottom_3_2=w.bottom3[1],
            first_prize=w.first_prize,
        )

class RewardCheckRequest(WinningNumbersIn):
    draw_date: date
    save_result: bool = True

class WinningEntryResponse(BaseModel):
    entry: EntryResponse
    customer_name: str
    rate_used: Decimal
    prize_amount: Decimal

class RewardCheckResponse(BaseModel):
    draw_date: date
    total_entries_checked: int
    total_winners: int
    total_payout: Decimal
    winners: List[WinningEntryResponse]

class DrawResultResponse(BaseModel):
    draw_date: date
    numbers: WinningNumbersOut

# --- Dashboard ---
class DashboardResponse(BaseModel):
    total_sales: Decimal
    estimated_profit: Decimal
    customer_count: int
    sales_by_day: List[Dict[str, Any]]
    top_customers: List[Dict[str, Any]]
