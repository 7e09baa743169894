# app/core/game_logic.py
"""
Payout engine - ตรวจรางวัลและคำนวณยอดจ่าย (Centralized Logic)

ทุกฟังก์ชันในไฟล์นี้เป็น pure function: ไม่มี I/O ไม่มี state
ข้อมูลที่ผิดรูปแบบ (เลขไม่ครบหลัก, ผลรางวัลว่าง, เรทเป็น 0) จะให้ผล "ไม่ถูก" หรือ "จ่าย 0" เสมอ ไม่ raise
"""
import enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

UNKNOWN_CUSTOMER_NAME = "N/A"

class BetType(str, enum.Enum):
    TOP_3 = "3top"          # 3 ตัวบน
    BOTTOM_3 = "3bottom"    # 3 ตัวล่าง (2 รางวัล)
    FRONT_3 = "3front"      # 3 ตัวหน้า (2 รางวัล)
    TOD_3 = "3tod"          # 3 ตัวโต๊ด
    TOP_2 = "2up"           # 2 ตัวบน
    BOTTOM_2 = "2down"      # 2 ตัวล่าง
    RUN_TOP = "run_up"      # วิ่งบน
    RUN_BOTTOM = "run_down" # วิ่งล่าง

# จำนวนหลักของเลขที่แทงในแต่ละประเภท
NUMBER_LENGTHS: Dict[BetType, int] = {
    BetType.TOP_3: 3,
    BetType.BOTTOM_3: 3,
    BetType.FRONT_3: 3,
    BetType.TOD_3: 3,
    BetType.TOP_2: 2,
    BetType.BOTTOM_2: 2,
    BetType.RUN_TOP: 1,
    BetType.RUN_BOTTOM: 1,
}

DrawDate = Union[date, str]


@dataclass(frozen=True)
class WinningNumbers:
    """ผลรางวัลของงวดเดียว ค่าว่าง ("") = ยังไม่ทราบผล และจะไม่มีวันถูก"""

    top3: str = ""
    bottom2: str = ""
    front3: Tuple[str, str] = ("", "")
    bottom3: Tuple[str, str] = ("", "")
    first_prize: str = ""

    def is_complete(self) -> bool:
        if not (is_digits(self.top3, 3) and is_digits(self.bottom2, 2)):
            return False
        return all(not slot or is_digits(slot, 3) for slot in self.front3 + self.bottom3)


@dataclass(frozen=True)
class BetEntry:
    id: Any
    customer_id: Any
    draw_date: DrawDate
    bet_type: BetType
    number: str
    amount: Decimal
    payout_rate: Optional[Decimal] = None


@dataclass(frozen=True)
class WinningEntryDetail:
    entry: BetEntry
    customer_name: str
    rate_used: Decimal
    prize_amount: Decimal


CustomerLookup = Callable[[Any], str]


def q2(v) -> Decimal:
    return Decimal(v).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def is_digits(value: Optional[str], length: int) -> bool:
    """True เมื่อเป็นเลข 0-9 ล้วนและมีความยาวตรงตามที่กำหนด"""
    if not isinstance(value, str) or len(value) != length:
        return False
    return value.isascii() and value.isdigit()


def sanitize_digits(value: Optional[str], max_length: int) -> str:
    """กรองเฉพาะตัวเลข แล้วตัดให้ไม่เกิน max_length (ใช้กับช่องกรอกผลรางวัลเอง)"""
    if not value:
        return ""
    digits = "".join(ch for ch in str(value) if "0" <= ch <= "9")
    return digits[:max_length]


def get_reward_rate(bet_type: Union[BetType, str], rates: Optional[Mapping]) -> Decimal:
    """อ่านเรทจ่ายจากตาราง รองรับทั้งค่าตัวเลขตรงๆ และแบบ {"pay": 90}"""
    if not rates:
        return Decimal("0.00")
    code = bet_type.value if isinstance(bet_type, BetType) else str(bet_type)
    raw_data = rates.get(code)
    if raw_data is None and isinstance(bet_type, BetType):
        raw_data = rates.get(bet_type, 0)
    if isinstance(raw_data, dict):
        val = raw_data.get("pay", 0)
    else:
        val = raw_data
    try:
        rate = q2(str(val if val is not None else 0))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0.00")
    if not rate.is_finite() or rate < 0:
        return Decimal("0.00")
    return rate


def resolve_rate(entry: BetEntry, rates: Optional[Mapping]) -> Decimal:
    """เรทของโพยมาก่อน (snapshot ตอนแทง) ถ้าไม่มีหรือเป็น 0 ใช้เรทจากตาราง"""
    own = _to_decimal(entry.payout_rate)
    if own > 0:
        return own
    return get_reward_rate(entry.bet_type, rates)


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal(0)
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal(0)
    return result if result.is_finite() else Decimal(0)


def check_is_win_precise(bet_type: Union[BetType, str], number: str, winning: WinningNumbers) -> bool:
    # import ภายในเพื่อเลี่ยงวง import กับ reward_calculator
    from app.core.reward_calculator import RewardCalculator
    return RewardCalculator(winning).check_is_win(number, bet_type)


def evaluate_draw(
    entries: Iterable[BetEntry],
    draw_date: DrawDate,
    winning_numbers: WinningNumbers,
    rate_table: Optional[Mapping] = None,
    customer_lookup: Optional[CustomerLookup] = None,
) -> List[WinningEntryDetail]:
    """
    ตรวจโพยทั้งหมดของงวด draw_date กับผลรางวัล แล้วคืนรายการที่ถูกพร้อมยอดจ่าย

    - กรองเฉพาะโพยที่ draw_date ตรงกันทุกตัวอักษร (ไม่มีการแปลง timezone)
    - แต่ละโพยถูกได้ครั้งเดียว ตามประเภทของตัวเอง
    - prize_amount = amount x rate_used (ปัด 2 ตำแหน่ง)
    - ลำดับผลลัพธ์ตามลำดับโพยที่ส่งเข้ามา
    """
    from app.core.reward_calculator import RewardCalculator

    calculator = RewardCalculator(winning_numbers)
    lookup = customer_lookup or (lambda _customer_id: UNKNOWN_CUSTOMER_NAME)

    winners: List[WinningEntryDetail] = []
    for entry in entries:
        if entry.draw_date != draw_date:
            continue
        if not calculator.check_is_win(entry.number, entry.bet_type):
            continue

        rate = resolve_rate(entry, rate_table)
        amount = _to_decimal(entry.amount)

        winners.append(WinningEntryDetail(
            entry=entry,
            customer_name=lookup(entry.customer_id) or UNKNOWN_CUSTOMER_NAME,
            rate_used=rate,
            prize_amount=q2(amount * rate),
        ))
    return winners


def total_payout(winners: Iterable[WinningEntryDetail]) -> Decimal:
    return sum((w.prize_amount for w in winners), Decimal("0.00"))


def directory_lookup(names: Mapping[Any, str]) -> CustomerLookup:
    """สร้าง customer lookup จาก dict {id: name} (id ที่ไม่รู้จักได้ "N/A")"""
    def lookup(customer_id):
        return names.get(customer_id) or UNKNOWN_CUSTOMER_NAME
    return lookup
