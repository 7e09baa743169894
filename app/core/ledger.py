# app/core/ledger.py
"""
สรุปยอดลูกค้า / Dashboard จากข้อมูลที่โหลดมาแล้ว (pure function ไม่แตะ DB)
"""
import enum
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from app.core.game_logic import BetEntry, q2


class PaymentStatus(str, enum.Enum):
    PAID = "PAID"
    PENDING = "PENDING"


class PaymentMethod(str, enum.Enum):
    CASH = "CASH"
    TRANSFER = "TRANSFER"
    PROMPTPAY = "PROMPTPAY"


@dataclass(frozen=True)
class CustomerRecord:
    id: Any
    name: str
    phone: str = ""


@dataclass(frozen=True)
class PaymentRecord:
    id: Any
    customer_id: Any
    amount: Decimal
    method: PaymentMethod = PaymentMethod.TRANSFER


@dataclass(frozen=True)
class CustomerSummary:
    customer: CustomerRecord
    total_purchase: Decimal
    total_paid: Decimal
    balance: Decimal
    status: PaymentStatus


@dataclass(frozen=True)
class DashboardSummary:
    total_sales: Decimal
    estimated_profit: Decimal
    customer_count: int
    sales_by_day: List[Dict[str, Any]] = field(default_factory=list)
    top_customers: List[Dict[str, Any]] = field(default_factory=list)


def _sum_by_customer(rows: Iterable, attr: str = "amount") -> Dict[Any, Decimal]:
    totals: Dict[Any, Decimal] = {}
    for row in rows:
        totals[row.customer_id] = totals.get(row.customer_id, Decimal(0)) + Decimal(getattr(row, attr))
    return totals


def balance_due(customer_id, entries: Iterable[BetEntry], payments: Iterable[PaymentRecord]) -> Decimal:
    """ยอดค้างชำระ = ยอดซื้อทั้งหมด - ยอดที่จ่ายแล้ว (ติดลบ = จ่ายเกิน)"""
    purchase = sum((Decimal(e.amount) for e in entries if e.customer_id == customer_id), Decimal(0))
    paid = sum((Decimal(p.amount) for p in payments if p.customer_id == customer_id), Decimal(0))
    return q2(purchase - paid)


def customer_summaries(
    customers: Sequence[CustomerRecord],
    entries: Iterable[BetEntry],
    payments: Iterable[PaymentRecord],
) -> List[CustomerSummary]:
    purchases = _sum_by_customer(entries)
    paid = _sum_by_customer(payments)

    summaries = []
    for customer in customers:
        total_purchase = q2(purchases.get(customer.id, Decimal(0)))
        total_paid = q2(paid.get(customer.id, Decimal(0)))
        balance = total_purchase - total_paid
        summaries.append(CustomerSummary(
            customer=customer,
            total_purchase=total_purchase,
            total_paid=total_paid,
            balance=balance,
            status=PaymentStatus.PAID if balance <= 0 else PaymentStatus.PENDING,
        ))
    return summaries


def dashboard_summary(
    customers: Sequence[CustomerRecord],
    entries: Sequence[BetEntry],
    margin: Optional[float] = None,
    days: int = 7,
    top: int = 5,
) -> DashboardSummary:
    if margin is None:
        from app.core.config import settings
        margin = settings.ESTIMATED_MARGIN

    total_sales = sum((Decimal(e.amount) for e in entries), Decimal(0))

    # ยอดขายรายงวด เรียงตามวันที่ เอาเฉพาะ N งวดล่าสุด
    by_day: Dict[str, Decimal] = {}
    for e in entries:
        key = str(e.draw_date)
        by_day[key] = by_day.get(key, Decimal(0)) + Decimal(e.amount)
    ordered = OrderedDict(sorted(by_day.items()))
    sales_by_day = [{"draw_date": k, "sales": q2(v)} for k, v in list(ordered.items())[-days:]]

    names = {c.id: c.name for c in customers}
    ranked = sorted(_sum_by_customer(entries).items(), key=lambda kv: kv[1], reverse=True)[:top]
    top_customers = [
        {"customer_id": cid, "name": names.get(cid) or "Unknown", "total": q2(total)}
        for cid, total in ranked
    ]

    return DashboardSummary(
        total_sales=q2(total_sales),
        estimated_profit=q2(total_sales * Decimal(str(margin))),
        customer_count=len(customers),
        sales_by_day=sales_by_day,
        top_customers=top_customers,
    )
