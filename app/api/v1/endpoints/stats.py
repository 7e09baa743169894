from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models.ledger import Customer, LotteryEntry
from app.schemas import DashboardResponse
from app.core.config import settings
from app.core.ledger import dashboard_summary

router = APIRouter()

@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(db: Session = Depends(get_db)):
    customers = [c.to_record() for c in db.query(Customer).all()]
    entries = [e.to_bet_entry() for e in db.query(LotteryEntry).order_by(LotteryEntry.draw_date).all()]

    summary = dashboard_summary(customers, entries, margin=settings.ESTIMATED_MARGIN)
    return {
        "total_sales": summary.total_sales,
        "estimated_profit": summary.estimated_profit,
        "customer_count": summary.customer_count,
        "sales_by_day": summary.sales_by_day,
        "top_customers": [{**c, "customer_id": str(c["customer_id"])} for c in summary.top_customers],
    }
