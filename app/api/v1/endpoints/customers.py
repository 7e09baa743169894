from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.models.ledger import Customer, LotteryEntry, Payment
from app.schemas import CustomerCreate, CustomerResponse, CustomerSummaryResponse
from app.core.ledger import customer_summaries

router = APIRouter()

def _summary_response(summary, customer: Customer) -> CustomerSummaryResponse:
    return CustomerSummaryResponse(
        id=customer.id,
        name=customer.name,
        phone=customer.phone,
        created_at=customer.created_at,
        total_purchase=summary.total_purchase,
        total_paid=summary.total_paid,
        balance=summary.balance,
        status=summary.status,
    )

@router.get("/", response_model=List[CustomerSummaryResponse])
def list_customers(db: Session = Depends(get_db)):
    customers = db.query(Customer).order_by(Customer.created_at, Customer.name).all()
    entries = [e.to_bet_entry() for e in db.query(LotteryEntry).all()]
    payments = [p.to_record() for p in db.query(Payment).all()]

    summaries = customer_summaries([c.to_record() for c in customers], entries, payments)
    return [_summary_response(s, c) for s, c in zip(summaries, customers)]

@router.post("/", response_model=CustomerResponse)
def create_customer(data: CustomerCreate, db: Session = Depends(get_db)):
    customer = Customer(name=data.name, phone=data.phone)
    db.add(customer)
    db.commit()
    db.refresh(customer)
    return customer

@router.get("/{customer_id}", response_model=CustomerSummaryResponse)
def get_customer(customer_id: UUID, db: Session = Depends(get_db)):
    customer = deps.get_customer_or_404(db, customer_id)
    entries = [e.to_bet_entry() for e in customer.entries]
    payments = [p.to_record() for p in customer.payments]

    summary = customer_summaries([customer.to_record()], entries, payments)[0]
    return _summary_response(summary, customer)
