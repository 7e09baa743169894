from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.models.ledger import Payment
from app.schemas import BalanceResponse, PaymentCreate, PaymentResponse
from app.core.config import get_thai_now
from app.core.ledger import balance_due

router = APIRouter()

@router.post("/", response_model=PaymentResponse)
def create_payment(data: PaymentCreate, db: Session = Depends(get_db)):
    customer = deps.get_customer_or_404(db, data.customer_id)
    payment = Payment(
        customer_id=customer.id,
        amount=data.amount,
        method=data.method,
        date=data.date or get_thai_now().date(),
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    return payment

@router.get("/", response_model=List[PaymentResponse])
def list_payments(customer_id: Optional[UUID] = None, db: Session = Depends(get_db)):
    query = db.query(Payment)
    if customer_id is not None:
        query = query.filter(Payment.customer_id == customer_id)
    return query.order_by(Payment.date.desc(), Payment.created_at.desc()).all()

@router.get("/balance/{customer_id}", response_model=BalanceResponse)
def get_balance(customer_id: UUID, db: Session = Depends(get_db)):
    customer = deps.get_customer_or_404(db, customer_id)
    due = balance_due(
        customer.id,
        [e.to_bet_entry() for e in customer.entries],
        [p.to_record() for p in customer.payments],
    )
    return {"customer_id": customer.id, "balance_due": due}
