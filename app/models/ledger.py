import uuid
from sqlalchemy import Column, String, ForeignKey, DECIMAL, DateTime, Date, JSON, Uuid, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base
from app.core.game_logic import BetEntry, BetType, WinningNumbers
from app.core.ledger import CustomerRecord, PaymentMethod, PaymentRecord

class Customer(Base):
    __tablename__ = "customers"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    entries = relationship("LotteryEntry", back_populates="customer")
    payments = relationship("Payment", back_populates="customer")

    def to_record(self) -> CustomerRecord:
        return CustomerRecord(id=self.id, name=self.name, phone=self.phone or "")

class LotteryEntry(Base):
    # โพยที่บันทึกแล้วห้ามแก้/ลบ
    __tablename__ = "lottery_entries"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id"), nullable=False, index=True)
    draw_date = Column(Date, nullable=False, index=True)
    bet_type = Column(SAEnum(BetType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    number = Column(String, nullable=False)
    amount = Column(DECIMAL(10, 2), nullable=False)
    payout_rate = Column(DECIMAL(10, 2), nullable=False, default=0)  # เรท ณ ตอนแทง
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    customer = relationship("Customer", back_populates="entries")

    def to_bet_entry(self) -> BetEntry:
        return BetEntry(
            id=self.id,
            customer_id=self.customer_id,
            draw_date=self.draw_date,
            bet_type=self.bet_type,
            number=self.number,
            amount=self.amount,
            payout_rate=self.payout_rate,
        )

class Payment(Base):
    __tablename__ = "payments"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    customer_id = Column(Uuid(as_uuid=True), ForeignKey("customers.id"), nullable=False, index=True)
    amount = Column(DECIMAL(10, 2), nullable=False)
    date = Column(Date, nullable=False)
    method = Column(SAEnum(PaymentMethod), nullable=False, default=PaymentMethod.TRANSFER)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    customer = relationship("Customer", back_populates="payments")

    def to_record(self) -> PaymentRecord:
        return PaymentRecord(id=self.id, customer_id=self.customer_id, amount=self.amount, method=self.method)

# ตารางเรทจ่าย (1 แถวต่อ 1 ประเภท)
class PayoutRate(Base):
    __tablename__ = "payout_rates"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    bet_type = Column(String(20), unique=True, nullable=False)  # เก็บ code เช่น "2up"
    rate = Column(DECIMAL(10, 2), nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class DrawResult(Base):
    __tablename__ = "draw_results"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    draw_date = Column(Date, unique=True, nullable=False)

    top_3 = Column(String(3), nullable=True)
    bottom_2 = Column(String(2), nullable=True)
    reward_data = Column(JSON, nullable=False, default=dict)  # front3 / bottom3 / first_prize
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def to_winning_numbers(self) -> WinningNumbers:
        data = self.reward_data or {}
        front3 = list(data.get("front3") or []) + ["", ""]
        bottom3 = list(data.get("bottom3") or []) + ["", ""]
        return WinningNumbers(
            top3=self.top_3 or "",
            bottom2=self.bottom_2 or "",
            front3=(front3[0], front3[1]),
            bottom3=(bottom3[0], bottom3[1]),
            first_prize=data.get("first_prize") or "",
        )
