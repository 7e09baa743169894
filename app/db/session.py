# app/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core.config import settings

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    # SQLite ใช้กับ FastAPI (หลาย thread) ต้องปิด check_same_thread
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        # เช็คก่อนเสมอว่า Connection ยังดีอยู่ไหม ถ้าตายจะต่อใหม่ให้เอง
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        # รีไซเคิล connection ทุก 1 ชั่วโมง ป้องกัน DB ตัดเพราะนานเกิน
        pool_recycle=3600
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
