# init_tables.py
import logging

from app.db.session import engine
from app.db.base_class import Base
from app.models import ledger  # noqa: F401  (ให้ SQLAlchemy รู้จักทุก Model ก่อน create_all)

logger = logging.getLogger(__name__)

def init_db():
    logger.info("Creating database tables...")
    # สร้างเฉพาะตารางที่ยังไม่มี (ตารางเดิมไม่หาย)
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully")

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
