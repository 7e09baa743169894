from typing import Dict, List
from pydantic_settings import BaseSettings
from datetime import datetime, time, timedelta, date
import pytz

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./lotto_ledger.db"
    LOG_LEVEL: str = "INFO"

    # เวลาตัดรอบวันใหม่ (Default เที่ยงคืน = ใช้วันที่ปัจจุบัน)
    DAY_CUTOFF_TIME: str = "00:00:00"
    TIMEZONE: str = "Asia/Bangkok"

    # แหล่งผลรางวัล เรียงตามลำดับความสำคัญ (ตัวแรกที่ได้ผลถูกต้องชนะ)
    RESULT_PROVIDER_URLS: List[str] = ["https://lotto.api.rayriffy.com"]
    RESULT_FETCH_TIMEOUT: float = 10.0
    RESULT_HISTORY_LIMIT: int = 24
    RESULT_HISTORY_MAX: int = 48
    RESULT_BATCH_SIZE: int = 6

    # เรทจ่ายเริ่มต้น (ใช้เมื่อยังไม่ได้ตั้งค่าในฐานข้อมูล)
    DEFAULT_PAYOUT_RATES: Dict[str, float] = {
        "3top": 900,
        "3bottom": 450,
        "3front": 450,
        "3tod": 150,
        "2up": 90,
        "2down": 90,
        "run_up": 3.2,
        "run_down": 4.2,
    }

    # กำไรโดยประมาณบน Dashboard (สัดส่วนจากยอดขาย)
    ESTIMATED_MARGIN: float = 0.15

    class Config:
        env_file = ".env"

settings = Settings()

def get_thai_now():
    """ดึงเวลาปัจจุบันโซนไทย (Asia/Bangkok) เสมอ ไม่ว่า Server จะอยู่ที่ไหน"""
    tz = pytz.timezone(settings.TIMEZONE)
    return datetime.now(tz)

def get_round_date(now_thai: datetime, cutoff_time_str: str = None) -> date:
    """
    คำนวณวันที่งวด (draw date) ที่โพยใหม่จะถูกผูกไว้

    ถ้าเวลาปัจจุบัน < เวลาตัดรอบ → ให้ถือว่าเป็นงวดของเมื่อวาน
    ถ้าเวลาปัจจุบัน >= เวลาตัดรอบ → ให้ถือว่าเป็นงวดของวันนี้

    ตัวอย่าง:
        - เวลา 04:00 น. + cutoff 05:20 → เมื่อวาน
        - เวลา 05:30 น. + cutoff 05:20 → วันนี้
    """
    if cutoff_time_str is None:
        cutoff_time_str = settings.DAY_CUTOFF_TIME

    try:
        cutoff_time = datetime.strptime(cutoff_time_str, "%H:%M:%S").time()
    except ValueError:
        # parse ไม่ได้ ใช้เที่ยงคืน
        cutoff_time = time(0, 0, 0)

    if now_thai.time() < cutoff_time:
        return now_thai.date() - timedelta(days=1)
    return now_thai.date()
