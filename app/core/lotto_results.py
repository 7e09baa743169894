# app/core/lotto_results.py
"""
ดึงผลสลากกินแบ่งรัฐบาลจากแหล่งภายนอก (HTTP)

- แต่ละแหล่ง (provider) ถูกลองตามลำดับ แหล่งแรกที่คืนผลครบถ้วนถูกต้องเป็นผู้ชนะ
- ถ้าทุกแหล่งล้มเหลว คืน None (= ยังไม่ทราบผล ให้ผู้ใช้กรอกเอง)
- รหัสงวดของ provider เป็น DDMMYYYY ปี พ.ศ. เช่น 16112568 = 2025-11-16
"""
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Iterable, List, Optional, Sequence

import requests

from app.core.config import settings, get_round_date, get_thai_now
from app.core.game_logic import WinningNumbers

logger = logging.getLogger(__name__)

BE_OFFSET = 543
_API_ID_RE = re.compile(r"^\d{8}$")


def api_id_to_date(api_id: str) -> Optional[date]:
    """16112568 -> date(2025, 11, 16) คืน None ถ้ารูปแบบไม่ถูก"""
    if not isinstance(api_id, str) or not _API_ID_RE.match(api_id):
        return None
    try:
        return date(int(api_id[4:8]) - BE_OFFSET, int(api_id[2:4]), int(api_id[0:2]))
    except ValueError:
        return None


def date_to_api_id(draw_date: date) -> str:
    return f"{draw_date.day:02d}{draw_date.month:02d}{draw_date.year + BE_OFFSET}"


class RayriffyProvider:
    """Client ของ lotto.api.rayriffy.com (รองรับทั้งโครงสร้าง JSON แบบเก่าและแบบใหม่)"""

    # key แบบใหม่มาก่อน ถ้าไม่มีค่อยใช้ key แบบเก่า
    FRONT_3_KEYS = ("runningNumberFrontThree", "prizeFront3")
    LAST_3_KEYS = ("runningNumberBackThree", "prizeLast3")
    LAST_2_KEYS = ("runningNumberBackTwo", "prizeLast2")

    def __init__(self, base_url: str, timeout: float = None, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.RESULT_FETCH_TIMEOUT
        # ใช้ requests.get ระดับ module (history ดึงหลาย thread พร้อมกัน ห้ามแชร์ Session)
        self.session = session or requests

    def __repr__(self) -> str:
        return f"RayriffyProvider({self.base_url!r})"

    def _get_json(self, path: str) -> dict:
        response = self.session.get(f"{self.base_url}{path}", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def list_draw_ids(self) -> List[str]:
        """รายการรหัสงวด (ใหม่สุดอยู่หน้า)"""
        data = self._get_json("/list")
        ids = data.get("response") if isinstance(data, dict) else None
        if not isinstance(ids, list):
            raise ValueError("unexpected list payload")
        return [str(i) for i in ids]

    def fetch(self, api_id: str) -> Optional[WinningNumbers]:
        data = self._get_json(f"/lotto/{api_id}")
        body = data.get("response") if isinstance(data, dict) else None
        if not isinstance(body, dict):
            return None
        return self.parse(body)

    @classmethod
    def parse(cls, body: dict) -> WinningNumbers:
        def numbers_for(key: str) -> List[str]:
            # prizes (โครงสร้างเดิม) ก่อน แล้วค่อย runningNumbers (โครงสร้างใหม่)
            # JSON ผิดรูปแบบ (ไม่ใช่ list) ถือว่าไม่มีข้อมูล
            for group in ("prizes", "runningNumbers"):
                items = body.get(group)
                if not isinstance(items, list):
                    continue
                for item in items:
                    if isinstance(item, dict) and item.get("id") == key:
                        numbers = item.get("number")
                        if not isinstance(numbers, list):
                            return []
                        return [n for n in numbers if isinstance(n, str)]
            return []

        def first_available(keys: Sequence[str]) -> List[str]:
            for key in keys:
                found = numbers_for(key)
                if found:
                    return found
            return []

        first = next(iter(numbers_for("prizeFirst")), "")
        front3 = first_available(cls.FRONT_3_KEYS)
        last3 = first_available(cls.LAST_3_KEYS)
        last2 = first_available(cls.LAST_2_KEYS)

        def slot(values: List[str], index: int) -> str:
            return values[index] if len(values) > index else ""

        return WinningNumbers(
            top3=first[-3:],
            bottom2=slot(last2, 0),
            front3=(slot(front3, 0), slot(front3, 1)),
            bottom3=(slot(last3, 0), slot(last3, 1)),
            first_prize=first,
        )


def clamp_history_limit(limit: Optional[int]) -> int:
    """None = ค่า default, นอกนั้นบังคับให้อยู่ระหว่าง 1 ถึง RESULT_HISTORY_MAX"""
    if limit is None:
        return settings.RESULT_HISTORY_LIMIT
    return max(1, min(int(limit), settings.RESULT_HISTORY_MAX))


class ResultSource:
    """รวมหลายแหล่งผลรางวัล ลองตามลำดับ ผลแรกที่ถูกต้องชนะ"""

    def __init__(self, providers: Iterable, batch_size: int = None):
        self.providers = list(providers)
        self.batch_size = batch_size or settings.RESULT_BATCH_SIZE

    def fetch(self, draw: "date | str") -> Optional[WinningNumbers]:
        api_id = draw if isinstance(draw, str) else date_to_api_id(draw)
        for provider in self.providers:
            try:
                result = provider.fetch(api_id)
            except (requests.RequestException, ValueError, TypeError, AttributeError) as e:
                logger.warning("Result fetch failed for %s via %r: %s", api_id, provider, e)
                continue
            if result is not None and result.is_complete():
                return result
            logger.warning("Incomplete result for %s via %r, trying next provider", api_id, provider)
        logger.info("No provider returned a result for %s", api_id)
        return None

    def list_draw_ids(self) -> List[str]:
        for provider in self.providers:
            try:
                ids = provider.list_draw_ids()
            except (requests.RequestException, ValueError, TypeError, AttributeError) as e:
                logger.warning("Draw list failed via %r: %s", provider, e)
                continue
            ids = [i for i in ids if api_id_to_date(i) is not None]
            if ids:
                return ids
        return []

    def latest(self, fallback_date: Optional[date] = None) -> Optional[tuple]:
        """
        (draw_date, WinningNumbers) ของงวดล่าสุด หรือ None

        ถ้าดึงรายการงวดไม่ได้ ลองดึงงวดปัจจุบันตรงๆ แทน (fallback_date หรืองวดตามเวลาไทย)
        """
        ids = self.list_draw_ids()
        if ids:
            result = self.fetch(ids[0])
            return (api_id_to_date(ids[0]), result) if result is not None else None

        if fallback_date is None:
            fallback_date = get_round_date(get_thai_now())
        result = self.fetch(fallback_date)
        return (fallback_date, result) if result is not None else None

    def history(self, limit: int = None) -> List[tuple]:
        """ดึงย้อนหลังทีละ batch (list-then-detail) ข้ามงวดที่ดึงไม่ได้"""
        ids = self.list_draw_ids()[:clamp_history_limit(limit)]
        results = []
        if not ids:
            return results
        with ThreadPoolExecutor(max_workers=self.batch_size) as pool:
            for start in range(0, len(ids), self.batch_size):
                batch = ids[start:start + self.batch_size]
                for api_id, result in zip(batch, pool.map(self.fetch, batch)):
                    if result is not None:
                        results.append((api_id_to_date(api_id), result))
        return results


def get_result_source() -> ResultSource:
    return ResultSource(RayriffyProvider(url) for url in settings.RESULT_PROVIDER_URLS)
