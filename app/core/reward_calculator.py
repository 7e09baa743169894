# app/core/reward_calculator.py
from typing import Callable, Dict, Union

from app.core.game_logic import BetType, NUMBER_LENGTHS, WinningNumbers, is_digits

class RewardCalculator:
    """
    เตรียมเลขที่ใช้เทียบของงวดเดียวไว้ครั้งเดียว แล้วใช้ตรวจโพยทีละรายการ
    ช่องผลรางวัลที่ว่างหรือผิดรูปแบบจะถูกแทนด้วย "" ซึ่งไม่มีวันถูก
    """

    def __init__(self, winning: WinningNumbers):
        self.top_3 = winning.top3 if is_digits(winning.top3, 3) else ""          # เช่น "567"
        self.top_2 = self.top_3[-2:]                                              # 2 ตัวท้ายบน -> "67"
        self.sorted_top_3 = sorted(self.top_3)
        self.bottom_2 = winning.bottom2 if is_digits(winning.bottom2, 2) else ""  # เช่น "89"
        self.front_3 = tuple(n for n in winning.front3 if is_digits(n, 3))
        self.bottom_3 = tuple(n for n in winning.bottom3 if is_digits(n, 3))

        self._rules: Dict[BetType, Callable[[str], bool]] = {
            BetType.TOP_3: self._top_3,
            BetType.TOD_3: self._tod_3,
            BetType.FRONT_3: self._front_3,
            BetType.BOTTOM_3: self._bottom_3,
            BetType.TOP_2: self._top_2,
            BetType.BOTTOM_2: self._bottom_2,
            BetType.RUN_TOP: self._run_top,
            BetType.RUN_BOTTOM: self._run_bottom,
        }

    def check_is_win(self, bet_number: str, bet_type: Union[BetType, str]) -> bool:
        """
        Input: เลขที่ลูกค้าซื้อ (bet_number), ประเภท (bet_type)
        Output: True = ถูกรางวัล

        เลขที่แทงต้องเป็นตัวเลขล้วนและมีจำนวนหลักตรงกับประเภท ไม่งั้นถือว่าไม่ถูก
        """
        try:
            bet_type = BetType(bet_type)
        except ValueError:
            return False

        if not is_digits(bet_number, NUMBER_LENGTHS[bet_type]):
            return False
        return self._rules[bet_type](bet_number)

    # 1. กลุ่ม 3 ตัว
    def _top_3(self, number: str) -> bool:
        return bool(self.top_3) and number == self.top_3

    def _tod_3(self, number: str) -> bool:
        # โต๊ด: เรียงตัวเลขแล้วเทียบกัน (เช่น 123 == 321)
        return bool(self.top_3) and sorted(number) == self.sorted_top_3

    def _front_3(self, number: str) -> bool:
        return number in self.front_3

    def _bottom_3(self, number: str) -> bool:
        return number in self.bottom_3

    # 2. กลุ่ม 2 ตัว
    def _top_2(self, number: str) -> bool:
        return bool(self.top_2) and number == self.top_2

    def _bottom_2(self, number: str) -> bool:
        return bool(self.bottom_2) and number == self.bottom_2

    # 3. กลุ่มเลขวิ่ง
    def _run_top(self, number: str) -> bool:
        return bool(self.top_3) and number in self.top_3

    def _run_bottom(self, number: str) -> bool:
        return bool(self.bottom_2) and number in self.bottom_2
