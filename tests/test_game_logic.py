import unittest
from datetime import date
from decimal import Decimal

from app.core.game_logic import (
    BetEntry,
    BetType,
    NUMBER_LENGTHS,
    WinningNumbers,
    check_is_win_precise,
    directory_lookup,
    evaluate_draw,
    get_reward_rate,
    resolve_rate,
    sanitize_digits,
    total_payout,
)
from app.core.reward_calculator import RewardCalculator

DRAW = date(2024, 1, 1)

WINNING = WinningNumbers(
    top3="123",
    bottom2="45",
    front3=("567", "890"),
    bottom3=("111", "222"),
)


def make_entry(bet_type, number, amount="100", payout_rate="0", draw_date=DRAW, entry_id="e1", customer_id="c1"):
    return BetEntry(
        id=entry_id,
        customer_id=customer_id,
        draw_date=draw_date,
        bet_type=bet_type,
        number=number,
        amount=Decimal(amount),
        payout_rate=Decimal(payout_rate) if payout_rate is not None else None,
    )


class MatchRuleTests(unittest.TestCase):
    def test_every_bet_type_has_a_rule_and_length(self) -> None:
        calculator = RewardCalculator(WINNING)
        for bet_type in BetType:
            self.assertIn(bet_type, NUMBER_LENGTHS)
            self.assertIn(bet_type, calculator._rules)

    def test_top_3_exact(self) -> None:
        self.assertTrue(check_is_win_precise(BetType.TOP_3, "123", WINNING))
        self.assertFalse(check_is_win_precise(BetType.TOP_3, "321", WINNING))

    def test_tod_3_any_order(self) -> None:
        self.assertTrue(check_is_win_precise(BetType.TOD_3, "321", WINNING))
        self.assertTrue(check_is_win_precise(BetType.TOD_3, "123", WINNING))
        self.assertFalse(check_is_win_precise(BetType.TOD_3, "321", WinningNumbers(top3="124")))

    def test_tod_3_requires_three_digit_entry(self) -> None:
        self.assertFalse(check_is_win_precise(BetType.TOD_3, "12", WINNING))
        self.assertFalse(check_is_win_precise(BetType.TOD_3, "1234", WINNING))
        self.assertFalse(check_is_win_precise(BetType.TOD_3, "", WinningNumbers()))

    def test_front_and_bottom_3_match_either_slot(self) -> None:
        self.assertTrue(check_is_win_precise(BetType.FRONT_3, "567", WINNING))
        self.assertTrue(check_is_win_precise(BetType.FRONT_3, "890", WINNING))
        self.assertFalse(check_is_win_precise(BetType.FRONT_3, "111", WINNING))
        self.assertTrue(check_is_win_precise(BetType.BOTTOM_3, "222", WINNING))
        self.assertFalse(check_is_win_precise(BetType.BOTTOM_3, "567", WINNING))

    def test_empty_slots_never_match(self) -> None:
        partial = WinningNumbers(top3="123", bottom2="45", front3=("567", ""), bottom3=("", ""))
        self.assertFalse(check_is_win_precise(BetType.FRONT_3, "", partial))
        self.assertFalse(check_is_win_precise(BetType.BOTTOM_3, "", partial))
        self.assertFalse(check_is_win_precise(BetType.TOP_3, "", WinningNumbers()))
        self.assertFalse(check_is_win_precise(BetType.BOTTOM_2, "", WinningNumbers()))

    def test_top_2_uses_last_two_digits_of_top_3(self) -> None:
        self.assertTrue(check_is_win_precise(BetType.TOP_2, "23", WINNING))
        self.assertFalse(check_is_win_precise(BetType.TOP_2, "12", WINNING))
        self.assertFalse(check_is_win_precise(BetType.TOP_2, "23", WinningNumbers(top3="")))
        self.assertFalse(check_is_win_precise(BetType.TOP_2, "23", WinningNumbers(top3="23")))
        self.assertFalse(check_is_win_precise(BetType.TOP_2, "23", WinningNumbers(top3="0123")))

    def test_bottom_2(self) -> None:
        self.assertTrue(check_is_win_precise(BetType.BOTTOM_2, "45", WINNING))
        self.assertFalse(check_is_win_precise(BetType.BOTTOM_2, "54", WINNING))

    def test_run_top(self) -> None:
        self.assertTrue(check_is_win_precise(BetType.RUN_TOP, "2", WinningNumbers(top3="123")))
        self.assertFalse(check_is_win_precise(BetType.RUN_TOP, "2", WinningNumbers(top3="045")))
        self.assertFalse(check_is_win_precise(BetType.RUN_TOP, "2", WinningNumbers(top3="")))

    def test_run_bottom(self) -> None:
        self.assertTrue(check_is_win_precise(BetType.RUN_BOTTOM, "5", WINNING))
        self.assertFalse(check_is_win_precise(BetType.RUN_BOTTOM, "9", WINNING))
        self.assertFalse(check_is_win_precise(BetType.RUN_BOTTOM, "5", WinningNumbers(top3="555")))

    def test_malformed_numbers_do_not_match(self) -> None:
        self.assertFalse(check_is_win_precise(BetType.RUN_TOP, "", WINNING))
        self.assertFalse(check_is_win_precise(BetType.RUN_TOP, "12", WINNING))
        self.assertFalse(check_is_win_precise(BetType.TOP_3, "12a", WinningNumbers(top3="12a")))
        self.assertFalse(check_is_win_precise(BetType.BOTTOM_2, "４５", WinningNumbers(bottom2="４５")))
        self.assertFalse(check_is_win_precise("unknown", "123", WINNING))
        self.assertFalse(check_is_win_precise(BetType.TOP_3, None, WINNING))  # type: ignore[arg-type]

    def test_string_bet_type_code_is_accepted(self) -> None:
        self.assertTrue(check_is_win_precise("2up", "23", WINNING))


class RateTests(unittest.TestCase):
    def test_get_reward_rate_accepts_plain_and_pay_objects(self) -> None:
        rates = {"2up": 90, "3top": {"pay": 900}, "run_up": "3.2"}
        self.assertEqual(get_reward_rate(BetType.TOP_2, rates), Decimal("90.00"))
        self.assertEqual(get_reward_rate(BetType.TOP_3, rates), Decimal("900.00"))
        self.assertEqual(get_reward_rate("run_up", rates), Decimal("3.20"))

    def test_get_reward_rate_degrades_to_zero(self) -> None:
        self.assertEqual(get_reward_rate(BetType.TOP_2, None), Decimal("0.00"))
        self.assertEqual(get_reward_rate(BetType.TOP_2, {}), Decimal("0.00"))
        self.assertEqual(get_reward_rate(BetType.TOP_2, {"2up": "abc"}), Decimal("0.00"))
        self.assertEqual(get_reward_rate(BetType.TOP_2, {"2up": -5}), Decimal("0.00"))
        self.assertEqual(get_reward_rate(BetType.TOP_2, {"3top": 900}), Decimal("0.00"))

    def test_get_reward_rate_accepts_enum_keys(self) -> None:
        self.assertEqual(get_reward_rate(BetType.BOTTOM_2, {BetType.BOTTOM_2: 95}), Decimal("95.00"))

    def test_entry_rate_takes_precedence(self) -> None:
        entry = make_entry(BetType.TOP_2, "23", payout_rate="85")
        self.assertEqual(resolve_rate(entry, {"2up": 90}), Decimal("85"))

    def test_zero_or_missing_entry_rate_falls_back(self) -> None:
        self.assertEqual(resolve_rate(make_entry(BetType.TOP_2, "23", payout_rate="0"), {"2up": 90}), Decimal("90.00"))
        self.assertEqual(resolve_rate(make_entry(BetType.TOP_2, "23", payout_rate=None), {"2up": 90}), Decimal("90.00"))


class EvaluateDrawTests(unittest.TestCase):
    def test_scenario_top_2_double_digit(self) -> None:
        entries = [make_entry(BetType.TOP_2, "88", amount="200", payout_rate="90", draw_date="2024-01-01")]
        winning = WinningNumbers(top3="888", bottom2="45")
        winners = evaluate_draw(entries, "2024-01-01", winning, {})
        self.assertEqual(len(winners), 1)
        self.assertEqual(winners[0].prize_amount, Decimal("18000"))
        self.assertEqual(winners[0].rate_used, Decimal("90"))

    def test_prize_uses_entry_rate_then_table_then_zero(self) -> None:
        entries = [
            make_entry(BetType.TOP_3, "123", payout_rate="90", entry_id="own"),
            make_entry(BetType.TOP_3, "123", payout_rate="0", entry_id="table"),
        ]
        winners = evaluate_draw(entries, DRAW, WINNING, {"3top": 90})
        self.assertEqual([w.prize_amount for w in winners], [Decimal("9000"), Decimal("9000")])

        no_rate = evaluate_draw([make_entry(BetType.TOP_3, "123", payout_rate=None)], DRAW, WINNING, {})
        self.assertEqual(len(no_rate), 1)
        self.assertEqual(no_rate[0].prize_amount, Decimal("0"))
        self.assertEqual(no_rate[0].rate_used, Decimal("0"))

    def test_other_draw_dates_are_never_returned(self) -> None:
        entries = [
            make_entry(BetType.TOP_3, "123", draw_date=date(2024, 1, 16), entry_id="other"),
            make_entry(BetType.TOP_3, "123", entry_id="same"),
        ]
        winners = evaluate_draw(entries, DRAW, WINNING, {"3top": 900})
        self.assertEqual([w.entry.id for w in winners], ["same"])

    def test_date_is_compared_without_normalization(self) -> None:
        entries = [make_entry(BetType.TOP_3, "123", draw_date="2024-01-01")]
        self.assertEqual(evaluate_draw(entries, DRAW, WINNING, {"3top": 900}), [])

    def test_losers_are_excluded_and_order_is_kept(self) -> None:
        entries = [
            make_entry(BetType.RUN_BOTTOM, "4", entry_id="a"),
            make_entry(BetType.TOP_3, "999", entry_id="b"),
            make_entry(BetType.TOD_3, "231", entry_id="c"),
            make_entry(BetType.BOTTOM_2, "45", entry_id="d"),
        ]
        winners = evaluate_draw(entries, DRAW, WINNING, {"run_down": 4, "3tod": 150, "2down": 90})
        self.assertEqual([w.entry.id for w in winners], ["a", "c", "d"])
        self.assertEqual(total_payout(winners), Decimal("400") + Decimal("15000") + Decimal("9000"))

    def test_unknown_winning_numbers_produce_no_winners(self) -> None:
        entries = [make_entry(t, "1" * NUMBER_LENGTHS[t]) for t in BetType]
        self.assertEqual(evaluate_draw(entries, DRAW, WinningNumbers(), {"3top": 900}), [])

    def test_customer_names_use_placeholder_for_unknown_ids(self) -> None:
        entries = [
            make_entry(BetType.BOTTOM_2, "45", customer_id="c1", entry_id="a"),
            make_entry(BetType.BOTTOM_2, "45", customer_id="ghost", entry_id="b"),
        ]
        winners = evaluate_draw(entries, DRAW, WINNING, {}, directory_lookup({"c1": "สมชาย ใจดี"}))
        self.assertEqual([w.customer_name for w in winners], ["สมชาย ใจดี", "N/A"])

    def test_evaluation_is_idempotent(self) -> None:
        entries = [make_entry(BetType.TOD_3, "321", payout_rate="100"), make_entry(BetType.RUN_TOP, "1", entry_id="e2")]
        first = evaluate_draw(entries, DRAW, WINNING, {"run_up": "3.2"})
        second = evaluate_draw(entries, DRAW, WINNING, {"run_up": "3.2"})
        self.assertEqual(first, second)
        self.assertEqual(repr(first), repr(second))

    def test_fractional_rates_are_rounded_to_satang(self) -> None:
        winners = evaluate_draw([make_entry(BetType.RUN_TOP, "3", amount="15")], DRAW, WINNING, {"run_up": 3.2})
        self.assertEqual(winners[0].prize_amount, Decimal("48.00"))


class SanitizeDigitsTests(unittest.TestCase):
    def test_strips_non_digits_and_truncates(self) -> None:
        self.assertEqual(sanitize_digits("1a2-3", 3), "123")
        self.assertEqual(sanitize_digits("12345", 2), "12")
        self.assertEqual(sanitize_digits(" ", 3), "")
        self.assertEqual(sanitize_digits(None, 3), "")


if __name__ == "__main__":
    unittest.main()
