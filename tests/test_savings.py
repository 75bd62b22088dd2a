from __future__ import annotations

import unittest
from datetime import date, datetime, timedelta
from decimal import Decimal

from _support import NOW, FixedClock, expense, income, stores_with_budget
from application.savings import (
    SavingsCalculator,
    category_expenses,
    daily_target,
    expenses_between,
    non_negative,
    saved_amount,
    weekly_expenses,
)
from domain.models import Budget, MissionType, SpendingCategory, week_start
from infrastructure.persistence.memory_store import build_memory_stores


class SavingsArithmeticTests(unittest.TestCase):
    def test_week_starts_on_monday(self) -> None:
        self.assertEqual(week_start(date(2026, 10, 14)), date(2026, 10, 12))
        self.assertEqual(week_start(date(2026, 10, 12)), date(2026, 10, 12))
        self.assertEqual(week_start(date(2026, 10, 18)), date(2026, 10, 12))

    def test_weekly_expenses_ignore_income_and_other_weeks(self) -> None:
        txns = [
            expense("30000", "장보기"),
            income("500000"),
            expense("9000", "지난주 점심", when=NOW - timedelta(days=3)),
            expense("7000", "다음주 점심", when=NOW + timedelta(days=5)),
        ]
        self.assertEqual(weekly_expenses(txns, NOW.date()), Decimal("30000"))

    def test_week_boundaries_are_inclusive(self) -> None:
        txns = [
            expense("1000", "monday", when=datetime(2026, 10, 12, 0, 0)),
            expense("2000", "sunday", when=datetime(2026, 10, 18, 23, 59)),
        ]
        self.assertEqual(weekly_expenses(txns, NOW.date()), Decimal("3000"))

    def test_saved_amount_can_go_negative(self) -> None:
        self.assertEqual(saved_amount(Decimal("100000"), Decimal("30000")), Decimal("70000"))
        self.assertEqual(saved_amount(Decimal("100000"), Decimal("130000")), Decimal("-30000"))
        self.assertEqual(non_negative(Decimal("-30000")), Decimal("0"))

    def test_daily_target_rounds_half_up_to_cents(self) -> None:
        self.assertEqual(daily_target(Decimal("100000")), Decimal("14285.71"))
        self.assertEqual(daily_target(Decimal("70000")), Decimal("10000.00"))
        self.assertEqual(daily_target(Decimal("0.035")), Decimal("0.01"))

    def test_expenses_between_with_empty_input(self) -> None:
        self.assertEqual(expenses_between([], date(2026, 1, 1), date(2026, 12, 31)), Decimal("0"))

    def test_category_expenses_since_is_inclusive(self) -> None:
        since = date(2026, 9, 16)
        txns = [
            expense("5000", "스타벅스", when=datetime(2026, 9, 16, 8, 0)),
            expense("4000", "카페", when=datetime(2026, 9, 15, 23, 0)),
            expense("3000", "간식"),
        ]
        self.assertEqual(category_expenses(txns, SpendingCategory.COFFEE, since), Decimal("5000"))
        self.assertEqual(category_expenses(txns, MissionType.COFFEE, since), Decimal("5000"))
        self.assertEqual(category_expenses(txns, MissionType.LUXURY, since), Decimal("0"))


class SavingsCalculatorTests(unittest.TestCase):
    def test_reads_current_week_and_today_from_store(self) -> None:
        stores = stores_with_budget()
        stores.transactions.add(expense("30000", "장보기"))
        stores.transactions.add(expense("5000", "점심", when=NOW - timedelta(days=1)))
        calc = SavingsCalculator(stores.transactions, stores.budget, FixedClock())

        self.assertEqual(calc.weekly_expenses(), Decimal("35000"))
        self.assertEqual(calc.today_expenses(), Decimal("30000"))
        self.assertEqual(calc.current_budget().target_amount, Decimal("100000"))

    def test_missing_budget_is_reported_and_defaulted(self) -> None:
        stores = build_memory_stores()
        calc = SavingsCalculator(stores.transactions, stores.budget, FixedClock())

        self.assertIsNone(calc.current_budget())
        fallback = calc.budget_or_default()
        self.assertEqual(fallback.target_amount, Decimal("100000"))
        self.assertEqual(fallback.start_date, date(2026, 10, 12))
        self.assertEqual(fallback.end_date, date(2026, 10, 18))

    def test_default_budget_is_weekly(self) -> None:
        budget = Budget.default(NOW)
        self.assertEqual(budget.period, "weekly")
        self.assertEqual(budget.version, 0)


if __name__ == "__main__":
    unittest.main()
