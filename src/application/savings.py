from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Iterable, Optional

from application.classifier import classify, matches_mission
from domain.models import Budget, MissionType, SpendingCategory, Transaction, week_start
from infrastructure.persistence.store import BudgetStore, TransactionStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
CENTS = Decimal("0.01")
ZERO = Decimal("0")


def expenses_between(transactions: Iterable[Transaction], start: date, end: date) -> Decimal:
    """Sum of expense amounts dated within [start, end]."""
    return sum(
        (t.amount for t in transactions if t.is_expense and start <= t.posted_on <= end),
        ZERO,
    )


def weekly_expenses(transactions: Iterable[Transaction], reference_date: date) -> Decimal:
    start = week_start(reference_date)
    return expenses_between(transactions, start, start + timedelta(days=6))


def day_expenses(transactions: Iterable[Transaction], day: date) -> Decimal:
    return expenses_between(transactions, day, day)


def _in_bucket(txn: Transaction, category: SpendingCategory | MissionType) -> bool:
    if isinstance(category, MissionType):
        return matches_mission(txn.description, category)
    return classify(txn.description) == category


def category_expenses(
    transactions: Iterable[Transaction],
    category: SpendingCategory | MissionType,
    since: date,
) -> Decimal:
    return sum(
        (t.amount for t in transactions if t.is_expense and t.posted_on >= since and _in_bucket(t, category)),
        ZERO,
    )


def saved_amount(target: Decimal, expenses: Decimal) -> Decimal:
    """Target minus spend; negative when overspent."""
    return target - expenses


def non_negative(amount: Decimal) -> Decimal:
    return amount if amount > ZERO else ZERO


def daily_target(weekly_target: Decimal) -> Decimal:
    return (weekly_target / Decimal(7)).quantize(CENTS, rounding=ROUND_HALF_UP)


class SavingsCalculator:
    """Reads the store snapshots and applies the savings arithmetic above."""

    def __init__(self, transactions: TransactionStore, budget: BudgetStore, clock: Clock = datetime.now):
        self._transactions = transactions
        self._budget = budget
        self._clock = clock

    def today(self) -> date:
        return self._clock().date()

    def current_budget(self) -> Optional[Budget]:
        budget = self._budget.get()
        if budget is None:
            logger.info("No budget stored; savings checks will be skipped")
        return budget

    def budget_or_default(self) -> Budget:
        return self._budget.get() or Budget.default(self._clock())

    def weekly_expenses(self, reference_date: Optional[date] = None) -> Decimal:
        day = reference_date or self.today()
        total = weekly_expenses(self._transactions.list_all(), day)
        logger.debug("Weekly expenses week_start=%s total=%s", week_start(day), total)
        return total

    def today_expenses(self, reference_date: Optional[date] = None) -> Decimal:
        day = reference_date or self.today()
        return day_expenses(self._transactions.list_all(), day)

    def category_expenses(self, category: SpendingCategory | MissionType, since: date) -> Decimal:
        return category_expenses(self._transactions.list_all(), category, since)
