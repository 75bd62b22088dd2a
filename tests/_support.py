from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

from domain.models import Budget, Transaction, TransactionType
from infrastructure.persistence.memory_store import build_memory_stores
from infrastructure.persistence.store import Stores

# Wednesday; its week starts Monday 2026-10-12.
NOW = datetime(2026, 10, 14, 12, 0, 0)


class FixedClock:
    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def expense(amount: str, description: str, when: datetime = NOW) -> Transaction:
    return Transaction(
        id=None,
        type=TransactionType.EXPENSE,
        amount=Decimal(amount),
        description=description,
        created_at=when,
    )


def income(amount: str, description: str = "월급", when: datetime = NOW) -> Transaction:
    return Transaction(
        id=None,
        type=TransactionType.INCOME,
        amount=Decimal(amount),
        description=description,
        created_at=when,
    )


def stores_with_budget(target: str = "100000", now: datetime = NOW) -> Stores:
    stores = build_memory_stores()
    budget = Budget.default(now)
    budget.set_target(Decimal(target), now)
    stores.budget.save(budget)
    return stores
