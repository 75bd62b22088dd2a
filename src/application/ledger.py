from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal

from application.savings import Clock
from domain.models import Budget, Transaction, TransactionType
from domain.schemas import TransactionCreate
from infrastructure.persistence.store import BudgetStore, TransactionStore

logger = logging.getLogger(__name__)


class LedgerService:
    """Transaction log and the singleton weekly budget."""

    def __init__(self, transactions: TransactionStore, budget: BudgetStore, clock: Clock = datetime.now):
        self._transactions = transactions
        self._budget = budget
        self._clock = clock

    def list_transactions(self) -> list[Transaction]:
        return self._transactions.list_all()

    def transactions_on(self, day: date) -> list[Transaction]:
        return self._transactions.list_for_day(day)

    def record(self, payload: TransactionCreate) -> Transaction:
        txn = self._transactions.add(
            Transaction(
                id=None,
                type=TransactionType(payload.type),
                amount=payload.amount,
                description=payload.description,
                created_at=payload.created_at or self._clock(),
            )
        )
        logger.info("Recorded transaction id=%s type=%s amount=%s", txn.id, txn.type.value, txn.amount)
        return txn

    def delete(self, txn_id: int) -> None:
        self._transactions.delete(txn_id)
        logger.info("Deleted transaction id=%s", txn_id)

    def reset_transactions(self) -> int:
        removed = self._transactions.delete_all()
        logger.info("Transactions reset removed=%d", removed)
        return removed

    def current_budget(self) -> Budget:
        """Stored budget, or an unsaved default when none was ever set."""
        return self._budget.get() or Budget.default(self._clock())

    def set_budget(self, amount: Decimal) -> Budget:
        if amount < 0:
            raise ValueError("Budget target must be non-negative.")
        budget = self.current_budget()
        budget.set_target(amount, self._clock())
        saved = self._budget.save(budget)
        logger.info("Budget set target=%s version=%d", saved.target_amount, saved.version)
        return saved
