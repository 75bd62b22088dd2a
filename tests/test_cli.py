from __future__ import annotations

import json
import unittest
from decimal import Decimal

from _support import FixedClock
from infrastructure.config import AppConfig
from infrastructure.persistence.memory_store import build_memory_stores
from interface.cli import build_services, run


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self.services = build_services(AppConfig(store="memory"), stores=build_memory_stores(), clock=FixedClock())

    def _run(self, *argv: str) -> dict:
        return json.loads(run(list(argv), self.services))

    def test_default_command_is_status(self) -> None:
        status = self._run()
        self.assertEqual(Decimal(status["weeklyTarget"]), Decimal("100000"))
        self.assertEqual(status["missionProgress"]["type"], "COFFEE")

    def test_budget_expense_then_weekly_check(self) -> None:
        self.assertEqual(Decimal(self._run("set-budget", "100000")["targetAmount"]), Decimal("100000"))
        txn = self._run("expense", "30000", "배민 치킨")
        self.assertEqual(txn["type"], "expense")
        self.assertEqual(txn["description"], "배민 치킨")

        character = self._run("check-weekly")
        self.assertEqual(character["experience"], 70)

        categories = self._run("category")["categoryExpenses"]
        self.assertEqual(Decimal(categories["배달음식"]), Decimal("30000"))

    def test_add_exp(self) -> None:
        self.assertEqual(self._run("add-exp", "2500")["experience"], 2)

    def test_bad_amount_exits(self) -> None:
        with self.assertRaises(SystemExit):
            run(["expense", "lots"], self.services)

    def test_reset(self) -> None:
        self._run("income", "500000")
        result = self._run("reset")
        self.assertEqual(result["deletedTransactions"], 1)


if __name__ == "__main__":
    unittest.main()
