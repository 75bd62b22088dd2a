from __future__ import annotations

import copy
import itertools
import threading
from typing import Optional

from domain.models import Budget, Character, Mission, MissionType, Stage, Transaction
from infrastructure.persistence.store import (
    BudgetStore,
    CharacterStore,
    MissionStore,
    RecordNotFoundError,
    StaleRecordError,
    Stores,
    TransactionStore,
)


class InMemoryTransactionStore(TransactionStore):
    def __init__(self) -> None:
        self._rows: dict[int, Transaction] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def list_all(self) -> list[Transaction]:
        with self._lock:
            rows = [copy.copy(t) for t in self._rows.values()]
        return sorted(rows, key=lambda t: (t.created_at, t.id), reverse=True)

    def add(self, txn: Transaction) -> Transaction:
        with self._lock:
            stored = copy.copy(txn)
            stored.id = next(self._ids)
            self._rows[stored.id] = stored
            return copy.copy(stored)

    def delete(self, txn_id: int) -> None:
        with self._lock:
            if self._rows.pop(txn_id, None) is None:
                raise RecordNotFoundError(f"Transaction not found: {txn_id}")

    def delete_all(self) -> int:
        with self._lock:
            removed = len(self._rows)
            self._rows.clear()
            return removed


class InMemoryBudgetStore(BudgetStore):
    def __init__(self) -> None:
        self._budget: Budget | None = None
        self._lock = threading.Lock()

    def get(self) -> Optional[Budget]:
        with self._lock:
            return copy.copy(self._budget)

    def save(self, budget: Budget) -> Budget:
        with self._lock:
            current_version = self._budget.version if self._budget else 0
            if budget.version != current_version:
                raise StaleRecordError(
                    f"Budget version {budget.version} is stale (stored={current_version})"
                )
            stored = copy.copy(budget)
            stored.version = current_version + 1
            self._budget = stored
            return copy.copy(stored)


class InMemoryCharacterStore(CharacterStore):
    def __init__(self) -> None:
        self._rows: dict[int, Character] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def get_latest(self) -> Optional[Character]:
        with self._lock:
            if not self._rows:
                return None
            latest = max(self._rows.values(), key=lambda c: (c.created_at, c.id))
            return copy.copy(latest)

    def save(self, character: Character) -> Character:
        with self._lock:
            stored = copy.copy(character)
            if stored.id is None:
                stored.id = next(self._ids)
                stored.version = 1
            else:
                existing = self._rows.get(stored.id)
                if existing is None:
                    raise RecordNotFoundError(f"Character not found: {stored.id}")
                if existing.version != character.version:
                    raise StaleRecordError(
                        f"Character {stored.id} version {character.version} is stale (stored={existing.version})"
                    )
                stored.version = existing.version + 1
            self._rows[stored.id] = stored
            return copy.copy(stored)

    def delete_all(self) -> int:
        with self._lock:
            removed = len(self._rows)
            self._rows.clear()
            return removed


class InMemoryMissionStore(MissionStore):
    def __init__(self) -> None:
        self._rows: dict[int, Mission] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def count(self) -> int:
        with self._lock:
            return len(self._rows)

    def add(self, mission: Mission) -> Mission:
        with self._lock:
            stored = copy.copy(mission)
            stored.id = next(self._ids)
            self._rows[stored.id] = stored
            return copy.copy(stored)

    def save(self, mission: Mission) -> Mission:
        with self._lock:
            if mission.id not in self._rows:
                raise RecordNotFoundError(f"Mission not found: {mission.id}")
            self._rows[mission.id] = copy.copy(mission)
            return copy.copy(mission)

    def list_for_stage(self, stage: Stage) -> list[Mission]:
        with self._lock:
            return [copy.copy(m) for _, m in sorted(self._rows.items()) if m.stage == stage]

    def find(self, stage: Stage, mission_type: MissionType) -> Optional[Mission]:
        with self._lock:
            for _, mission in sorted(self._rows.items()):
                if mission.stage == stage and mission.mission_type == mission_type:
                    return copy.copy(mission)
        return None

    def list_completed(self) -> list[Mission]:
        with self._lock:
            return [copy.copy(m) for _, m in sorted(self._rows.items()) if m.completed]

    def delete_all(self) -> int:
        with self._lock:
            removed = len(self._rows)
            self._rows.clear()
            return removed


def build_memory_stores() -> Stores:
    return Stores(
        transactions=InMemoryTransactionStore(),
        budget=InMemoryBudgetStore(),
        characters=InMemoryCharacterStore(),
        missions=InMemoryMissionStore(),
    )
