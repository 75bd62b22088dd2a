from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

from domain.models import Budget, Character, Mission, MissionType, Stage, Transaction


class StoreError(RuntimeError):
    pass


class StaleRecordError(StoreError):
    """A compare-and-set save lost against a concurrent writer."""


class RecordNotFoundError(StoreError):
    pass


class TransactionStore(ABC):
    @abstractmethod
    def list_all(self) -> list[Transaction]:
        """All transactions, newest `created_at` first."""
        raise NotImplementedError

    @abstractmethod
    def add(self, txn: Transaction) -> Transaction:
        raise NotImplementedError

    @abstractmethod
    def delete(self, txn_id: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_all(self) -> int:
        raise NotImplementedError

    def list_for_day(self, day: date) -> list[Transaction]:
        return [t for t in self.list_all() if t.posted_on == day]


class BudgetStore(ABC):
    @abstractmethod
    def get(self) -> Optional[Budget]:
        raise NotImplementedError

    @abstractmethod
    def save(self, budget: Budget) -> Budget:
        """Compare-and-set on `budget.version`; returns the stored copy."""
        raise NotImplementedError


class CharacterStore(ABC):
    @abstractmethod
    def get_latest(self) -> Optional[Character]:
        raise NotImplementedError

    @abstractmethod
    def save(self, character: Character) -> Character:
        """Compare-and-set on `character.version`; returns the stored copy."""
        raise NotImplementedError

    @abstractmethod
    def delete_all(self) -> int:
        raise NotImplementedError


class MissionStore(ABC):
    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def add(self, mission: Mission) -> Mission:
        raise NotImplementedError

    @abstractmethod
    def save(self, mission: Mission) -> Mission:
        raise NotImplementedError

    @abstractmethod
    def list_for_stage(self, stage: Stage) -> list[Mission]:
        """Missions of `stage` in insertion order."""
        raise NotImplementedError

    @abstractmethod
    def find(self, stage: Stage, mission_type: MissionType) -> Optional[Mission]:
        raise NotImplementedError

    @abstractmethod
    def list_completed(self) -> list[Mission]:
        raise NotImplementedError

    @abstractmethod
    def delete_all(self) -> int:
        raise NotImplementedError


@dataclass
class Stores:
    transactions: TransactionStore
    budget: BudgetStore
    characters: CharacterStore
    missions: MissionStore
