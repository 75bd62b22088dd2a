from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional

DEFAULT_WEEKLY_TARGET = Decimal("100000")
DEFAULT_CHARACTER_NAME = "머니펫"
BUDGET_ID = 1


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class Stage(str, Enum):
    EGG = "EGG"
    BABY = "BABY"
    ADULT = "ADULT"
    RICH = "RICH"
    BILLIONAIRE = "BILLIONAIRE"

    @property
    def order(self) -> int:
        return _STAGE_ORDER.index(self)

    @property
    def label(self) -> str:
        return _STAGE_LABELS[self]

    def next(self) -> Optional["Stage"]:
        idx = self.order + 1
        return _STAGE_ORDER[idx] if idx < len(_STAGE_ORDER) else None


_STAGE_ORDER = [Stage.EGG, Stage.BABY, Stage.ADULT, Stage.RICH, Stage.BILLIONAIRE]
_STAGE_LABELS = {
    Stage.EGG: "🥚 알",
    Stage.BABY: "🐣 새끼",
    Stage.ADULT: "🦆 성체",
    Stage.RICH: "💎 부자",
    Stage.BILLIONAIRE: "👑 재벌",
}


class SpendingCategory(str, Enum):
    """Display buckets, declared in classification priority order."""

    COFFEE = "커피/카페"
    SNACK = "간식"
    DELIVERY = "배달음식"
    SHOPPING = "쇼핑"
    TRANSPORT = "교통"
    OTHER = "기타"


class MissionType(str, Enum):
    COFFEE = "COFFEE"
    SNACK = "SNACK"
    DELIVERY = "DELIVERY"
    SHOPPING = "SHOPPING"
    LUXURY = "LUXURY"

    @property
    def category(self) -> Optional[SpendingCategory]:
        # LUXURY has no display bucket of its own.
        return _MISSION_CATEGORIES.get(self)


_MISSION_CATEGORIES = {
    MissionType.COFFEE: SpendingCategory.COFFEE,
    MissionType.SNACK: SpendingCategory.SNACK,
    MissionType.DELIVERY: SpendingCategory.DELIVERY,
    MissionType.SHOPPING: SpendingCategory.SHOPPING,
}


def week_start(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


@dataclass
class Transaction:
    id: Optional[int]
    type: TransactionType
    amount: Decimal
    description: str
    created_at: datetime

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def posted_on(self) -> date:
        return self.created_at.date()


@dataclass
class Budget:
    target_amount: Decimal
    start_date: date
    end_date: date
    updated_at: date
    period: str = "weekly"
    id: int = BUDGET_ID
    version: int = 0

    @classmethod
    def default(cls, now: datetime) -> "Budget":
        start = week_start(now.date())
        return cls(
            target_amount=DEFAULT_WEEKLY_TARGET,
            start_date=start,
            end_date=start + timedelta(days=6),
            updated_at=now.date(),
        )

    def set_target(self, amount: Decimal, now: datetime) -> None:
        self.target_amount = amount
        self.updated_at = now.date()


@dataclass
class Character:
    name: str
    created_at: datetime
    level: int = 1
    experience: int = 0
    stage: Stage = Stage.EGG
    last_evolution_at: Optional[datetime] = None
    id: Optional[int] = None
    version: int = 0

    def add_experience(self, points: int) -> None:
        if points < 0:
            raise ValueError("experience can only increase")
        self.experience += points


@dataclass
class Mission:
    stage: Stage
    mission_type: MissionType
    description: str
    target_amount: Decimal
    completed: bool = False
    completed_at: Optional[datetime] = None
    id: Optional[int] = None

    def complete(self, now: datetime) -> bool:
        """Mark completed; returns False if it already was."""
        if self.completed:
            return False
        self.completed = True
        self.completed_at = now
        return True


@dataclass
class CheckResult:
    """Outcome of a sub-check that must not abort the calling operation."""

    ok: bool = True
    errors: list[str] = field(default_factory=list)


@dataclass
class MissionCheckResult(CheckResult):
    completed: list[Mission] = field(default_factory=list)


@dataclass
class EvolutionCheckResult(CheckResult):
    evolved: bool = False
    from_stage: Optional[Stage] = None
    to_stage: Optional[Stage] = None
    completed_missions: int = 0
