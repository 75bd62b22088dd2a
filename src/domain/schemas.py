from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.models import Budget, Character, Mission, MissionType, Stage, Transaction


class _View(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TransactionCreate(BaseModel):
    type: Literal["income", "expense"]
    amount: Decimal = Field(ge=0)
    description: str = ""
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("created_at")
    @classmethod
    def to_local_naive(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Stored timestamps are naive local time.
        if value is not None and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value


class TransactionView(_View):
    id: int
    type: str
    amount: Decimal
    description: str
    created_at: datetime = Field(alias="createdAt")

    @classmethod
    def from_model(cls, txn: Transaction) -> "TransactionView":
        return cls(
            id=txn.id,
            type=txn.type.value,
            amount=txn.amount,
            description=txn.description,
            created_at=txn.created_at,
        )


class BudgetView(_View):
    id: int
    period: str
    target_amount: Decimal = Field(alias="targetAmount")
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    updated_at: date = Field(alias="updatedAt")

    @classmethod
    def from_model(cls, budget: Budget) -> "BudgetView":
        return cls(
            id=budget.id,
            period=budget.period,
            target_amount=budget.target_amount,
            start_date=budget.start_date,
            end_date=budget.end_date,
            updated_at=budget.updated_at,
        )


class EvolutionRequirement(_View):
    next_stage: Stage = Field(alias="nextStage")
    experience: int
    completed_missions: int = Field(alias="completedMissions")


class CharacterView(_View):
    id: Optional[int] = None
    name: str
    level: int
    experience: int
    stage: Stage
    stage_label: str = Field(alias="stageLabel")
    created_at: datetime = Field(alias="createdAt")
    last_evolution_at: Optional[datetime] = Field(default=None, alias="lastEvolutionAt")
    next_evolution: Optional[EvolutionRequirement] = Field(default=None, alias="nextEvolution")

    @classmethod
    def from_model(cls, character: Character, next_evolution: Optional[EvolutionRequirement] = None) -> "CharacterView":
        return cls(
            id=character.id,
            name=character.name,
            level=character.level,
            experience=character.experience,
            stage=character.stage,
            stage_label=character.stage.label,
            created_at=character.created_at,
            last_evolution_at=character.last_evolution_at,
            next_evolution=next_evolution,
        )


class MissionView(_View):
    id: Optional[int] = None
    stage: Stage
    mission_type: MissionType = Field(alias="missionType")
    description: str
    target_amount: Decimal = Field(alias="targetAmount")
    completed: bool
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")

    @classmethod
    def from_model(cls, mission: Mission) -> "MissionView":
        return cls(
            id=mission.id,
            stage=mission.stage,
            mission_type=mission.mission_type,
            description=mission.description,
            target_amount=mission.target_amount,
            completed=mission.completed,
            completed_at=mission.completed_at,
        )


class MissionProgress(_View):
    description: str
    type: str = ""
    target: Decimal = Decimal("0")
    current: Decimal = Decimal("0")
    completed: bool = False

    @classmethod
    def placeholder(cls, description: str, target: Decimal = Decimal("0")) -> "MissionProgress":
        return cls(description=description, target=target)


class SavingStatus(_View):
    weekly_target: Decimal = Field(alias="weeklyTarget")
    weekly_expenses: Decimal = Field(alias="weeklyExpenses")
    weekly_saved: Decimal = Field(alias="weeklySaved")
    daily_target: Decimal = Field(alias="dailyTarget")
    today_expenses: Decimal = Field(alias="todayExpenses")
    today_saved: Decimal = Field(alias="todaySaved")
    mission_progress: MissionProgress = Field(alias="missionProgress")


class WeeklyAnalysis(_View):
    weekly_expenses: Dict[str, Decimal] = Field(default_factory=dict, alias="weeklyExpenses")


class CategoryAnalysis(_View):
    category_expenses: Dict[str, Decimal] = Field(default_factory=dict, alias="categoryExpenses")


class SavingTrend(_View):
    weekly_expenses: Dict[str, Decimal] = Field(default_factory=dict, alias="weeklyExpenses")
    improving: bool = False
    average_target: Decimal = Field(alias="averageTarget")


class ResetResult(_View):
    message: str
    deleted_transactions: int = Field(default=0, alias="deletedTransactions")
    deleted_characters: int = Field(default=0, alias="deletedCharacters")
    deleted_missions: int = Field(default=0, alias="deletedMissions")


class ReportRequest(BaseModel):
    request_id: str
    report: str
    as_of: Optional[date] = None


class ReportResponse(BaseModel):
    request_id: str
    report: str
    ok: bool = True
    result: Dict[str, Any] = Field(default_factory=dict)
    errors: List[str] = Field(default_factory=list)
