from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from application.savings import Clock, SavingsCalculator, non_negative
from domain.models import Mission, MissionCheckResult, MissionType, Stage
from domain.schemas import MissionProgress
from infrastructure.persistence.store import MissionStore

logger = logging.getLogger(__name__)

MISSION_LOOKBACK = timedelta(weeks=4)

MISSION_CATALOG: tuple[tuple[Stage, MissionType, str, Decimal], ...] = (
    (Stage.EGG, MissionType.COFFEE, "커피값 절약하기", Decimal("50000")),
    (Stage.BABY, MissionType.SNACK, "간식비 절약하기", Decimal("100000")),
    (Stage.ADULT, MissionType.DELIVERY, "배달음식비 절약하기", Decimal("200000")),
    (Stage.RICH, MissionType.SHOPPING, "쇼핑비 절약하기", Decimal("500000")),
    (Stage.BILLIONAIRE, MissionType.LUXURY, "사치품 절약하기", Decimal("1000000")),
)

CATEGORY_BUDGET_RATIOS: dict[MissionType, Decimal] = {
    MissionType.COFFEE: Decimal("0.15"),
    MissionType.SNACK: Decimal("0.10"),
    MissionType.DELIVERY: Decimal("0.25"),
    MissionType.SHOPPING: Decimal("0.20"),
    MissionType.LUXURY: Decimal("0.05"),
}
DEFAULT_BUDGET_RATIO = Decimal("0.10")

PREPARING_DESCRIPTION = "미션을 준비 중입니다"
LOAD_FAILED_DESCRIPTION = "미션 로딩 실패"


def category_budget_ratio(mission_type: Optional[MissionType]) -> Decimal:
    return CATEGORY_BUDGET_RATIOS.get(mission_type, DEFAULT_BUDGET_RATIO)


class MissionTracker:
    def __init__(self, missions: MissionStore, savings: SavingsCalculator, clock: Clock = datetime.now):
        self._missions = missions
        self._savings = savings
        self._clock = clock

    def initialize_missions(self) -> int:
        """Seed the fixed catalog unless any mission already exists. Returns rows added."""
        if self._missions.count() > 0:
            return 0
        for stage, mission_type, description, target in MISSION_CATALOG:
            self._missions.add(
                Mission(stage=stage, mission_type=mission_type, description=description, target_amount=target)
            )
        logger.info("Seeded mission catalog count=%d", len(MISSION_CATALOG))
        return len(MISSION_CATALOG)

    def get_current_missions(self, stage: Stage) -> list[Mission]:
        return self._missions.list_for_stage(stage)

    def projected_category_savings(self, mission_type: MissionType) -> Decimal:
        """Category share of the weekly budget minus the last four weeks of category spend, floored at 0."""
        budget = self._savings.budget_or_default()
        since = self._savings.today() - MISSION_LOOKBACK
        category_target = budget.target_amount * category_budget_ratio(mission_type)
        spent = self._savings.category_expenses(mission_type, since)
        return non_negative(category_target - spent)

    def check_mission_completion(self, stage: Stage, mission_type: MissionType) -> Optional[Mission]:
        mission = self._missions.find(stage, mission_type)
        if mission is None or mission.completed:
            return mission
        current = self.projected_category_savings(mission_type)
        if current >= mission.target_amount and mission.complete(self._clock()):
            logger.info(
                "Mission completed stage=%s type=%s current=%s target=%s",
                stage.value,
                mission_type.value,
                current,
                mission.target_amount,
            )
            return self._missions.save(mission)
        return mission

    def check_stage_missions(self, stage: Stage) -> MissionCheckResult:
        result = MissionCheckResult()
        try:
            pending = [m for m in self.get_current_missions(stage) if not m.completed]
            for mission in pending:
                checked = self.check_mission_completion(stage, mission.mission_type)
                if checked is not None and checked.completed:
                    result.completed.append(checked)
        except Exception as exc:
            logger.exception("Mission check failed stage=%s", stage.value)
            result.ok = False
            result.errors.append(str(exc) or exc.__class__.__name__)
        return result

    def complete_mission(self, stage: Stage, mission_type: MissionType) -> Optional[Mission]:
        mission = self._missions.find(stage, mission_type)
        if mission is not None and mission.complete(self._clock()):
            logger.info("Mission force-completed stage=%s type=%s", stage.value, mission_type.value)
            return self._missions.save(mission)
        return mission

    def get_completed_mission_count(self) -> int:
        return len(self._missions.list_completed())

    def get_mission_progress(self, stage: Stage) -> MissionProgress:
        try:
            missions = self.get_current_missions(stage)
            if not missions:
                return MissionProgress.placeholder(PREPARING_DESCRIPTION)
            mission = missions[0]
            return MissionProgress(
                description=mission.description or "기본 미션",
                type=mission.mission_type.value,
                target=mission.target_amount,
                current=self.projected_category_savings(mission.mission_type),
                completed=mission.completed,
            )
        except Exception:
            logger.exception("Mission progress lookup failed stage=%s", stage.value)
            return MissionProgress.placeholder(LOAD_FAILED_DESCRIPTION)
