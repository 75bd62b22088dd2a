from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from application.evolution import EvolutionEngine, ExperienceSource, next_requirement
from application.missions import MissionTracker
from application.savings import Clock, SavingsCalculator, daily_target, saved_amount
from domain.models import DEFAULT_CHARACTER_NAME, Budget, Character, CheckResult
from domain.schemas import CharacterView, MissionProgress, ResetResult, SavingStatus
from infrastructure.persistence.store import Stores

logger = logging.getLogger(__name__)

FALLBACK_MISSION_DESCRIPTION = "기본 미션"
FALLBACK_MISSION_TARGET = Decimal("50000")
RESET_ALL_MESSAGE = "모든 데이터가 초기화되었습니다! 🔄"


class SavePetEngine:
    """Caller-facing operations over the character, its missions and the savings rules."""

    def __init__(
        self,
        stores: Stores,
        clock: Clock = datetime.now,
        character_name: str = DEFAULT_CHARACTER_NAME,
    ):
        self._stores = stores
        self._clock = clock
        self._character_name = character_name
        self.savings = SavingsCalculator(stores.transactions, stores.budget, clock)
        self.missions = MissionTracker(stores.missions, self.savings, clock)
        self.evolution = EvolutionEngine(self.missions, clock)

    def get_or_create_character(self) -> Character:
        character = self._stores.characters.get_latest()
        if character is None:
            character = self._stores.characters.save(
                Character(name=self._character_name, created_at=self._clock())
            )
            logger.info("Created character id=%s name=%s", character.id, character.name)
            self.missions.initialize_missions()
        return character

    def describe(self, character: Character) -> CharacterView:
        return CharacterView.from_model(character, next_requirement(character.stage))

    def check_weekly_savings(self) -> Character:
        return self._check_weekly(ExperienceSource.WEEKLY)

    def check_saving_achievement(self) -> Character:
        return self._check_weekly(ExperienceSource.ACHIEVEMENT)

    def _check_weekly(self, source: ExperienceSource) -> Character:
        character = self.get_or_create_character()
        budget = self.savings.current_budget()
        if budget is None:
            return character

        expenses = self.savings.weekly_expenses()
        saved = saved_amount(budget.target_amount, expenses)
        logger.info(
            "Weekly savings check source=%s target=%s expenses=%s saved=%s",
            source.name,
            budget.target_amount,
            expenses,
            saved,
        )
        if saved <= 0:
            logger.info("Nothing saved this week; no experience awarded")
            return character

        self.evolution.add_experience(character, saved, source)
        self._log_failure("mission", self.missions.check_stage_missions(character.stage))
        self._log_failure("evolution", self.evolution.check_evolution(character))
        return self._stores.characters.save(character)

    def check_daily_savings(self) -> Character:
        character = self.get_or_create_character()
        budget = self.savings.current_budget()
        if budget is None:
            return character

        target = daily_target(budget.target_amount)
        expenses = self.savings.today_expenses()
        saved = saved_amount(target, expenses)
        logger.info("Daily savings check target=%s expenses=%s saved=%s", target, expenses, saved)
        if saved <= 0:
            logger.info("Nothing saved today; no experience awarded")
            return character

        self.evolution.add_experience(character, saved, ExperienceSource.DAILY)
        self._log_failure("evolution", self.evolution.check_evolution(character))
        return self._stores.characters.save(character)

    def add_saving_experience(self, amount: Decimal) -> Character:
        character = self.get_or_create_character()
        self.evolution.add_experience(character, amount, ExperienceSource.MANUAL)
        self._log_failure("evolution", self.evolution.check_evolution(character))
        return self._stores.characters.save(character)

    def _log_failure(self, check: str, result: CheckResult) -> None:
        if not result.ok:
            logger.warning("%s check degraded; continuing errors=%s", check, result.errors)

    def get_current_saving_status(self) -> SavingStatus:
        try:
            budget = self.savings.budget_or_default()
            weekly_expenses = self.savings.weekly_expenses()
            target = daily_target(budget.target_amount)
            today_expenses = self.savings.today_expenses()
            character = self.get_or_create_character()
            progress = self.missions.get_mission_progress(character.stage)
            return SavingStatus(
                weekly_target=budget.target_amount,
                weekly_expenses=weekly_expenses,
                weekly_saved=saved_amount(budget.target_amount, weekly_expenses),
                daily_target=target,
                today_expenses=today_expenses,
                today_saved=saved_amount(target, today_expenses),
                mission_progress=progress,
            )
        except Exception:
            logger.exception("Saving status computation failed; returning defaults")
            return self._default_saving_status()

    def _default_saving_status(self) -> SavingStatus:
        budget = Budget.default(self._clock())
        target = daily_target(budget.target_amount)
        return SavingStatus(
            weekly_target=budget.target_amount,
            weekly_expenses=Decimal("0"),
            weekly_saved=budget.target_amount,
            daily_target=target,
            today_expenses=Decimal("0"),
            today_saved=target,
            mission_progress=MissionProgress.placeholder(FALLBACK_MISSION_DESCRIPTION, FALLBACK_MISSION_TARGET),
        )

    def reset_character_data(self) -> int:
        removed = self._stores.characters.delete_all()
        logger.info("Character data reset removed=%d", removed)
        return removed

    def reset_all(self) -> ResetResult:
        deleted_transactions = self._stores.transactions.delete_all()
        deleted_characters = self._stores.characters.delete_all()
        deleted_missions = self._stores.missions.delete_all()
        logger.info(
            "Full reset transactions=%d characters=%d missions=%d",
            deleted_transactions,
            deleted_characters,
            deleted_missions,
        )
        return ResetResult(
            message=RESET_ALL_MESSAGE,
            deleted_transactions=deleted_transactions,
            deleted_characters=deleted_characters,
            deleted_missions=deleted_missions,
        )
