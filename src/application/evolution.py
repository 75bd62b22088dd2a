from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from application.missions import MissionTracker
from application.savings import Clock
from domain.models import Character, EvolutionCheckResult, Stage
from domain.schemas import EvolutionRequirement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvolutionThreshold:
    experience: int
    completed_missions: int


# Keyed by the stage being left.
EVOLUTION_THRESHOLDS: dict[Stage, EvolutionThreshold] = {
    Stage.EGG: EvolutionThreshold(experience=100, completed_missions=1),
    Stage.BABY: EvolutionThreshold(experience=500, completed_missions=2),
    Stage.ADULT: EvolutionThreshold(experience=2000, completed_missions=3),
    Stage.RICH: EvolutionThreshold(experience=10000, completed_missions=4),
}


class ExperienceSource(Enum):
    """Saved-currency-per-XP divisor and the floor applied to a positive saving."""

    WEEKLY = (1000, 1)
    DAILY = (5000, 1)
    MANUAL = (1000, 0)
    ACHIEVEMENT = (5000, 0)

    def __init__(self, divisor: int, minimum: int):
        self.divisor = divisor
        self.minimum = minimum


def experience_for(saved: Decimal, source: ExperienceSource) -> int:
    if saved <= 0:
        return 0
    return max(source.minimum, int(saved // source.divisor))


def can_evolve(stage: Stage, experience: int, completed_missions: int) -> bool:
    threshold = EVOLUTION_THRESHOLDS.get(stage)
    if threshold is None:
        return False
    return experience >= threshold.experience and completed_missions >= threshold.completed_missions


def next_requirement(stage: Stage) -> Optional[EvolutionRequirement]:
    threshold = EVOLUTION_THRESHOLDS.get(stage)
    next_stage = stage.next()
    if threshold is None or next_stage is None:
        return None
    return EvolutionRequirement(
        next_stage=next_stage,
        experience=threshold.experience,
        completed_missions=threshold.completed_missions,
    )


class EvolutionEngine:
    def __init__(self, missions: MissionTracker, clock: Clock = datetime.now):
        self._missions = missions
        self._clock = clock

    def add_experience(self, character: Character, saved: Decimal, source: ExperienceSource) -> int:
        points = experience_for(saved, source)
        if points > 0:
            character.add_experience(points)
            logger.info(
                "Experience added source=%s saved=%s points=%d total=%d",
                source.name,
                saved,
                points,
                character.experience,
            )
        return points

    def evolve(self, character: Character) -> bool:
        next_stage = character.stage.next()
        if next_stage is None:
            return False
        character.stage = next_stage
        character.level += 1
        character.last_evolution_at = self._clock()
        return True

    def check_evolution(self, character: Character) -> EvolutionCheckResult:
        """Evolve at most one stage if both thresholds of the current stage are met."""
        result = EvolutionCheckResult(from_stage=character.stage, to_stage=character.stage)
        try:
            result.completed_missions = self._missions.get_completed_mission_count()
            logger.info(
                "Evolution check stage=%s experience=%d completed_missions=%d",
                character.stage.value,
                character.experience,
                result.completed_missions,
            )
            if can_evolve(character.stage, character.experience, result.completed_missions):
                result.evolved = self.evolve(character)
                result.to_stage = character.stage
                logger.info("Character evolved %s -> %s level=%d", result.from_stage.value, character.stage.value, character.level)
        except Exception as exc:
            logger.exception("Evolution check failed stage=%s", character.stage.value)
            result.ok = False
            result.errors.append(str(exc) or exc.__class__.__name__)
        return result
