from __future__ import annotations

import unittest
from decimal import Decimal

from _support import NOW, FixedClock, stores_with_budget
from application.evolution import (
    EvolutionEngine,
    ExperienceSource,
    can_evolve,
    experience_for,
    next_requirement,
)
from application.missions import MissionTracker
from application.savings import SavingsCalculator
from domain.models import Character, MissionType, Stage


def _engine_with_completed(count: int) -> EvolutionEngine:
    stores = stores_with_budget()
    clock = FixedClock()
    tracker = MissionTracker(stores.missions, SavingsCalculator(stores.transactions, stores.budget, clock), clock)
    tracker.initialize_missions()
    for stage, mission_type in list(zip(Stage, MissionType))[:count]:
        tracker.complete_mission(stage, mission_type)
    return EvolutionEngine(tracker, clock)


class ExperienceRuleTests(unittest.TestCase):
    def test_weekly_source(self) -> None:
        self.assertEqual(experience_for(Decimal("70000"), ExperienceSource.WEEKLY), 70)
        self.assertEqual(experience_for(Decimal("999"), ExperienceSource.WEEKLY), 1)
        self.assertEqual(experience_for(Decimal("0"), ExperienceSource.WEEKLY), 0)
        self.assertEqual(experience_for(Decimal("-500"), ExperienceSource.WEEKLY), 0)

    def test_daily_source(self) -> None:
        self.assertEqual(experience_for(Decimal("14285.71"), ExperienceSource.DAILY), 2)
        self.assertEqual(experience_for(Decimal("100"), ExperienceSource.DAILY), 1)

    def test_manual_and_achievement_have_no_floor(self) -> None:
        self.assertEqual(experience_for(Decimal("999"), ExperienceSource.MANUAL), 0)
        self.assertEqual(experience_for(Decimal("2500"), ExperienceSource.MANUAL), 2)
        self.assertEqual(experience_for(Decimal("4999"), ExperienceSource.ACHIEVEMENT), 0)
        self.assertEqual(experience_for(Decimal("70000"), ExperienceSource.ACHIEVEMENT), 14)


class EvolutionRuleTests(unittest.TestCase):
    def test_both_thresholds_are_required(self) -> None:
        self.assertTrue(can_evolve(Stage.EGG, 100, 1))
        self.assertFalse(can_evolve(Stage.EGG, 99, 1))
        self.assertFalse(can_evolve(Stage.EGG, 5000, 0))
        self.assertTrue(can_evolve(Stage.RICH, 10000, 4))
        self.assertFalse(can_evolve(Stage.BILLIONAIRE, 10**9, 5))

    def test_thresholds_are_monotonic(self) -> None:
        for stage in (Stage.EGG, Stage.BABY, Stage.ADULT):
            nxt = stage.next()
            self.assertTrue(can_evolve(stage, 10**6, 10))
            lower = next_requirement(stage)
            higher = next_requirement(nxt)
            self.assertLess(lower.experience, higher.experience)
            self.assertLess(lower.completed_missions, higher.completed_missions)

    def test_next_requirement(self) -> None:
        req = next_requirement(Stage.BABY)
        self.assertEqual(req.next_stage, Stage.ADULT)
        self.assertEqual(req.experience, 500)
        self.assertEqual(req.completed_missions, 2)
        self.assertIsNone(next_requirement(Stage.BILLIONAIRE))

    def test_stage_order_and_labels(self) -> None:
        self.assertEqual(Stage.EGG.next(), Stage.BABY)
        self.assertIsNone(Stage.BILLIONAIRE.next())
        self.assertEqual(Stage.RICH.order, 3)
        self.assertEqual(Stage.BILLIONAIRE.label, "👑 재벌")


class EvolutionEngineTests(unittest.TestCase):
    def test_egg_evolves_to_baby(self) -> None:
        engine = _engine_with_completed(1)
        character = Character(name="머니펫", created_at=NOW, experience=150)

        result = engine.check_evolution(character)

        self.assertTrue(result.ok)
        self.assertTrue(result.evolved)
        self.assertEqual((result.from_stage, result.to_stage), (Stage.EGG, Stage.BABY))
        self.assertEqual(character.stage, Stage.BABY)
        self.assertEqual(character.level, 2)
        self.assertEqual(character.last_evolution_at, NOW)

    def test_only_one_stage_per_check(self) -> None:
        engine = _engine_with_completed(5)
        character = Character(name="머니펫", created_at=NOW, experience=50000)

        engine.check_evolution(character)
        self.assertEqual(character.stage, Stage.BABY)
        engine.check_evolution(character)
        self.assertEqual(character.stage, Stage.ADULT)

    def test_no_evolution_without_missions(self) -> None:
        engine = _engine_with_completed(0)
        character = Character(name="머니펫", created_at=NOW, experience=150)

        result = engine.check_evolution(character)

        self.assertFalse(result.evolved)
        self.assertEqual(character.stage, Stage.EGG)
        self.assertEqual(character.level, 1)
        self.assertIsNone(character.last_evolution_at)

    def test_billionaire_is_terminal(self) -> None:
        engine = _engine_with_completed(5)
        character = Character(name="머니펫", created_at=NOW, stage=Stage.BILLIONAIRE, level=5, experience=10**7)

        self.assertFalse(engine.evolve(character))
        self.assertFalse(engine.check_evolution(character).evolved)
        self.assertEqual(character.level, 5)

    def test_add_experience_records_points(self) -> None:
        engine = _engine_with_completed(0)
        character = Character(name="머니펫", created_at=NOW)

        points = engine.add_experience(character, Decimal("70000"), ExperienceSource.WEEKLY)

        self.assertEqual(points, 70)
        self.assertEqual(character.experience, 70)
        self.assertEqual(engine.add_experience(character, Decimal("-1"), ExperienceSource.WEEKLY), 0)
        self.assertEqual(character.experience, 70)

    def test_experience_never_decreases(self) -> None:
        character = Character(name="머니펫", created_at=NOW, experience=10)
        with self.assertRaises(ValueError):
            character.add_experience(-1)


if __name__ == "__main__":
    unittest.main()
