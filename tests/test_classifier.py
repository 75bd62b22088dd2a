from __future__ import annotations

import unittest

from application.classifier import classify, matches_mission
from domain.models import MissionType, SpendingCategory


class ClassifierTests(unittest.TestCase):
    def test_keywords_map_to_categories(self) -> None:
        self.assertEqual(classify("스타벅스 아메리카노"), SpendingCategory.COFFEE)
        self.assertEqual(classify("편의점 과자"), SpendingCategory.SNACK)
        self.assertEqual(classify("배민 치킨"), SpendingCategory.DELIVERY)
        self.assertEqual(classify("쿠팡 신발"), SpendingCategory.SHOPPING)
        self.assertEqual(classify("지하철 충전"), SpendingCategory.TRANSPORT)

    def test_match_is_case_insensitive(self) -> None:
        self.assertEqual(classify("Blue Bottle COFFEE"), SpendingCategory.COFFEE)

    def test_earlier_category_wins_on_overlap(self) -> None:
        # "카페" (coffee) and "디저트" (snack) both match.
        self.assertEqual(classify("카페 디저트"), SpendingCategory.COFFEE)
        self.assertEqual(classify("치킨 쇼핑"), SpendingCategory.DELIVERY)

    def test_unmatched_and_empty_fall_back_to_other(self) -> None:
        self.assertEqual(classify("월세"), SpendingCategory.OTHER)
        self.assertEqual(classify(""), SpendingCategory.OTHER)
        self.assertEqual(classify(None), SpendingCategory.OTHER)

    def test_mission_matching_follows_classification(self) -> None:
        self.assertTrue(matches_mission("라떼", MissionType.COFFEE))
        self.assertFalse(matches_mission("카페 디저트", MissionType.SNACK))
        self.assertTrue(matches_mission("아이스크림", MissionType.SNACK))

    def test_luxury_uses_its_own_keywords(self) -> None:
        self.assertTrue(matches_mission("명품 가방", MissionType.LUXURY))
        self.assertTrue(matches_mission("고급 시계", MissionType.LUXURY))
        self.assertFalse(matches_mission("커피", MissionType.LUXURY))
        self.assertFalse(matches_mission(None, MissionType.LUXURY))


if __name__ == "__main__":
    unittest.main()
