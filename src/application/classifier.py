from __future__ import annotations

from domain.models import MissionType, SpendingCategory

# Evaluated in declaration order; first hit wins.
CATEGORY_KEYWORDS: dict[SpendingCategory, tuple[str, ...]] = {
    SpendingCategory.COFFEE: ("커피", "카페", "스타벅스", "아메리카노", "라떼", "coffee"),
    SpendingCategory.SNACK: ("간식", "과자", "디저트", "아이스크림", "쿠키", "초콜릿"),
    SpendingCategory.DELIVERY: ("배달", "주문", "치킨", "피자", "햄버거", "족발", "중국집", "배민", "요기요"),
    SpendingCategory.SHOPPING: ("쇼핑", "옷", "신발", "화장품", "가방", "액세서리", "쿠팡", "11번가"),
    SpendingCategory.TRANSPORT: ("버스", "지하철", "택시", "교통"),
}

LUXURY_KEYWORDS: tuple[str, ...] = ("명품", "럭셔리", "브랜드", "고급", "시계", "보석")


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword.lower() in text for keyword in keywords)


def classify(description: str | None) -> SpendingCategory:
    text = (description or "").lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if _contains_any(text, keywords):
            return category
    return SpendingCategory.OTHER


def matches_mission(description: str | None, mission_type: MissionType) -> bool:
    """Whether a transaction description counts toward `mission_type` spending."""
    category = mission_type.category
    if category is not None:
        return classify(description) == category
    return _contains_any((description or "").lower(), LUXURY_KEYWORDS)
