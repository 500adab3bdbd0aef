"""Rule tables that turn disclosures and sectors into weather.

Everything here is pure: no I/O, no clock. The aggregation service feeds
these functions with catalog and disclosure data.
"""
import math
from typing import NamedTuple

from stockweather.domain.entities import (
    DisclosureCategory, MarketCondition, Recommendation, StockCondition,
)

OTHER_SECTOR = "기타"

# Checked in order; first match wins.
DISCLOSURE_TITLE_TOKENS = [
    ("분기보고서", DisclosureCategory.QUARTERLY),
    ("사업보고서", DisclosureCategory.ANNUAL),
    ("주요사항보고서", DisclosureCategory.MATERIAL),
    ("공정공시", DisclosureCategory.FAIR_DISCLOSURE),
]

SECTOR_STABILITY_BONUS = {
    "의료정밀": 15,
    "화학": 10,
    "금융업": 8,
    "전기전자": 5,
    "서비스업": 3,
    "운수장비": 0,
    "건설업": -5,
}

BASE_SCORE = 50

# (lower bound inclusive, condition), descending
CONDITION_BANDS = [
    (80, StockCondition.SUNNY),
    (65, StockCondition.CLOUDY),
    (50, StockCondition.DRIZZLE),
    (35, StockCondition.RAINY),
    (20, StockCondition.WINDY),
]

POSITIVE_CONDITIONS = frozenset({StockCondition.SUNNY, StockCondition.CLOUDY})

_REDUCTION = {
    StockCondition.SUNNY: MarketCondition.SUNNY,
    StockCondition.CLOUDY: MarketCondition.CLOUDY,
    StockCondition.DRIZZLE: MarketCondition.RAINY,
    StockCondition.RAINY: MarketCondition.RAINY,
    StockCondition.WINDY: MarketCondition.STORMY,
    StockCondition.STORMY: MarketCondition.STORMY,
    StockCondition.SNOWY: MarketCondition.STORMY,
}


class Forecast(NamedTuple):
    text: str
    recommendation: Recommendation
    confidence: int


def classify_disclosure(title: str) -> DisclosureCategory:
    """Map a filing title to its disclosure category."""
    title = title or ""
    for token, category in DISCLOSURE_TITLE_TOKENS:
        if token in title:
            return category
    return DisclosureCategory.OTHER


def analysis_score(disclosure_count: int, sector: str) -> int:
    """Score a security 0-100 from its disclosure volume and sector."""
    score = BASE_SCORE
    if disclosure_count == 0:
        score += 10
    elif disclosure_count <= 3:
        score += 5
    else:
        score -= 15
    score += SECTOR_STABILITY_BONUS.get(sector or "", 0)
    return max(0, min(100, score))


def condition_for_score(score: int) -> StockCondition:
    for lower, condition in CONDITION_BANDS:
        if score >= lower:
            return condition
    return StockCondition.STORMY


def reduce_condition(condition: StockCondition) -> MarketCondition:
    """Project a per-security condition onto the market vocabulary."""
    return _REDUCTION[condition]


def build_forecast(
    name: str, sector: str, score: int, disclosure_count: int
) -> Forecast:
    """Templated forecast, recommendation and confidence for one security."""
    sector_label = sector or OTHER_SECTOR
    confidence = math.floor(score * 0.8 + 20)

    if disclosure_count == 0:
        if score >= 70:
            return Forecast(
                f"{name}은(는) 최근 공시가 없고 {sector_label} 업종 안정성이 높아 "
                f"긍정적인 흐름이 예상됩니다.",
                Recommendation.BUY,
                confidence,
            )
        return Forecast(
            f"{name}은(는) 최근 공시가 없어 {sector_label} 업종 흐름에 따라 "
            f"안정적인 움직임이 예상됩니다.",
            Recommendation.HOLD,
            confidence,
        )

    if disclosure_count <= 2:
        if score >= 60:
            return Forecast(
                f"{name}은(는) 최근 {disclosure_count}건의 공시가 있으나 "
                f"{sector_label} 업종 전망이 양호해 상승 여력이 있습니다.",
                Recommendation.BUY,
                confidence,
            )
        return Forecast(
            f"{name}은(는) 최근 {disclosure_count}건의 공시가 있어 "
            f"{sector_label} 업종 내 관망이 필요합니다.",
            Recommendation.HOLD,
            confidence,
        )

    if score >= 50:
        return Forecast(
            f"{name}은(는) 최근 {disclosure_count}건의 공시로 변동성이 예상되나 "
            f"{sector_label} 업종 기반이 견조합니다.",
            Recommendation.HOLD,
            confidence,
        )
    return Forecast(
        f"{name}은(는) 최근 {disclosure_count}건의 공시가 집중되어 "
        f"{sector_label} 업종 내 하락 압력에 주의가 필요합니다.",
        Recommendation.SELL,
        max(confidence - 10, 30),
    )
