"""Market weather analysis: per-security, sector and market aggregation."""
import logging
import math
from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Sequence, Tuple

from stockweather.domain.entities import (
    Disclosure, MarketAnalysis, MarketCondition, MarketWeather, SectorWeather,
    Security, SecurityWeather, Trend,
)
from stockweather.domain.scoring import (
    OTHER_SECTOR, POSITIVE_CONDITIONS, analysis_score, build_forecast,
    condition_for_score,
)
from stockweather.services.catalog_service import CatalogService
from stockweather.services.disclosure_service import DisclosureService

logger = logging.getLogger(__name__)

MAX_INSIGHTS = 4

FALLBACK_INSIGHTS = [
    "현재 데이터를 불러오는 중입니다.",
    "DART API 연결을 확인해주세요.",
    "잠시 후 다시 시도해주세요.",
]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def fallback_market_weather() -> MarketWeather:
    return MarketWeather(
        overall=MarketCondition.CLOUDY,
        temperature=65,
        humidity=45,
        wind_speed=55,
        pressure=52,
        trend=Trend.STABLE,
        confidence=60,
    )


def fallback_analysis() -> MarketAnalysis:
    return MarketAnalysis(
        market_weather=fallback_market_weather(),
        stocks=[],
        sectors=[],
        insights=list(FALLBACK_INSIGHTS),
    )


def related_disclosures(
    security: Security, disclosures: Sequence[Disclosure]
) -> List[Disclosure]:
    """Disclosures filed under the security's code, or by a company whose
    name contains the first two characters of the security's name."""
    prefix = security.name[:2]
    return [
        d for d in disclosures
        if d.security_code == security.code or prefix in (d.company_name or "")
    ]


def build_security_weather(
    security: Security, disclosures: Sequence[Disclosure]
) -> SecurityWeather:
    sector = security.sector or ""
    matched = related_disclosures(security, disclosures)
    score = analysis_score(len(matched), sector)
    forecast = build_forecast(security.name, sector, score, len(matched))
    return SecurityWeather(
        stock_code=security.code,
        company_name=security.name,
        condition=condition_for_score(score),
        analysis_score=score,
        forecast=forecast.text,
        confidence=forecast.confidence,
        recommendation=forecast.recommendation,
        disclosure_count=len(matched),
        market_cap=security.market_cap,
        sector=security.sector,
        last_updated=datetime.now(),
    )


def generate_security_weather(
    securities: Sequence[Security], disclosures: Sequence[Disclosure]
) -> List[SecurityWeather]:
    """One record per active security with a code and name, in input order."""
    weather: List[SecurityWeather] = []
    for security in securities:
        if not security.is_active or not security.code or not security.name:
            continue
        try:
            weather.append(build_security_weather(security, disclosures))
        except Exception as e:
            logger.error(f"Failed to generate weather for {security.code}: {e}")
    return weather


def _ratio_and_confidence(stocks: Sequence[SecurityWeather]) -> Tuple[float, float]:
    positive = sum(1 for s in stocks if s.condition in POSITIVE_CONDITIONS)
    ratio = positive / len(stocks)
    avg_confidence = sum(s.confidence for s in stocks) / len(stocks)
    return ratio, avg_confidence


def calculate_market_weather(stocks: Sequence[SecurityWeather]) -> MarketWeather:
    if not stocks:
        return fallback_market_weather()

    ratio, avg_confidence = _ratio_and_confidence(stocks)

    if ratio > 0.7 and avg_confidence > 70:
        overall = MarketCondition.SUNNY
    elif ratio > 0.5:
        overall = MarketCondition.CLOUDY
    elif ratio > 0.3:
        overall = MarketCondition.RAINY
    else:
        overall = MarketCondition.STORMY

    if ratio > 0.6:
        trend = Trend.UP
    elif ratio < 0.4:
        trend = Trend.DOWN
    else:
        trend = Trend.STABLE

    positive_pct = round_half_up(ratio * 100)
    return MarketWeather(
        overall=overall,
        temperature=positive_pct,
        humidity=round_half_up(100 - avg_confidence),
        # Suspect: same value as temperature. Kept because downstream insight
        # text reads wind_speed as the rising-securities percentage.
        wind_speed=positive_pct,
        pressure=round_half_up(avg_confidence),
        trend=trend,
        confidence=round_half_up(avg_confidence),
        last_updated=datetime.now(),
    )


def calculate_sector_weather(stocks: Sequence[SecurityWeather]) -> List[SectorWeather]:
    groups: Dict[str, List[SecurityWeather]] = OrderedDict()
    for stock in stocks:
        groups.setdefault(stock.sector or OTHER_SECTOR, []).append(stock)

    sectors: List[SectorWeather] = []
    for sector, members in groups.items():
        ratio, _ = _ratio_and_confidence(members)
        # No confidence gate here, unlike the market-level rule.
        if ratio > 0.7:
            condition = MarketCondition.SUNNY
        elif ratio > 0.5:
            condition = MarketCondition.CLOUDY
        elif ratio > 0.3:
            condition = MarketCondition.RAINY
        else:
            condition = MarketCondition.STORMY

        ranked = sorted(members, key=lambda s: s.confidence, reverse=True)
        sectors.append(SectorWeather(
            sector=sector,
            condition=condition,
            # Synthetic: distance of the positive ratio from 50%, not a price move.
            average_change=round((ratio - 0.5) * 100, 2),
            stock_count=len(members),
            top_performers=[s.company_name for s in ranked[:3]],
            bottom_performers=[s.company_name for s in reversed(ranked[-3:])],
        ))

    sectors.sort(key=lambda s: s.average_change, reverse=True)
    return sectors


def generate_insights(
    market: MarketWeather,
    sectors: Sequence[SectorWeather],
    disclosures: Sequence[Disclosure],
) -> List[str]:
    insights: List[str] = []

    if market.overall == MarketCondition.SUNNY:
        insights.append(
            f"시장 전반이 강세를 보이고 있습니다. 상승 종목 비율이 {market.wind_speed}%에 달합니다."
        )
    elif market.overall == MarketCondition.STORMY:
        insights.append("시장에 조정 압력이 강해 보입니다. 신중한 접근이 필요한 시점입니다.")

    if sectors:
        top = sectors[0]
        direction = "상승" if top.average_change > 0 else "하락"
        insights.append(f"{top.sector} 섹터가 {direction}을 주도하고 있습니다.")

        bottom = sectors[-1]
        if bottom.average_change < -1:
            insights.append(f"{bottom.sector} 섹터에서 조정이 나타나고 있어 주의가 필요합니다.")

    if len(disclosures) > 10:
        insights.append(
            f"최근 {len(disclosures)}건의 공시가 있어 시장 변동성이 높아질 수 있습니다."
        )

    if market.humidity > 80:
        insights.append("변동성이 높은 상황입니다. 포지션 관리에 신경써야 할 시점입니다.")

    return insights[:MAX_INSIGHTS]


class MarketWeatherService:
    """Builds the market analysis from the catalog and recent disclosures."""

    def __init__(self, catalog: CatalogService, disclosures: DisclosureService):
        self._catalog = catalog
        self._disclosures = disclosures

    async def generate_market_analysis(self) -> MarketAnalysis:
        """Full analysis; degrades to the fallback result on upstream failure."""
        logger.info("Generating market weather analysis...")
        try:
            securities = self._catalog.get_all_active()
            disclosures = await self._disclosures.get_recent_disclosures()

            stocks = generate_security_weather(securities, disclosures)
            market = calculate_market_weather(stocks)
            sectors = calculate_sector_weather(stocks)
            insights = generate_insights(market, sectors, disclosures)
        except Exception as e:
            logger.error(f"Failed to generate market weather, using fallback: {e}")
            return fallback_analysis()

        logger.info(
            f"Market weather: {market.overall.value}, {len(stocks)} securities, "
            f"{len(sectors)} sectors, {len(disclosures)} disclosures"
        )
        return MarketAnalysis(
            market_weather=market,
            stocks=stocks,
            sectors=sectors,
            insights=insights,
        )
