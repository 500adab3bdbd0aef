"""Tests for per-security, market and sector weather aggregation."""
import asyncio
from datetime import datetime

import pytest

from conftest import (
    InMemorySecurityRepository, StaticDisclosureSource, make_disclosure, make_security,
)
from stockweather.domain.entities import (
    MarketCondition, MarketWeather, RawFiling, SecurityWeather, SectorWeather,
    StockCondition, Trend,
)
from stockweather.domain.exceptions import DisclosureSourceError
from stockweather.domain.scoring import build_forecast, condition_for_score
from stockweather.services import market_weather_service
from stockweather.services.catalog_service import CatalogService
from stockweather.services.disclosure_service import DisclosureService
from stockweather.services.market_weather_service import (
    FALLBACK_INSIGHTS, MarketWeatherService, calculate_market_weather,
    calculate_sector_weather, generate_insights, generate_security_weather,
    related_disclosures, round_half_up,
)


def weather(code, score, sector=None, count=0):
    forecast = build_forecast(code, sector, score, count)
    return SecurityWeather(
        stock_code=code,
        company_name=f"회사{code}",
        condition=condition_for_score(score),
        analysis_score=score,
        forecast=forecast.text,
        confidence=forecast.confidence,
        recommendation=forecast.recommendation,
        disclosure_count=count,
        sector=sector,
    )


def market(overall=MarketCondition.CLOUDY, humidity=30, wind_speed=60):
    return MarketWeather(
        overall=overall, temperature=wind_speed, humidity=humidity,
        wind_speed=wind_speed, pressure=100 - humidity, trend=Trend.STABLE,
        confidence=100 - humidity,
    )


def test_round_half_up():
    assert round_half_up(32.5) == 33
    assert round_half_up(33.4999) == 33
    assert round_half_up(0.5) == 1


def test_related_disclosures_matches_code_or_name_prefix():
    security = make_security("005930", "삼성전자", "전기전자")
    disclosures = [
        make_disclosure("005930", "삼성전자", id="a"),
        make_disclosure("028260", "삼성물산", id="b"),
        make_disclosure("000660", "SK하이닉스", id="c"),
        make_disclosure("", "삼성", id="d"),
    ]
    assert [d.id for d in related_disclosures(security, disclosures)] == ["a", "b", "d"]


def test_generate_security_weather(securities):
    disclosures = [make_disclosure("000720", "현대건설", id=str(i)) for i in range(4)]
    result = generate_security_weather(securities, disclosures)

    assert [w.stock_code for w in result] == [s.code for s in securities]
    by_code = {w.stock_code: w for w in result}
    assert by_code["207940"].analysis_score == 75
    assert by_code["207940"].condition == StockCondition.CLOUDY
    # 4 disclosures, 건설업 -5: 50 - 15 - 5
    assert by_code["000720"].analysis_score == 30
    assert by_code["000720"].disclosure_count == 4
    assert by_code["000720"].condition == StockCondition.WINDY


def test_generate_security_weather_skips_inactive_and_nameless():
    securities = [
        make_security("005930", "삼성전자", "전기전자"),
        make_security("000000", "", "전기전자"),
        make_security("111111", "상장폐지", is_active=False),
    ]
    result = generate_security_weather(securities, [])
    assert [w.stock_code for w in result] == ["005930"]


def test_generate_security_weather_skips_failing_security(securities, monkeypatch):
    real_build = market_weather_service.build_security_weather

    def flaky(security, disclosures):
        if security.code == "035420":
            raise ValueError("unexpected shape")
        return real_build(security, disclosures)

    monkeypatch.setattr(market_weather_service, "build_security_weather", flaky)
    result = generate_security_weather(securities, [])
    assert len(result) == len(securities) - 1
    assert "035420" not in [w.stock_code for w in result]


def test_market_weather_empty_is_fallback():
    result = calculate_market_weather([])
    assert result.overall == MarketCondition.CLOUDY
    assert (result.temperature, result.humidity, result.wind_speed, result.pressure) == (65, 45, 55, 52)
    assert result.trend == Trend.STABLE
    assert result.confidence == 60


def test_market_weather_three_security_scenario():
    stocks = [weather("A", 85), weather("B", 55), weather("C", 10)]
    assert [s.confidence for s in stocks] == [88, 64, 28]

    result = calculate_market_weather(stocks)
    assert result.overall == MarketCondition.RAINY
    assert result.trend == Trend.DOWN
    assert result.temperature == 33
    assert result.wind_speed == 33
    assert result.humidity == 40
    assert result.pressure == 60
    assert result.confidence == 60


def test_market_weather_sunny_needs_confidence():
    sunny = calculate_market_weather([weather(str(i), 90) for i in range(4)])
    assert sunny.overall == MarketCondition.SUNNY
    assert sunny.trend == Trend.UP

    # All cloudy at score 65: ratio 1.0 but confidence 72 > 70
    cloudy_high = calculate_market_weather([weather(str(i), 65) for i in range(4)])
    assert cloudy_high.overall == MarketCondition.SUNNY

    # Positive ratio 1.0 but average confidence 60
    low = [weather(str(i), 85).model_copy(update={"confidence": 60}) for i in range(4)]
    assert calculate_market_weather(low).overall == MarketCondition.CLOUDY


@pytest.mark.parametrize("scores, expected", [
    ([85, 85, 10, 10], MarketCondition.RAINY),
    ([85, 10, 10, 10], MarketCondition.STORMY),
    ([85, 85, 10], MarketCondition.CLOUDY),
    ([85, 85, 85, 10], MarketCondition.SUNNY),
])
def test_market_weather_ratio_bands(scores, expected):
    stocks = [weather(str(i), score) for i, score in enumerate(scores)]
    result = calculate_market_weather(stocks)
    assert result.overall == expected
    assert result.temperature == result.wind_speed
    assert abs(result.humidity - (100 - result.pressure)) <= 1


def test_sector_weather_grouping_and_order():
    stocks = [
        weather("A", 85, "의료정밀"),
        weather("B", 80, "의료정밀"),
        weather("C", 40, "건설업"),
        weather("D", 55, None),
        weather("E", 70, None),
    ]
    sectors = calculate_sector_weather(stocks)

    assert [s.sector for s in sectors] == ["의료정밀", "기타", "건설업"]
    assert [s.average_change for s in sectors] == [50.0, 0.0, -50.0]
    assert sectors[0].condition == MarketCondition.SUNNY
    assert sectors[1].condition == MarketCondition.RAINY
    assert sectors[2].condition == MarketCondition.STORMY
    assert sectors[1].stock_count == 2


def test_sector_weather_performers():
    stocks = [weather(code, score, "전기전자") for code, score in
              [("A", 90), ("B", 70), ("C", 60), ("D", 40), ("E", 20)]]
    electronics = calculate_sector_weather(stocks)[0]
    assert electronics.top_performers == ["회사A", "회사B", "회사C"]
    assert electronics.bottom_performers == ["회사E", "회사D", "회사C"]


def sector(name, change):
    return SectorWeather(
        sector=name, condition=MarketCondition.CLOUDY, average_change=change, stock_count=1
    )


def test_insights_sunny_market():
    insights = generate_insights(
        market(MarketCondition.SUNNY, wind_speed=80), [sector("화학", 25.0)], []
    )
    assert "80%" in insights[0]
    assert "화학 섹터가 상승" in insights[1]
    assert len(insights) == 2


def test_insights_stormy_and_weak_sector():
    insights = generate_insights(
        market(MarketCondition.STORMY),
        [sector("화학", -10.0), sector("건설업", -50.0)],
        [],
    )
    assert "신중한 접근" in insights[0]
    assert "화학 섹터가 하락" in insights[1]
    assert "건설업 섹터에서 조정" in insights[2]


def test_insights_capped_at_four():
    disclosures = [make_disclosure("005930", "삼성전자", id=str(i)) for i in range(11)]
    insights = generate_insights(
        market(MarketCondition.SUNNY, humidity=90),
        [sector("화학", 25.0), sector("건설업", -50.0)],
        disclosures,
    )
    assert len(insights) == 4
    assert "11건" in insights[3]


def test_insights_empty_when_nothing_qualifies():
    assert generate_insights(market(), [], []) == []


def _service(securities, source):
    catalog = CatalogService(InMemorySecurityRepository(securities))
    return MarketWeatherService(catalog, DisclosureService(source))


def test_generate_market_analysis(securities):
    today = datetime.now().strftime("%Y%m%d")
    source = StaticDisclosureSource([
        RawFiling(filing_id="1", stock_code="000720", company_name="현대건설",
                  title="주요사항보고서", submitted=today),
    ])
    analysis = asyncio.run(_service(securities, source).generate_market_analysis())

    assert len(analysis.stocks) == len(securities)
    assert analysis.stocks[0].stock_code == "005930"
    assert analysis.sectors == sorted(
        analysis.sectors, key=lambda s: s.average_change, reverse=True
    )
    assert len(analysis.insights) <= 4
    hyundai = next(s for s in analysis.stocks if s.stock_code == "000720")
    assert hyundai.disclosure_count == 1


def test_generate_market_analysis_falls_back_on_source_error(securities):
    source = StaticDisclosureSource(error=DisclosureSourceError("DART down"))
    analysis = asyncio.run(_service(securities, source).generate_market_analysis())

    assert analysis.stocks == []
    assert analysis.sectors == []
    assert analysis.insights == FALLBACK_INSIGHTS
    assert analysis.market_weather.overall == MarketCondition.CLOUDY
    assert analysis.market_weather.temperature == 65


def test_generate_market_analysis_falls_back_on_catalog_error():
    class BrokenRepository(InMemorySecurityRepository):
        def get_all_active(self):
            raise RuntimeError("Not connected to ClickHouse")

    service = MarketWeatherService(
        CatalogService(BrokenRepository()), DisclosureService(StaticDisclosureSource())
    )
    analysis = asyncio.run(service.generate_market_analysis())
    assert analysis.insights == FALLBACK_INSIGHTS
