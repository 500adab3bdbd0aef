"""Pytest configuration and fixtures."""
from datetime import datetime
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from stockweather.domain.entities import (
    Disclosure, DisclosureCategory, Market, Quote, RawFiling, Security,
)
from stockweather.domain.interfaces import (
    AlertRepository, DisclosureSource, HoldingRepository, PortfolioRepository,
    SecurityRepository,
)


class InMemorySecurityRepository(SecurityRepository):
    def __init__(self, securities: Optional[List[Security]] = None):
        self.rows: Dict[str, Security] = {s.code: s for s in securities or []}
        self.reads = 0

    def get_all_active(self):
        self.reads += 1
        active = [s for s in self.rows.values() if s.is_active]
        return sorted(active, key=lambda s: s.market_cap or 0, reverse=True)

    def get_top_by_market_cap(self, limit):
        return self.get_all_active()[:limit]

    def get_by_code(self, code):
        return self.rows.get(code)

    def upsert_batch(self, securities):
        for security in securities:
            self.rows[security.code] = security


class _InMemoryById:
    def __init__(self):
        self.rows = {}

    def get(self, key):
        return self.rows.get(key)

    def save(self, entity):
        self.rows[entity.id] = entity

    def delete(self, key):
        self.rows.pop(key, None)


class InMemoryPortfolioRepository(_InMemoryById, PortfolioRepository):
    def list_by_user(self, user_id):
        return [p for p in self.rows.values() if p.user_id == user_id]


class InMemoryHoldingRepository(_InMemoryById, HoldingRepository):
    def list_by_portfolio(self, portfolio_id):
        return [h for h in self.rows.values() if h.portfolio_id == portfolio_id]


class InMemoryAlertRepository(_InMemoryById, AlertRepository):
    def list_by_user(self, user_id):
        return [a for a in self.rows.values() if a.user_id == user_id]

    def list_active(self):
        return [a for a in self.rows.values() if a.is_active]


class StaticDisclosureSource(DisclosureSource):
    """Returns a fixed list of filings and counts calls."""

    def __init__(self, filings: Optional[List[RawFiling]] = None, error: Exception = None):
        self.filings = filings or []
        self.error = error
        self.calls = 0

    async def get_recent_filings(self, lookback_days, page_size):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.filings)

    async def get_company_filings(self, stock_code, limit):
        return [f for f in self.filings if f.stock_code == stock_code][:limit]


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_security(code, name, sector=None, market_cap=None, market=Market.KOSPI, **kwargs):
    return Security(
        code=code, name=name, sector=sector, market_cap=market_cap, market=market, **kwargs
    )


def make_disclosure(code, company, title="기타공시", submitted_at=None, **kwargs):
    return Disclosure(
        id=kwargs.pop("id", f"{code}-{title}"),
        security_code=code,
        company_name=company,
        title=title,
        category=kwargs.pop("category", DisclosureCategory.OTHER),
        submitted_at=submitted_at or datetime(2024, 3, 1),
        url="https://dart.fss.or.kr",
        **kwargs,
    )


@pytest.fixture
def securities():
    return [
        make_security("005930", "삼성전자", "전기전자", 430, name_eng="Samsung Electronics",
                      industry="반도체"),
        make_security("000660", "SK하이닉스", "전기전자", 94, industry="반도체"),
        make_security("207940", "삼성바이오로직스", "의료정밀", 70, industry="바이오의약품"),
        make_security("035420", "NAVER", "서비스업", 32, industry="플랫폼"),
        make_security("105560", "KB금융", "금융업", 28),
        make_security("247540", "에코프로비엠", "화학", 25, market=Market.KOSDAQ),
        make_security("000720", "현대건설", "건설업", 8),
    ]


@pytest.fixture
def security_repository(securities):
    return InMemorySecurityRepository(securities)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def mock_quote_source():
    """Quote source returning a fixed price."""
    source = MagicMock()
    source.get_quote = MagicMock(
        side_effect=lambda security: Quote(
            code=security.code,
            price=71000.0,
            change=500.0,
            change_percent=0.71,
            volume=1000000,
            timestamp=datetime(2024, 3, 1, 15, 30),
        )
    )
    return source
