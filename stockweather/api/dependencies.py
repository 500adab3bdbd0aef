"""FastAPI dependency injection setup."""
from typing import Optional

from fastapi import Header

from stockweather.domain.interfaces import DisclosureSource, QuoteSource
from stockweather.infrastructure.krx_master import load_seed_securities
from stockweather.repository.clickhouse_client import ClickHouseConnection
from stockweather.repository.security_repository import ClickHouseSecurityRepository
from stockweather.repository.user_repository import (
    ClickHouseAlertRepository,
    ClickHouseHoldingRepository,
    ClickHousePortfolioRepository,
)
from stockweather.services.alert_service import AlertService
from stockweather.services.catalog_service import CatalogService
from stockweather.services.disclosure_service import DisclosureService
from stockweather.services.market_weather_service import MarketWeatherService
from stockweather.services.portfolio_service import PortfolioService
from stockweather.services.search_service import SearchService


# Application state (set during lifespan)
_connection: Optional[ClickHouseConnection] = None
_catalog_service: Optional[CatalogService] = None
_disclosure_service: Optional[DisclosureService] = None
_market_weather_service: Optional[MarketWeatherService] = None
_search_service: Optional[SearchService] = None
_portfolio_service: Optional[PortfolioService] = None
_alert_service: Optional[AlertService] = None
_quote_source: Optional[QuoteSource] = None


def init_services(
    connection: ClickHouseConnection,
    disclosure_source: DisclosureSource,
    quote_source: QuoteSource,
) -> None:
    """Initialize all services with connection and external sources."""
    global _connection, _catalog_service, _disclosure_service, _market_weather_service
    global _search_service, _portfolio_service, _alert_service, _quote_source
    _connection = connection
    _quote_source = quote_source

    security_repo = ClickHouseSecurityRepository(connection)
    portfolio_repo = ClickHousePortfolioRepository(connection)
    holding_repo = ClickHouseHoldingRepository(connection)
    alert_repo = ClickHouseAlertRepository(connection)

    _catalog_service = CatalogService(security_repo, seed_loader=load_seed_securities)
    _disclosure_service = DisclosureService(disclosure_source)
    _market_weather_service = MarketWeatherService(_catalog_service, _disclosure_service)
    _search_service = SearchService(_catalog_service)
    _portfolio_service = PortfolioService(
        portfolio_repo, holding_repo, quotes=quote_source, catalog=_catalog_service
    )
    _alert_service = AlertService(alert_repo, quotes=quote_source, catalog=_catalog_service)


def get_connection() -> ClickHouseConnection:
    """Get database connection."""
    if _connection is None:
        raise RuntimeError("Services not initialized")
    return _connection


def get_catalog_service() -> CatalogService:
    if _catalog_service is None:
        raise RuntimeError("Services not initialized")
    return _catalog_service


def get_disclosure_service() -> DisclosureService:
    if _disclosure_service is None:
        raise RuntimeError("Services not initialized")
    return _disclosure_service


def get_market_weather_service() -> MarketWeatherService:
    """Get market weather service dependency."""
    if _market_weather_service is None:
        raise RuntimeError("Services not initialized")
    return _market_weather_service


def get_search_service() -> SearchService:
    """Get search service dependency."""
    if _search_service is None:
        raise RuntimeError("Services not initialized")
    return _search_service


def get_portfolio_service() -> PortfolioService:
    if _portfolio_service is None:
        raise RuntimeError("Services not initialized")
    return _portfolio_service


def get_alert_service() -> AlertService:
    """Get alert service dependency."""
    if _alert_service is None:
        raise RuntimeError("Services not initialized")
    return _alert_service


def get_quote_source() -> QuoteSource:
    if _quote_source is None:
        raise RuntimeError("Services not initialized")
    return _quote_source


def get_user_id(x_user_id: str = Header(..., alias="X-User-Id")) -> str:
    """Caller identity, set by the authenticating proxy."""
    return x_user_id
