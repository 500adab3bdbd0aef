"""Tests for portfolio and holding management."""
from uuid import uuid4

import pytest

from conftest import InMemoryHoldingRepository, InMemoryPortfolioRepository
from stockweather.domain.entities import (
    HoldingCreate, HoldingUpdate, PortfolioCreate, PortfolioUpdate,
)
from stockweather.domain.exceptions import NotFoundError
from stockweather.services.catalog_service import CatalogService
from stockweather.services.portfolio_service import PortfolioService


@pytest.fixture
def portfolios():
    return InMemoryPortfolioRepository()


@pytest.fixture
def holdings():
    return InMemoryHoldingRepository()


@pytest.fixture
def service(portfolios, holdings, mock_quote_source, security_repository):
    return PortfolioService(
        portfolios, holdings,
        quotes=mock_quote_source,
        catalog=CatalogService(security_repository),
    )


def samsung(**overrides):
    data = {"stock_code": "005930", "stock_name": "삼성전자", "shares": 10, "average_price": 68000}
    data.update(overrides)
    return HoldingCreate(**data)


def test_create_portfolio_defaults(service, portfolios):
    portfolio = service.create_portfolio("user-1", PortfolioCreate())
    assert portfolio.name == "내 포트폴리오"
    assert portfolio.user_id == "user-1"
    assert portfolios.get(portfolio.id) == portfolio


def test_list_portfolios_is_per_user(service):
    service.create_portfolio("user-1", PortfolioCreate(name="장기"))
    service.create_portfolio("user-2", PortfolioCreate(name="단기"))
    assert [p.name for p in service.list_portfolios("user-1")] == ["장기"]


def test_get_portfolio_of_other_user_is_not_found(service):
    portfolio = service.create_portfolio("user-1", PortfolioCreate())
    with pytest.raises(NotFoundError):
        service.get_portfolio("user-2", portfolio.id)
    with pytest.raises(NotFoundError):
        service.get_portfolio("user-1", uuid4())


def test_update_portfolio(service):
    portfolio = service.create_portfolio("user-1", PortfolioCreate(name="장기"))
    updated = service.update_portfolio("user-1", portfolio.id, PortfolioUpdate(description="배당주"))
    assert updated.name == "장기"
    assert updated.description == "배당주"
    assert updated.updated_at >= portfolio.updated_at


def test_delete_portfolio_removes_holdings(service, portfolios, holdings):
    portfolio = service.create_portfolio("user-1", PortfolioCreate())
    service.add_holding("user-1", portfolio.id, samsung())
    service.delete_portfolio("user-1", portfolio.id)
    assert portfolios.rows == {}
    assert holdings.rows == {}


def test_add_and_list_holdings(service):
    portfolio = service.create_portfolio("user-1", PortfolioCreate())
    holding = service.add_holding("user-1", portfolio.id, samsung())
    assert holding.portfolio_id == portfolio.id
    assert holding.confidence_level == 50
    assert service.list_holdings("user-1", portfolio.id) == [holding]


def test_add_holding_to_missing_portfolio(service):
    with pytest.raises(NotFoundError):
        service.add_holding("user-1", uuid4(), samsung())


def test_holding_validation():
    with pytest.raises(ValueError):
        samsung(shares=-1)
    with pytest.raises(ValueError):
        samsung(confidence_level=0)
    with pytest.raises(ValueError):
        samsung(confidence_level=101)


def test_update_and_delete_holding(service, holdings):
    portfolio = service.create_portfolio("user-1", PortfolioCreate())
    holding = service.add_holding("user-1", portfolio.id, samsung())

    updated = service.update_holding("user-1", holding.id, HoldingUpdate(shares=15))
    assert updated.shares == 15
    assert updated.average_price == 68000

    with pytest.raises(NotFoundError):
        service.update_holding("user-2", holding.id, HoldingUpdate(shares=1))

    service.delete_holding("user-1", holding.id)
    assert holdings.rows == {}
    with pytest.raises(NotFoundError):
        service.delete_holding("user-1", holding.id)


def test_refresh_prices(service, mock_quote_source):
    portfolio = service.create_portfolio("user-1", PortfolioCreate())
    service.add_holding("user-1", portfolio.id, samsung())
    service.add_holding("user-1", portfolio.id, samsung(stock_code="247540", stock_name="에코프로비엠"))

    refreshed = service.refresh_prices("user-1", portfolio.id)
    assert {h.current_price for h in refreshed} == {71000.0}
    markets = {call.args[0].code: call.args[0].market.value
               for call in mock_quote_source.get_quote.call_args_list}
    assert markets == {"005930": "KOSPI", "247540": "KOSDAQ"}


def test_refresh_prices_keeps_price_without_quote(service, mock_quote_source):
    mock_quote_source.get_quote.side_effect = lambda security: None
    portfolio = service.create_portfolio("user-1", PortfolioCreate())
    service.add_holding("user-1", portfolio.id, samsung(current_price=70000))

    refreshed = service.refresh_prices("user-1", portfolio.id)
    assert refreshed[0].current_price == 70000


def test_refresh_prices_without_quote_source(portfolios, holdings):
    service = PortfolioService(portfolios, holdings)
    portfolio = service.create_portfolio("user-1", PortfolioCreate())
    with pytest.raises(RuntimeError):
        service.refresh_prices("user-1", portfolio.id)
