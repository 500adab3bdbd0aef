"""Portfolio and holding business logic."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4
import logging

from stockweather.domain.entities import (
    Holding, HoldingCreate, HoldingUpdate, Portfolio, PortfolioCreate,
    PortfolioUpdate, Security,
)
from stockweather.domain.exceptions import NotFoundError
from stockweather.domain.interfaces import (
    HoldingRepository, PortfolioRepository, QuoteSource,
)
from stockweather.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


class PortfolioService:
    """User portfolios and their holdings."""

    def __init__(
        self,
        portfolios: PortfolioRepository,
        holdings: HoldingRepository,
        quotes: Optional[QuoteSource] = None,
        catalog: Optional[CatalogService] = None,
    ):
        self._portfolios = portfolios
        self._holdings = holdings
        self._quotes = quotes
        self._catalog = catalog

    def list_portfolios(self, user_id: str) -> List[Portfolio]:
        return self._portfolios.list_by_user(user_id)

    def get_portfolio(self, user_id: str, portfolio_id: UUID) -> Portfolio:
        """Portfolio owned by ``user_id``; NotFoundError otherwise."""
        portfolio = self._portfolios.get(portfolio_id)
        if portfolio is None or portfolio.user_id != user_id:
            raise NotFoundError("Portfolio", portfolio_id)
        return portfolio

    def create_portfolio(self, user_id: str, data: PortfolioCreate) -> Portfolio:
        now = datetime.now()
        portfolio = Portfolio(
            id=uuid4(),
            user_id=user_id,
            name=data.name,
            description=data.description,
            created_at=now,
            updated_at=now,
        )
        self._portfolios.save(portfolio)
        logger.info(f"Created portfolio {portfolio.id} for user {user_id}")
        return portfolio

    def update_portfolio(
        self, user_id: str, portfolio_id: UUID, data: PortfolioUpdate
    ) -> Portfolio:
        portfolio = self.get_portfolio(user_id, portfolio_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        updated = portfolio.model_copy(update={**changes, "updated_at": datetime.now()})
        self._portfolios.save(updated)
        return updated

    def delete_portfolio(self, user_id: str, portfolio_id: UUID) -> None:
        """Delete a portfolio together with its holdings."""
        self.get_portfolio(user_id, portfolio_id)
        for holding in self._holdings.list_by_portfolio(portfolio_id):
            self._holdings.delete(holding.id)
        self._portfolios.delete(portfolio_id)
        logger.info(f"Deleted portfolio {portfolio_id}")

    def list_holdings(self, user_id: str, portfolio_id: UUID) -> List[Holding]:
        self.get_portfolio(user_id, portfolio_id)
        return self._holdings.list_by_portfolio(portfolio_id)

    def add_holding(
        self, user_id: str, portfolio_id: UUID, data: HoldingCreate
    ) -> Holding:
        self.get_portfolio(user_id, portfolio_id)
        now = datetime.now()
        holding = Holding(
            id=uuid4(),
            portfolio_id=portfolio_id,
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        self._holdings.save(holding)
        return holding

    def _owned_holding(self, user_id: str, holding_id: UUID) -> Holding:
        holding = self._holdings.get(holding_id)
        if holding is None:
            raise NotFoundError("Holding", holding_id)
        portfolio = self._portfolios.get(holding.portfolio_id)
        if portfolio is None or portfolio.user_id != user_id:
            raise NotFoundError("Holding", holding_id)
        return holding

    def update_holding(
        self, user_id: str, holding_id: UUID, data: HoldingUpdate
    ) -> Holding:
        holding = self._owned_holding(user_id, holding_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        updated = holding.model_copy(update={**changes, "updated_at": datetime.now()})
        self._holdings.save(updated)
        return updated

    def delete_holding(self, user_id: str, holding_id: UUID) -> None:
        self._owned_holding(user_id, holding_id)
        self._holdings.delete(holding_id)

    def refresh_prices(self, user_id: str, portfolio_id: UUID) -> List[Holding]:
        """Set ``current_price`` on every holding from the quote source.

        Holdings without a quote keep their previous price.
        """
        if self._quotes is None:
            raise RuntimeError("No quote source configured")

        refreshed = []
        for holding in self.list_holdings(user_id, portfolio_id):
            quote = self._quotes.get_quote(self._security_for(holding))
            if quote is None:
                refreshed.append(holding)
                continue
            updated = holding.model_copy(
                update={"current_price": quote.price, "updated_at": datetime.now()}
            )
            self._holdings.save(updated)
            refreshed.append(updated)
        return refreshed

    def _security_for(self, holding: Holding) -> Security:
        security = self._catalog.get_by_code(holding.stock_code) if self._catalog else None
        return security or Security(code=holding.stock_code, name=holding.stock_name)
