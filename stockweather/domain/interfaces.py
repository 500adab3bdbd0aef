"""Repository and source interfaces (Ports) - abstraction for data access."""
from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from stockweather.domain.entities import (
    Holding, Portfolio, Quote, RawFiling, Security, UserAlert,
)


class SecurityRepository(ABC):
    """Interface for security master data access."""

    @abstractmethod
    def get_all_active(self) -> List[Security]:
        """Get all active securities, market cap descending."""
        pass

    @abstractmethod
    def get_top_by_market_cap(self, limit: int) -> List[Security]:
        """Get the top N active securities by market cap."""
        pass

    @abstractmethod
    def get_by_code(self, code: str) -> Optional[Security]:
        """Get a single security by code."""
        pass

    @abstractmethod
    def upsert_batch(self, securities: List[Security]) -> None:
        """Insert or replace multiple security records."""
        pass


class PortfolioRepository(ABC):
    """Interface for portfolio data access."""

    @abstractmethod
    def get(self, portfolio_id: UUID) -> Optional[Portfolio]:
        pass

    @abstractmethod
    def list_by_user(self, user_id: str) -> List[Portfolio]:
        pass

    @abstractmethod
    def save(self, portfolio: Portfolio) -> None:
        """Insert or replace a portfolio."""
        pass

    @abstractmethod
    def delete(self, portfolio_id: UUID) -> None:
        pass


class HoldingRepository(ABC):
    """Interface for holding data access."""

    @abstractmethod
    def get(self, holding_id: UUID) -> Optional[Holding]:
        pass

    @abstractmethod
    def list_by_portfolio(self, portfolio_id: UUID) -> List[Holding]:
        pass

    @abstractmethod
    def save(self, holding: Holding) -> None:
        """Insert or replace a holding."""
        pass

    @abstractmethod
    def delete(self, holding_id: UUID) -> None:
        pass


class AlertRepository(ABC):
    """Interface for alert preference data access."""

    @abstractmethod
    def get(self, alert_id: UUID) -> Optional[UserAlert]:
        pass

    @abstractmethod
    def list_by_user(self, user_id: str) -> List[UserAlert]:
        pass

    @abstractmethod
    def list_active(self) -> List[UserAlert]:
        pass

    @abstractmethod
    def save(self, alert: UserAlert) -> None:
        """Insert or replace an alert."""
        pass

    @abstractmethod
    def delete(self, alert_id: UUID) -> None:
        pass


class DisclosureSource(ABC):
    """Interface for the external regulatory filing source."""

    @abstractmethod
    async def get_recent_filings(
        self, lookback_days: int, page_size: int
    ) -> List[RawFiling]:
        """Get filings submitted within the lookback window."""
        pass

    @abstractmethod
    async def get_company_filings(self, stock_code: str, limit: int) -> List[RawFiling]:
        """Get the latest filings of one company."""
        pass


class QuoteSource(ABC):
    """Interface for the external quote source."""

    @abstractmethod
    def get_quote(self, security: Security) -> Optional[Quote]:
        pass
