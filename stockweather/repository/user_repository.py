"""ClickHouse implementations of portfolio, holding and alert repositories."""
from typing import List, Optional
from uuid import UUID
import json
import logging

from stockweather.domain.interfaces import (
    AlertRepository, HoldingRepository, PortfolioRepository,
)
from stockweather.domain.entities import AlertType, Holding, Portfolio, UserAlert
from stockweather.repository.clickhouse_client import ClickHouseConnection

logger = logging.getLogger(__name__)


class ClickHousePortfolioRepository(PortfolioRepository):
    """ClickHouse implementation for portfolio repository."""

    _COLUMNS = "id, user_id, name, description, created_at, updated_at"

    def __init__(self, connection: ClickHouseConnection):
        self._conn = connection

    @staticmethod
    def _to_entity(row) -> Portfolio:
        return Portfolio(
            id=row[0],
            user_id=row[1],
            name=row[2],
            description=row[3],
            created_at=row[4],
            updated_at=row[5],
        )

    def get(self, portfolio_id: UUID) -> Optional[Portfolio]:
        query = f"""
        SELECT {self._COLUMNS}
        FROM portfolios FINAL
        WHERE id = %(id)s
        """
        result = self._conn.execute(query, {"id": portfolio_id})
        return self._to_entity(result[0]) if result else None

    def list_by_user(self, user_id: str) -> List[Portfolio]:
        query = f"""
        SELECT {self._COLUMNS}
        FROM portfolios FINAL
        WHERE user_id = %(user_id)s
        ORDER BY created_at DESC
        """
        results = self._conn.execute(query, {"user_id": user_id})
        return [self._to_entity(row) for row in results]

    def save(self, portfolio: Portfolio) -> None:
        query = f"INSERT INTO portfolios ({self._COLUMNS}) VALUES"
        self._conn.execute(
            query,
            [(portfolio.id, portfolio.user_id, portfolio.name, portfolio.description,
              portfolio.created_at, portfolio.updated_at)]
        )

    def delete(self, portfolio_id: UUID) -> None:
        self._conn.execute(
            "ALTER TABLE portfolios DELETE WHERE id = %(id)s", {"id": portfolio_id}
        )


class ClickHouseHoldingRepository(HoldingRepository):
    """ClickHouse implementation for holding repository."""

    _COLUMNS = (
        "id, portfolio_id, stock_code, stock_name, shares, average_price, "
        "current_price, confidence_level, created_at, updated_at"
    )

    def __init__(self, connection: ClickHouseConnection):
        self._conn = connection

    @staticmethod
    def _to_entity(row) -> Holding:
        return Holding(
            id=row[0],
            portfolio_id=row[1],
            stock_code=row[2],
            stock_name=row[3],
            shares=row[4],
            average_price=row[5],
            current_price=row[6],
            confidence_level=row[7],
            created_at=row[8],
            updated_at=row[9],
        )

    def get(self, holding_id: UUID) -> Optional[Holding]:
        query = f"""
        SELECT {self._COLUMNS}
        FROM holdings FINAL
        WHERE id = %(id)s
        """
        result = self._conn.execute(query, {"id": holding_id})
        return self._to_entity(result[0]) if result else None

    def list_by_portfolio(self, portfolio_id: UUID) -> List[Holding]:
        query = f"""
        SELECT {self._COLUMNS}
        FROM holdings FINAL
        WHERE portfolio_id = %(portfolio_id)s
        ORDER BY created_at ASC
        """
        results = self._conn.execute(query, {"portfolio_id": portfolio_id})
        return [self._to_entity(row) for row in results]

    def save(self, holding: Holding) -> None:
        query = f"INSERT INTO holdings ({self._COLUMNS}) VALUES"
        self._conn.execute(
            query,
            [(holding.id, holding.portfolio_id, holding.stock_code, holding.stock_name,
              holding.shares, holding.average_price, holding.current_price,
              holding.confidence_level, holding.created_at, holding.updated_at)]
        )

    def delete(self, holding_id: UUID) -> None:
        self._conn.execute(
            "ALTER TABLE holdings DELETE WHERE id = %(id)s", {"id": holding_id}
        )


class ClickHouseAlertRepository(AlertRepository):
    """ClickHouse implementation for alert preference repository."""

    _COLUMNS = (
        "id, user_id, stock_code, alert_type, condition, is_active, "
        "last_triggered, created_at, updated_at"
    )

    def __init__(self, connection: ClickHouseConnection):
        self._conn = connection

    @staticmethod
    def _to_entity(row) -> UserAlert:
        return UserAlert(
            id=row[0],
            user_id=row[1],
            stock_code=row[2],
            alert_type=AlertType(row[3]),
            condition=json.loads(row[4] or "{}"),
            is_active=bool(row[5]),
            last_triggered=row[6],
            created_at=row[7],
            updated_at=row[8],
        )

    def get(self, alert_id: UUID) -> Optional[UserAlert]:
        query = f"""
        SELECT {self._COLUMNS}
        FROM user_alerts FINAL
        WHERE id = %(id)s
        """
        result = self._conn.execute(query, {"id": alert_id})
        return self._to_entity(result[0]) if result else None

    def list_by_user(self, user_id: str) -> List[UserAlert]:
        query = f"""
        SELECT {self._COLUMNS}
        FROM user_alerts FINAL
        WHERE user_id = %(user_id)s
        ORDER BY created_at DESC
        """
        results = self._conn.execute(query, {"user_id": user_id})
        return [self._to_entity(row) for row in results]

    def list_active(self) -> List[UserAlert]:
        query = f"""
        SELECT {self._COLUMNS}
        FROM user_alerts FINAL
        WHERE is_active = 1
        """
        return [self._to_entity(row) for row in self._conn.execute(query)]

    def save(self, alert: UserAlert) -> None:
        query = f"INSERT INTO user_alerts ({self._COLUMNS}) VALUES"
        self._conn.execute(
            query,
            [(alert.id, alert.user_id, alert.stock_code, alert.alert_type.value,
              json.dumps(alert.condition, ensure_ascii=False),
              1 if alert.is_active else 0, alert.last_triggered,
              alert.created_at, alert.updated_at)]
        )

    def delete(self, alert_id: UUID) -> None:
        self._conn.execute(
            "ALTER TABLE user_alerts DELETE WHERE id = %(id)s", {"id": alert_id}
        )
