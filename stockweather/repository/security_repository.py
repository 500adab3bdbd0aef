"""ClickHouse implementation of the security master repository."""
from typing import List, Optional
from datetime import datetime
import logging

from stockweather.domain.interfaces import SecurityRepository
from stockweather.domain.entities import Market, Security
from stockweather.repository.clickhouse_client import ClickHouseConnection

logger = logging.getLogger(__name__)

_COLUMNS = "code, name, name_eng, market, sector, industry, market_cap, is_active"


def _row_to_security(row) -> Security:
    return Security(
        code=row[0],
        name=row[1],
        name_eng=row[2],
        market=Market(row[3]),
        sector=row[4],
        industry=row[5],
        market_cap=row[6],
        is_active=bool(row[7]),
    )


class ClickHouseSecurityRepository(SecurityRepository):
    """ClickHouse implementation for security master repository."""

    def __init__(self, connection: ClickHouseConnection):
        self._conn = connection

    def get_all_active(self) -> List[Security]:
        """Get all active securities, market cap descending."""
        query = f"""
        SELECT {_COLUMNS}
        FROM securities FINAL
        WHERE is_active = 1
        ORDER BY market_cap DESC NULLS LAST
        """
        return [_row_to_security(row) for row in self._conn.execute(query)]

    def get_top_by_market_cap(self, limit: int) -> List[Security]:
        """Get the top N active securities that report a market cap."""
        query = f"""
        SELECT {_COLUMNS}
        FROM securities FINAL
        WHERE is_active = 1 AND market_cap > 0
        ORDER BY market_cap DESC
        LIMIT %(limit)s
        """
        results = self._conn.execute(query, {"limit": limit})
        return [_row_to_security(row) for row in results]

    def get_by_code(self, code: str) -> Optional[Security]:
        """Get a single security by code."""
        query = f"""
        SELECT {_COLUMNS}
        FROM securities FINAL
        WHERE code = %(code)s
        LIMIT 1
        """
        result = self._conn.execute(query, {"code": code})
        if result:
            return _row_to_security(result[0])
        return None

    def upsert_batch(self, securities: List[Security]) -> None:
        """Insert new versions of multiple security records."""
        if not securities:
            return
        query = f"INSERT INTO securities ({_COLUMNS}, updated_at) VALUES"
        now = datetime.now()
        values = [
            (
                sec.code,
                sec.name,
                sec.name_eng,
                sec.market.value,
                sec.sector,
                sec.industry,
                sec.market_cap,
                1 if sec.is_active else 0,
                now,
            )
            for sec in securities
        ]
        self._conn.execute(query, values)
        logger.info(f"Upserted {len(securities)} security records")
