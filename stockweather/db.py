"""ClickHouse schema for the security master and user data.

Mutable entities use ReplacingMergeTree keyed on ``updated_at``: an update is
a new row version, reads use ``FINAL``, deletes are lightweight mutations.
"""
import logging
from typing import List

from stockweather.repository.clickhouse_client import ClickHouseConnection

logger = logging.getLogger(__name__)

TABLES: List[str] = [
    """
    CREATE TABLE IF NOT EXISTS securities (
        code String,
        name String,
        name_eng Nullable(String),
        market LowCardinality(String),
        sector Nullable(String),
        industry Nullable(String),
        market_cap Nullable(UInt64),
        is_active UInt8,
        updated_at DateTime64(3)
    ) ENGINE = ReplacingMergeTree(updated_at)
    ORDER BY code
    """,
    """
    CREATE TABLE IF NOT EXISTS portfolios (
        id UUID,
        user_id String,
        name String,
        description Nullable(String),
        created_at DateTime64(3),
        updated_at DateTime64(3)
    ) ENGINE = ReplacingMergeTree(updated_at)
    ORDER BY id
    """,
    """
    CREATE TABLE IF NOT EXISTS holdings (
        id UUID,
        portfolio_id UUID,
        stock_code String,
        stock_name String,
        shares Int64,
        average_price Float64,
        current_price Nullable(Float64),
        confidence_level UInt8,
        created_at DateTime64(3),
        updated_at DateTime64(3)
    ) ENGINE = ReplacingMergeTree(updated_at)
    ORDER BY id
    """,
    """
    CREATE TABLE IF NOT EXISTS user_alerts (
        id UUID,
        user_id String,
        stock_code Nullable(String),
        alert_type LowCardinality(String),
        condition String,
        is_active UInt8,
        last_triggered Nullable(DateTime64(3)),
        created_at DateTime64(3),
        updated_at DateTime64(3)
    ) ENGINE = ReplacingMergeTree(updated_at)
    ORDER BY id
    """,
]


def init_schema(connection: ClickHouseConnection) -> None:
    """Create tables if they do not exist."""
    for ddl in TABLES:
        connection.execute(ddl)
    logger.info(f"Schema ready ({len(TABLES)} tables)")
