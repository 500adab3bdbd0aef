"""Airflow tasks for the security master sync."""
from typing import Callable, List, Optional
import logging

from stockweather.api import dependencies
from stockweather.api.dependencies import get_catalog_service, init_services
from stockweather.db import init_schema
from stockweather.domain.entities import Security
from stockweather.infrastructure.dart_client import DartClient
from stockweather.infrastructure.krx_master import load_seed_securities
from stockweather.infrastructure.quote_client import YahooQuoteClient
from stockweather.repository.clickhouse_client import ClickHouseConnection

logger = logging.getLogger(__name__)


def _ensure_services_initialized() -> None:
    """Initialize services if not already done (for Airflow context).

    In FastAPI, services are initialized during app startup via lifespan.
    In Airflow, tasks run outside app context, so we initialize on first call.
    """
    if dependencies._catalog_service is None:
        logger.info("Initializing services for Airflow context...")
        try:
            connection = ClickHouseConnection()
            connection.connect()
            init_schema(connection)
            init_services(connection, DartClient(), YahooQuoteClient())
            logger.info("Services initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize services: {e}")
            raise


def validate_securities(
    loader: Callable[[], List[Security]] = load_seed_securities,
) -> dict:
    """Count seed rows and the ones the sync would skip."""
    securities = loader()
    invalid = [s for s in securities if not s.code or not s.name]
    codes = [s.code for s in securities]
    duplicates = sorted({code for code in codes if codes.count(code) > 1})
    if duplicates:
        logger.warning(f"Duplicate security codes in seed: {duplicates}")
    return {
        "status": "valid" if not invalid and not duplicates else "invalid",
        "total": len(securities),
        "invalid": len(invalid),
        "duplicates": duplicates,
    }


def sync_security_master(limit_check: Optional[int] = None) -> dict:
    """Run the catalog sync; optionally verify at least ``limit_check`` rows are active."""
    _ensure_services_initialized()
    try:
        logger.info("Syncing security master...")
        service = get_catalog_service()
        result = service.sync()

        if limit_check:
            active = len(service.get_top_by_market_cap(limit_check))
            if active < limit_check:
                logger.warning(f"Only {active} active securities after sync")
                return {"status": "incomplete", "active": active, **result}

        logger.info(f"Security master sync completed: {result}")
        return {"status": "success", **result}
    except Exception as e:
        logger.error(f"Error syncing security master: {e}")
        return {"status": "error", "error": str(e)}
