"""APScheduler setup for batch jobs."""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from stockweather.api.dependencies import (
    get_alert_service, get_catalog_service, get_disclosure_service,
    get_market_weather_service,
)
from stockweather.config import app_config

logger = logging.getLogger(__name__)


async def sync_security_master() -> None:
    """Reload the security master and drop the catalog cache."""
    logger.info("Starting security master sync...")
    try:
        result = get_catalog_service().sync()
        logger.info(f"Security master sync completed: {result}")
    except Exception as e:
        logger.error(f"Error syncing security master: {e}")


async def check_alerts() -> None:
    """Match active alert preferences against fresh disclosures and weather."""
    logger.info("Starting alert check...")
    alerts = get_alert_service()

    try:
        disclosures = await get_disclosure_service().get_recent_disclosures()
        await alerts.check_disclosure_alerts(disclosures)
    except Exception as e:
        logger.error(f"Error checking disclosure alerts: {e}")

    try:
        analysis = await get_market_weather_service().generate_market_analysis()
        await alerts.check_weather_alerts(analysis.stocks)
    except Exception as e:
        logger.error(f"Error checking weather alerts: {e}")

    try:
        await alerts.check_price_alerts()
    except Exception as e:
        logger.error(f"Error checking price alerts: {e}")

    logger.info("Alert check completed")


def setup_scheduler() -> AsyncIOScheduler:
    """Create and configure scheduler."""
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        sync_security_master,
        CronTrigger(hour=f"*/{app_config.CATALOG_SYNC_HOURS}"),
        id="sync_security_master",
        name=f"Sync security master every {app_config.CATALOG_SYNC_HOURS} hours",
        replace_existing=True,
    )
    scheduler.add_job(
        check_alerts,
        IntervalTrigger(minutes=app_config.ALERT_CHECK_MINUTES),
        id="check_alerts",
        name=f"Check alerts every {app_config.ALERT_CHECK_MINUTES} minutes",
        replace_existing=True,
    )
    return scheduler
