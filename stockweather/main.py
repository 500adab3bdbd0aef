"""FastAPI application - minimal setup with dependency injection."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockweather.api.dependencies import init_services, get_alert_service, get_catalog_service
from stockweather.api.routes import alerts, dart, health, market, portfolios, stocks
from stockweather.api.websocket.search import router as ws_router, manager
from stockweather.config import app_config
from stockweather.db import init_schema
from stockweather.infrastructure.dart_client import DartClient
from stockweather.infrastructure.quote_client import YahooQuoteClient
from stockweather.infrastructure.scheduler import setup_scheduler
from stockweather.repository.clickhouse_client import ClickHouseConnection

logging.basicConfig(
    level=app_config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info("Starting application...")

    # Initialize database connection
    connection = ClickHouseConnection()
    connection.connect()
    init_schema(connection)

    # Initialize services with DI
    dart_client = DartClient()
    init_services(connection, dart_client, YahooQuoteClient())

    # Set health check dependencies
    health.set_health_dependencies(connection, manager)

    # Seed the security master on first start
    catalog = get_catalog_service()
    if not catalog.get_all_active():
        catalog.sync()

    # Register WebSocket broadcast for alerts
    async def broadcast_alert(event):
        await manager.broadcast({"type": "alert", "data": event.model_dump(mode="json")})

    get_alert_service().register_callback(broadcast_alert)

    # Setup scheduler
    scheduler = setup_scheduler()
    scheduler.start()

    logger.info("Application started")
    yield

    # Shutdown
    logger.info("Shutting down...")
    scheduler.shutdown()
    get_alert_service().unregister_callback(broadcast_alert)
    await dart_client.close()
    connection.disconnect()
    logger.info("Shutdown complete")


# Create app
app = FastAPI(
    title="Stock Weather API",
    description="Market weather from DART disclosures, realtime KRX search and portfolios",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(health.router)
app.include_router(market.router)
app.include_router(stocks.router)
app.include_router(dart.router)
app.include_router(portfolios.router)
app.include_router(alerts.router)
app.include_router(ws_router)
