"""Health check endpoint."""
from datetime import datetime
from fastapi import APIRouter

from stockweather.api.schemas import HealthResponse

router = APIRouter()

# These will be set by main.py
connection = None
connection_manager = None


def set_health_dependencies(db_connection, manager) -> None:
    """Set dependencies for health endpoint."""
    global connection, connection_manager
    connection = db_connection
    connection_manager = manager


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    connected = connection is not None and connection.is_connected
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat(),
        database="connected" if connected else "disconnected",
        websocket_clients=len(connection_manager.active_connections) if connection_manager else 0,
    )
