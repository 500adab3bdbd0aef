"""WebSocket endpoint for realtime security search and alert broadcast."""
from typing import List
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
import json
import logging

from stockweather.api.dependencies import get_search_service
from stockweather.api.schemas import (
    ConnectionMessage, ErrorMessage, SearchResultMessage, SuggestionsMessage,
)
from stockweather.services.search_service import SearchService

logger = logging.getLogger(__name__)
router = APIRouter()

DEFAULT_SEARCH_LIMIT = 10


class ConnectionManager:
    """Manage WebSocket connections for broadcasting."""

    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info(f"WebSocket connected. Total: {len(self.active_connections)}")

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
        logger.info(f"WebSocket disconnected. Total: {len(self.active_connections)}")

    async def broadcast(self, message: dict) -> None:
        """Broadcast message to all connected clients."""
        for connection in list(self.active_connections):
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.error(f"Error broadcasting: {e}")


# Singleton manager
manager = ConnectionManager()


def search_limit(value) -> int:
    """Client limit as a positive int; missing means the default."""
    if value is None:
        return DEFAULT_SEARCH_LIMIT
    if isinstance(value, bool):
        raise TypeError("limit must be an integer")
    return max(1, int(value))


def handle_message(raw: str, service: SearchService) -> dict:
    """Answer one client message; errors become an ``error`` message."""
    try:
        data = json.loads(raw)
        message_type = data.get("type")

        if message_type == "search":
            query = data.get("query") or ""
            try:
                limit = search_limit(data.get("limit"))
            except (TypeError, ValueError):
                return ErrorMessage(message="limit must be an integer").model_dump(mode="json")
            results = service.search(query, limit) if query.strip() else []
            logger.info(f"Realtime search {query!r}: {len(results)} results")
            return SearchResultMessage(
                results=results, query=query, count=len(results)
            ).model_dump(mode="json")

        if message_type == "suggest":
            partial = data.get("partial") or ""
            suggestions = service.suggest(partial) if partial else []
            return SuggestionsMessage(
                suggestions=suggestions, partial=partial
            ).model_dump(mode="json")

        logger.warning(f"Unknown message type: {message_type!r}")
        return ErrorMessage(
            message=f"Unknown message type: {message_type}"
        ).model_dump(mode="json")
    except Exception as e:
        logger.error(f"Error handling websocket message: {e}")
        return ErrorMessage().model_dump(mode="json")


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    service: SearchService = Depends(get_search_service),
) -> None:
    """Realtime search; alert notifications are broadcast on the same socket."""
    await manager.connect(websocket)
    try:
        await websocket.send_json(ConnectionMessage().model_dump(mode="json"))
        while True:
            raw = await websocket.receive_text()
            await websocket.send_json(handle_message(raw, service))
    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception as e:
        logger.error(f"WebSocket error: {e}")
        manager.disconnect(websocket)
