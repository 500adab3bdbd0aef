"""API request/response schemas (DTOs)."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from stockweather.domain.entities import MarketWeather, SearchResult, Suggestion


# Response models
class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    timestamp: str
    database: str
    websocket_clients: int


class MarketWeatherSummaryResponse(BaseModel):
    """Market weather without the per-security list."""
    market_weather: MarketWeather
    top_stocks_count: int
    sectors_count: int
    insights: List[str]


class MessageResponse(BaseModel):
    message: str


# WebSocket message schemas
class WebSocketMessage(BaseModel):
    """Base WebSocket message."""
    type: str
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


class ConnectionMessage(WebSocketMessage):
    type: str = "connection"
    message: str = "실시간 검색 서비스에 연결되었습니다."


class SearchResultMessage(WebSocketMessage):
    """Search results for one query."""
    type: str = "searchResult"
    results: List[SearchResult]
    query: Optional[str] = None
    count: int = 0


class SuggestionsMessage(WebSocketMessage):
    type: str = "suggestions"
    suggestions: List[Suggestion]
    partial: str = ""


class ErrorMessage(WebSocketMessage):
    type: str = "error"
    message: str = "검색 처리 중 오류가 발생했습니다."


class AlertMessage(WebSocketMessage):
    """Alert notification message."""
    type: str = "alert"
    data: dict
