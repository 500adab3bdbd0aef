"""Realtime search websocket client with reconnection and debounced queries."""
import asyncio
import json
import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional

import websockets

from stockweather.config import app_config
from stockweather.domain.entities import SearchResult, Suggestion
from stockweather.domain.exceptions import NotConnectedError

logger = logging.getLogger(__name__)

RECONNECT_DELAY_SECONDS = 3.0
DEBOUNCE_SECONDS = 0.5


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    WAITING = "waiting"
    CLOSED = "closed"


class ReconnectStateMachine:
    """disconnected -> connecting -> open; on loss: waiting(delay) -> connecting.

    Retries never stop; only ``close()`` is terminal. With ``max_delay`` set,
    the delay grows by ``backoff`` per consecutive failure up to the cap.
    """

    def __init__(
        self,
        delay: float = RECONNECT_DELAY_SECONDS,
        backoff: float = 1.0,
        max_delay: Optional[float] = None,
    ):
        self.delay = delay
        self.backoff = backoff
        self.max_delay = max_delay
        self.state = ConnectionState.DISCONNECTED
        self.retry_at: Optional[float] = None
        self.failures = 0

    def start(self) -> bool:
        """Begin the first connection attempt."""
        if self.state != ConnectionState.DISCONNECTED:
            return False
        self.state = ConnectionState.CONNECTING
        return True

    def opened(self) -> None:
        if self.state == ConnectionState.CLOSED:
            return
        self.state = ConnectionState.OPEN
        self.retry_at = None
        self.failures = 0

    def connection_lost(self, now: float) -> None:
        if self.state == ConnectionState.CLOSED:
            return
        self.failures += 1
        self.state = ConnectionState.WAITING
        self.retry_at = now + self.next_delay()

    def next_delay(self) -> float:
        if self.max_delay is None:
            return self.delay
        grown = self.delay * (self.backoff ** max(self.failures - 1, 0))
        return min(grown, self.max_delay)

    def seconds_until_retry(self, now: float) -> float:
        if self.state != ConnectionState.WAITING or self.retry_at is None:
            return 0.0
        return max(0.0, self.retry_at - now)

    def poll(self, now: float) -> bool:
        """Move waiting -> connecting once the timer has elapsed."""
        if self.state == ConnectionState.WAITING and now >= self.retry_at:
            self.state = ConnectionState.CONNECTING
            self.retry_at = None
            return True
        return False

    def close(self) -> None:
        self.state = ConnectionState.CLOSED
        self.retry_at = None


class PendingSearch(NamedTuple):
    query: str
    limit: int


class SearchDebouncer:
    """Keeps only the latest query; it becomes due ``window`` after submission."""

    def __init__(self, window: float = DEBOUNCE_SECONDS):
        self.window = window
        self._pending: Optional[PendingSearch] = None
        self._due_at: Optional[float] = None

    @property
    def pending(self) -> Optional[PendingSearch]:
        return self._pending

    def submit(self, query: str, limit: int, now: float) -> None:
        self._pending = PendingSearch(query, limit)
        self._due_at = now + self.window

    def seconds_until_due(self, now: float) -> float:
        if self._due_at is None:
            return 0.0
        return max(0.0, self._due_at - now)

    def pop_due(self, now: float) -> Optional[PendingSearch]:
        if self._pending is None or now < self._due_at:
            return None
        pending = self._pending
        self.cancel()
        return pending

    def cancel(self) -> None:
        self._pending = None
        self._due_at = None


def default_search_url(backend_url: str = None) -> str:
    """``/ws`` endpoint of the backend, http(s) swapped for ws(s)."""
    base = (backend_url or app_config.BACKEND_URL).rstrip("/")
    if base.startswith("https://"):
        base = "wss://" + base[len("https://"):]
    elif base.startswith("http://"):
        base = "ws://" + base[len("http://"):]
    return f"{base}/ws"


class RealtimeSearchClient:
    """Client for the ``/ws`` realtime search endpoint."""

    def __init__(
        self,
        url: Optional[str] = None,
        on_results: Optional[Callable[[List[SearchResult]], None]] = None,
        on_suggestions: Optional[Callable[[List[Suggestion]], None]] = None,
        on_error: Optional[Callable[[str], None]] = None,
        reconnect: Optional[ReconnectStateMachine] = None,
        debouncer: Optional[SearchDebouncer] = None,
        clock: Callable[[], float] = time.monotonic,
        connect: Callable[..., Any] = websockets.connect,
    ):
        self._url = url or default_search_url()
        self._on_results = on_results
        self._on_suggestions = on_suggestions
        self._on_error = on_error
        self._machine = reconnect or ReconnectStateMachine()
        self._debouncer = debouncer or SearchDebouncer()
        self._clock = clock
        self._connect = connect
        self._ws = None
        self._dispatch_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ConnectionState:
        return self._machine.state

    @property
    def is_connected(self) -> bool:
        return self._machine.state == ConnectionState.OPEN and self._ws is not None

    async def run(self) -> None:
        """Connection loop; reconnects until ``close()`` is called."""
        self._machine.start()
        while self._machine.state != ConnectionState.CLOSED:
            if self._machine.state == ConnectionState.WAITING:
                await asyncio.sleep(self._machine.seconds_until_retry(self._clock()))
                if not self._machine.poll(self._clock()):
                    continue
            try:
                async with self._connect(self._url) as ws:
                    self._ws = ws
                    self._machine.opened()
                    logger.info(f"Connected to realtime search at {self._url}")
                    async for raw in ws:
                        self._handle_message(raw)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Realtime search connection error: {e}")
            finally:
                self._ws = None

            if self._machine.state != ConnectionState.CLOSED:
                self._machine.connection_lost(self._clock())
                logger.info(
                    f"Reconnecting in {self._machine.next_delay():.1f} seconds..."
                )

    async def send(self, message: Dict[str, Any]) -> None:
        if not self.is_connected:
            raise NotConnectedError("Realtime search service is not connected")
        await self._ws.send(json.dumps(message, ensure_ascii=False))

    def search(self, query: str, limit: int = 20) -> None:
        """Queue a debounced search; must be called from the event loop."""
        if not self.is_connected:
            raise NotConnectedError("Realtime search service is not connected")

        query = (query or "").strip()
        if not query:
            self._debouncer.cancel()
            self._emit(self._on_results, [])
            return

        self._debouncer.submit(query, limit, self._clock())
        if self._dispatch_task is None or self._dispatch_task.done():
            self._dispatch_task = asyncio.get_running_loop().create_task(
                self._dispatch_when_due()
            )

    async def suggest(self, partial: str) -> None:
        if not self.is_connected:
            raise NotConnectedError("Realtime search service is not connected")
        partial = (partial or "").strip()
        if not partial:
            self._emit(self._on_suggestions, [])
            return
        await self.send({"type": "suggest", "partial": partial})

    async def close(self) -> None:
        """Stop reconnecting and drop any pending search."""
        self._machine.close()
        self._debouncer.cancel()
        if self._dispatch_task is not None:
            self._dispatch_task.cancel()
            self._dispatch_task = None
        if self._ws is not None:
            await self._ws.close()

    async def _dispatch_when_due(self) -> None:
        while self._debouncer.pending is not None:
            wait = self._debouncer.seconds_until_due(self._clock())
            if wait > 0:
                await asyncio.sleep(wait)
                continue
            pending = self._debouncer.pop_due(self._clock())
            if pending is None:
                continue
            try:
                await self.send({
                    "type": "search",
                    "query": pending.query,
                    "limit": pending.limit,
                })
                logger.debug(f"Dispatched search: {pending.query!r}")
            except NotConnectedError as e:
                self._emit(self._on_error, str(e))

    def _handle_message(self, raw: str) -> None:
        try:
            message = json.loads(raw)
        except ValueError:
            logger.error(f"Invalid realtime message: {raw!r}")
            return

        kind = message.get("type")
        if kind == "searchResult":
            results = [SearchResult(**item) for item in message.get("results", [])]
            self._emit(self._on_results, results)
        elif kind == "suggestions":
            items = [Suggestion(**item) for item in message.get("suggestions", [])]
            self._emit(self._on_suggestions, items)
        elif kind == "error":
            self._emit(self._on_error, message.get("message", "검색 중 오류가 발생했습니다."))
        elif kind == "connection":
            logger.info(f"Realtime search ready: {message.get('message')}")
        else:
            logger.debug(f"Ignoring realtime message type {kind!r}")

    @staticmethod
    def _emit(callback: Optional[Callable], payload: Any) -> None:
        if callback is None:
            return
        try:
            callback(payload)
        except Exception as e:
            logger.error(f"Error in realtime search callback: {e}")
