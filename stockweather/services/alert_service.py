"""Alert preference business logic."""
from typing import Callable, List, Optional, Sequence, Set
from datetime import datetime
from uuid import UUID, uuid4
import asyncio
import logging

from stockweather.domain.entities import (
    AlertCreate, AlertEvent, AlertType, AlertUpdate, Disclosure, Security,
    SecurityWeather, UserAlert, validate_alert_condition,
)
from stockweather.domain.exceptions import NotFoundError
from stockweather.domain.interfaces import AlertRepository, QuoteSource
from stockweather.domain.scoring import reduce_condition
from stockweather.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


def match_disclosure_alert(
    alert: UserAlert, disclosures: Sequence[Disclosure]
) -> List[Disclosure]:
    """Disclosures newer than the alert's last trigger that it asks for.

    Condition keys: ``categories`` (list of category values) and ``keyword``
    (substring of the title). Without ``stock_code`` every security matches.
    """
    categories = alert.condition.get("categories")
    keyword = alert.condition.get("keyword")
    matched = []
    for disclosure in disclosures:
        if alert.stock_code and disclosure.security_code != alert.stock_code:
            continue
        if alert.last_triggered and disclosure.submitted_at <= alert.last_triggered:
            continue
        if categories and disclosure.category.value not in categories:
            continue
        if keyword and keyword not in disclosure.title:
            continue
        matched.append(disclosure)
    return matched


def match_weather_alert(
    alert: UserAlert, stocks: Sequence[SecurityWeather]
) -> Optional[SecurityWeather]:
    """The security's weather if its reduced condition is the one requested."""
    wanted = alert.condition.get("condition")
    if not alert.stock_code or not wanted:
        return None
    for stock in stocks:
        if stock.stock_code == alert.stock_code:
            if reduce_condition(stock.condition).value == wanted:
                return stock
            return None
    return None


def match_price_alert(alert: UserAlert, price: float) -> bool:
    """``target_price`` crossed in ``direction`` ("above" or "below", default above)."""
    target = alert.condition.get("target_price")
    if target is None:
        return False
    if alert.condition.get("direction", "above") == "below":
        return price <= float(target)
    return price >= float(target)


class AlertService:
    """Alert preferences, matching and notification callbacks."""

    def __init__(
        self,
        repository: AlertRepository,
        quotes: Optional[QuoteSource] = None,
        catalog: Optional[CatalogService] = None,
    ):
        self._repository = repository
        self._quotes = quotes
        self._catalog = catalog
        self._callbacks: Set[Callable] = set()

    def list_alerts(self, user_id: str) -> List[UserAlert]:
        return self._repository.list_by_user(user_id)

    def get_alert(self, user_id: str, alert_id: UUID) -> UserAlert:
        alert = self._repository.get(alert_id)
        if alert is None or alert.user_id != user_id:
            raise NotFoundError("Alert", alert_id)
        return alert

    def create_alert(self, user_id: str, data: AlertCreate) -> UserAlert:
        now = datetime.now()
        alert = UserAlert(
            id=uuid4(),
            user_id=user_id,
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        self._repository.save(alert)
        logger.info(f"Created {alert.alert_type.value} alert {alert.id} for user {user_id}")
        return alert

    def update_alert(self, user_id: str, alert_id: UUID, data: AlertUpdate) -> UserAlert:
        alert = self.get_alert(user_id, alert_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        updated = alert.model_copy(update={**changes, "updated_at": datetime.now()})
        validate_alert_condition(updated.alert_type, updated.condition)
        self._repository.save(updated)
        return updated

    def delete_alert(self, user_id: str, alert_id: UUID) -> None:
        self.get_alert(user_id, alert_id)
        self._repository.delete(alert_id)

    def register_callback(self, callback: Callable) -> None:
        """Register alert callback."""
        self._callbacks.add(callback)

    def unregister_callback(self, callback: Callable) -> None:
        """Unregister alert callback."""
        self._callbacks.discard(callback)

    async def trigger_alert(self, event: AlertEvent) -> None:
        """Trigger all registered callbacks."""
        for callback in self._callbacks:
            try:
                if asyncio.iscoroutinefunction(callback):
                    await callback(event)
                else:
                    callback(event)
            except Exception as e:
                logger.error(f"Error in alert callback: {e}")

    def _active(self, alert_type: AlertType) -> List[UserAlert]:
        return [a for a in self._repository.list_active() if a.alert_type == alert_type]

    async def _fire(
        self, alert: UserAlert, message: str, deactivate: bool = False
    ) -> AlertEvent:
        now = datetime.now()
        event = AlertEvent(
            alert_id=alert.id,
            user_id=alert.user_id,
            alert_type=alert.alert_type,
            stock_code=alert.stock_code,
            message=message,
            timestamp=now,
        )
        self._repository.save(
            alert.model_copy(update={
                "last_triggered": now,
                "updated_at": now,
                "is_active": alert.is_active and not deactivate,
            })
        )
        await self.trigger_alert(event)
        return event

    async def _check_each(
        self, alert_type: AlertType, evaluate: Callable
    ) -> List[AlertEvent]:
        """Run ``evaluate`` on each active alert; one failing alert is logged and skipped."""
        events = []
        for alert in self._active(alert_type):
            try:
                event = await evaluate(alert)
            except Exception as e:
                logger.error(f"Error checking {alert_type.value} alert {alert.id}: {e}")
                continue
            if event is not None:
                events.append(event)
        return events

    async def check_disclosure_alerts(
        self, disclosures: Sequence[Disclosure]
    ) -> List[AlertEvent]:
        """Fire every active disclosure alert with new matching filings."""

        async def evaluate(alert: UserAlert) -> Optional[AlertEvent]:
            matched = match_disclosure_alert(alert, disclosures)
            if not matched:
                return None
            latest = max(matched, key=lambda d: d.submitted_at)
            message = f"{latest.company_name}: {latest.title}"
            if len(matched) > 1:
                message += f" 외 {len(matched) - 1}건"
            return await self._fire(alert, message)

        events = await self._check_each(AlertType.DART_DISCLOSURE, evaluate)
        if events:
            logger.info(f"Triggered {len(events)} disclosure alerts")
        return events

    async def check_weather_alerts(
        self, stocks: Sequence[SecurityWeather]
    ) -> List[AlertEvent]:
        today = datetime.now().date()

        async def evaluate(alert: UserAlert) -> Optional[AlertEvent]:
            # At most once a day per alert.
            if alert.last_triggered and alert.last_triggered.date() == today:
                return None
            stock = match_weather_alert(alert, stocks)
            if stock is None:
                return None
            message = f"{stock.company_name}의 날씨가 {stock.condition.value}입니다."
            return await self._fire(alert, message)

        return await self._check_each(AlertType.WEATHER_CONDITION, evaluate)

    async def check_price_alerts(self) -> List[AlertEvent]:
        if self._quotes is None:
            return []

        async def evaluate(alert: UserAlert) -> Optional[AlertEvent]:
            if not alert.stock_code:
                return None
            security = self._security_for(alert.stock_code)
            quote = await asyncio.to_thread(self._quotes.get_quote, security)
            if quote is None or not match_price_alert(alert, quote.price):
                return None
            message = f"{alert.stock_code} 현재가 {quote.price:,.0f}원이 목표가에 도달했습니다."
            # Price targets are one-shot.
            return await self._fire(alert, message, deactivate=True)

        return await self._check_each(AlertType.PRICE_TARGET, evaluate)

    def _security_for(self, code: str) -> Security:
        security = self._catalog.get_by_code(code) if self._catalog else None
        return security or Security(code=code, name=code)
