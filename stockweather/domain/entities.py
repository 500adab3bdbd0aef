"""Domain entities - core business objects."""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class Market(str, Enum):
    """Listing venue of a security."""
    KOSPI = "KOSPI"
    KOSDAQ = "KOSDAQ"
    KONEX = "KONEX"


class DisclosureCategory(str, Enum):
    QUARTERLY = "quarterly"
    ANNUAL = "annual"
    MATERIAL = "material"
    FAIR_DISCLOSURE = "fair_disclosure"
    OTHER = "other"


class StockCondition(str, Enum):
    """Per-security weather vocabulary."""
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    DRIZZLE = "drizzle"
    RAINY = "rainy"
    WINDY = "windy"
    STORMY = "stormy"
    SNOWY = "snowy"


class MarketCondition(str, Enum):
    """Reduced weather vocabulary used for the market and for sectors."""
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    STORMY = "stormy"


class Recommendation(str, Enum):
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class AlertType(str, Enum):
    PRICE_TARGET = "price_target"
    WEATHER_CONDITION = "weather_condition"
    DART_DISCLOSURE = "dart_disclosure"


class Security(BaseModel):
    """Security master record."""
    code: str
    name: str
    name_eng: Optional[str] = None
    market: Market = Market.KOSPI
    sector: Optional[str] = None
    industry: Optional[str] = None
    market_cap: Optional[int] = None
    is_active: bool = True

    class Config:
        from_attributes = True


class RawFiling(BaseModel):
    """One row of the DART disclosure list, as returned by the API."""
    filing_id: Optional[str] = Field(default=None, alias="rcept_no")
    stock_code: Optional[str] = None
    company_name: str = Field(default="", alias="corp_name")
    title: str = Field(default="", alias="report_nm")
    submitted: Any = Field(default=None, alias="rcept_dt")
    remark: Optional[str] = Field(default=None, alias="rm")

    class Config:
        populate_by_name = True


class Disclosure(BaseModel):
    """Regulatory filing, classified and date-checked."""
    id: str
    security_code: str = ""
    company_name: str
    title: str
    category: DisclosureCategory = DisclosureCategory.OTHER
    submitted_at: datetime
    url: str
    summary: Optional[str] = None


class SecurityWeather(BaseModel):
    """Derived weather for a single security."""
    stock_code: str
    company_name: str
    condition: StockCondition
    analysis_score: int
    forecast: str
    confidence: int = Field(ge=0, le=100)
    recommendation: Recommendation
    disclosure_count: int = 0
    market_cap: Optional[int] = None
    sector: Optional[str] = None
    last_updated: datetime = Field(default_factory=datetime.now)


class MarketWeather(BaseModel):
    """Derived weather for the whole market."""
    overall: MarketCondition
    temperature: int
    humidity: int
    wind_speed: int
    pressure: int
    trend: Trend
    confidence: int
    last_updated: datetime = Field(default_factory=datetime.now)


class SectorWeather(BaseModel):
    """Derived weather for one sector."""
    sector: str
    condition: MarketCondition
    average_change: float
    stock_count: int
    top_performers: List[str] = Field(default_factory=list)
    bottom_performers: List[str] = Field(default_factory=list)


class MarketAnalysis(BaseModel):
    """Result of one market analysis pass."""
    market_weather: MarketWeather
    stocks: List[SecurityWeather] = Field(default_factory=list)
    sectors: List[SectorWeather] = Field(default_factory=list)
    insights: List[str] = Field(default_factory=list)


class SearchResult(BaseModel):
    code: str
    name: str
    market: Market
    sector: Optional[str] = None
    industry: Optional[str] = None
    market_cap: Optional[int] = None

    @classmethod
    def from_security(cls, security: Security) -> "SearchResult":
        return cls(
            code=security.code,
            name=security.name,
            market=security.market,
            sector=security.sector,
            industry=security.industry,
            market_cap=security.market_cap,
        )


class Suggestion(BaseModel):
    code: str
    name: str
    display_text: str


class Quote(BaseModel):
    """Latest quote for a security."""
    code: str
    price: float
    change: float = 0.0
    change_percent: float = 0.0
    volume: int = 0
    timestamp: datetime


class Portfolio(BaseModel):
    """User portfolio entity."""
    id: UUID
    user_id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class Holding(BaseModel):
    """A position inside a portfolio."""
    id: UUID
    portfolio_id: UUID
    stock_code: str
    stock_name: str
    shares: int
    average_price: float
    current_price: Optional[float] = None
    # User annotation, unrelated to SecurityWeather.confidence
    confidence_level: int = 50
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserAlert(BaseModel):
    """Alert preference entity."""
    id: UUID
    user_id: str
    stock_code: Optional[str] = None
    alert_type: AlertType
    condition: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    last_triggered: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class AlertEvent(BaseModel):
    """Notification produced when an alert preference matches."""
    type: str = "alert"
    alert_id: UUID
    user_id: str
    alert_type: AlertType
    stock_code: Optional[str] = None
    message: str
    timestamp: datetime


class PortfolioCreate(BaseModel):
    """DTO for creating portfolios."""
    name: str = "내 포트폴리오"
    description: Optional[str] = None


class PortfolioUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class HoldingCreate(BaseModel):
    """DTO for adding a holding to a portfolio."""
    stock_code: str
    stock_name: str
    shares: int = Field(ge=0)
    average_price: float = Field(ge=0)
    current_price: Optional[float] = None
    confidence_level: int = Field(default=50, ge=1, le=100)


class HoldingUpdate(BaseModel):
    stock_name: Optional[str] = None
    shares: Optional[int] = Field(default=None, ge=0)
    average_price: Optional[float] = Field(default=None, ge=0)
    current_price: Optional[float] = None
    confidence_level: Optional[int] = Field(default=None, ge=1, le=100)


PRICE_DIRECTIONS = ("above", "below")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_alert_condition(alert_type: AlertType, condition: Dict[str, Any]) -> None:
    """Raise ValueError unless ``condition`` has the shape ``alert_type`` expects.

    - price_target: ``target_price`` (number >= 0), optional ``direction``
    - weather_condition: ``condition``, one of the market conditions
    - dart_disclosure: optional ``categories`` (list) and ``keyword`` (str)
    """
    if alert_type == AlertType.PRICE_TARGET:
        target = condition.get("target_price")
        if not _is_number(target) or target < 0:
            raise ValueError("target_price must be a non-negative number")
        if condition.get("direction", "above") not in PRICE_DIRECTIONS:
            raise ValueError(f"direction must be one of {PRICE_DIRECTIONS}")
    elif alert_type == AlertType.WEATHER_CONDITION:
        wanted = condition.get("condition")
        if wanted not in {c.value for c in MarketCondition}:
            raise ValueError(f"condition must be one of {[c.value for c in MarketCondition]}")
    elif alert_type == AlertType.DART_DISCLOSURE:
        categories = condition.get("categories")
        if categories is not None:
            valid = {c.value for c in DisclosureCategory}
            if not isinstance(categories, list) or not all(
                isinstance(c, str) and c in valid for c in categories
            ):
                raise ValueError(f"categories must be a list of {sorted(valid)}")
        keyword = condition.get("keyword")
        if keyword is not None and not isinstance(keyword, str):
            raise ValueError("keyword must be a string")


class AlertCreate(BaseModel):
    """DTO for creating alert preferences."""
    stock_code: Optional[str] = None
    alert_type: AlertType
    condition: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True

    @model_validator(mode="after")
    def check_condition(self) -> "AlertCreate":
        validate_alert_condition(self.alert_type, self.condition)
        return self


class AlertUpdate(BaseModel):
    stock_code: Optional[str] = None
    condition: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None
