"""Configuration management using python-dotenv."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


class ClickHouseConfig:
    """ClickHouse connection configuration."""
    HOST: str = os.getenv("CLICKHOUSE_HOST", "localhost")
    PORT: int = int(os.getenv("CLICKHOUSE_PORT", "9000"))
    DATABASE: str = os.getenv("CLICKHOUSE_DB", "stockweather")
    USER: str = os.getenv("CLICKHOUSE_USER", "default")
    PASSWORD: str = os.getenv("CLICKHOUSE_PASSWORD", "")


class DartConfig:
    """DART OpenAPI (disclosure source) configuration."""
    API_KEY: str = os.getenv("DART_API_KEY", "")
    BASE_URL: str = os.getenv("DART_BASE_URL", "https://opendart.fss.or.kr/api")
    VIEWER_URL: str = "https://dart.fss.or.kr/dsaf001/main.do"
    LOOKBACK_DAYS: int = int(os.getenv("DART_LOOKBACK_DAYS", "30"))
    PAGE_SIZE: int = int(os.getenv("DART_PAGE_SIZE", "100"))
    # Y = KOSPI, K = KOSDAQ, N = KONEX, E = other
    CORP_CLS: str = os.getenv("DART_CORP_CLS", "Y")
    TIMEOUT_SECONDS: float = float(os.getenv("DART_TIMEOUT_SECONDS", "10"))
    CACHE_TTL_SECONDS: int = int(os.getenv("DART_CACHE_TTL_SECONDS", "300"))


class AppConfig:
    """Application configuration."""
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    BACKEND_URL: str = os.getenv("BACKEND_URL", "http://localhost:8000")
    CATALOG_CACHE_TTL_SECONDS: int = int(os.getenv("CATALOG_CACHE_TTL_SECONDS", "600"))
    CATALOG_SYNC_HOURS: str = os.getenv("CATALOG_SYNC_HOURS", "6")
    ALERT_CHECK_MINUTES: int = int(os.getenv("ALERT_CHECK_MINUTES", "10"))


# Singleton instances
clickhouse_config = ClickHouseConfig()
dart_config = DartConfig()
app_config = AppConfig()
