"""Disclosure business logic: normalization and caching of DART filings."""
from datetime import datetime
from typing import Callable, List, Optional
import logging
import time

from stockweather.config import dart_config
from stockweather.domain.entities import Disclosure, RawFiling
from stockweather.domain.interfaces import DisclosureSource
from stockweather.domain.scoring import classify_disclosure
from stockweather.utils.cache import TTLCache
from stockweather.utils.dates import is_recent_disclosure_date, parse_disclosure_date

logger = logging.getLogger(__name__)

# DART fills ``rm`` with single-character market/filing codes
# (유가증권, 코스닥, 코넥스, 채권, 공정위, 연결, 정정, 철회).
MARKET_CODE_TOKENS = frozenset({"유", "코", "넥", "채", "공", "연", "정", "철"})


def clean_remark(remark: Optional[str]) -> str:
    """Blank out pure market-code remarks; keep real summaries unchanged."""
    if not remark:
        return ""
    tokens = remark.split()
    if tokens and all(token in MARKET_CODE_TOKENS for token in tokens):
        return ""
    return remark.strip()


def filing_url(filing_id: Optional[str]) -> str:
    if not filing_id:
        return "https://dart.fss.or.kr"
    return f"{dart_config.VIEWER_URL}?rcpNo={filing_id}"


def normalize_filing(
    raw: RawFiling, now: Optional[datetime] = None
) -> Optional[Disclosure]:
    """Turn one raw filing into a Disclosure; None when its date is unusable."""
    submitted_at = parse_disclosure_date(raw.submitted)
    if submitted_at is None:
        logger.warning(f"Dropping filing {raw.filing_id}: unparseable date {raw.submitted!r}")
        return None
    if not is_recent_disclosure_date(submitted_at, now):
        logger.warning(
            f"Dropping filing {raw.filing_id}: date {submitted_at:%Y-%m-%d} outside window"
        )
        return None

    summary = clean_remark(raw.remark)
    return Disclosure(
        id=raw.filing_id or f"{raw.company_name}-{raw.submitted}",
        security_code=(raw.stock_code or "").strip(),
        company_name=raw.company_name,
        title=raw.title,
        category=classify_disclosure(raw.title),
        submitted_at=submitted_at,
        url=filing_url(raw.filing_id),
        summary=summary or None,
    )


def normalize_filings(
    raws: List[RawFiling], now: Optional[datetime] = None
) -> List[Disclosure]:
    disclosures = []
    for raw in raws:
        disclosure = normalize_filing(raw, now)
        if disclosure is not None:
            disclosures.append(disclosure)
    return disclosures


class DisclosureService:
    """Recent disclosures with a short TTL cache in front of the source."""

    def __init__(
        self,
        source: DisclosureSource,
        lookback_days: int = None,
        page_size: int = None,
        cache_ttl_seconds: float = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._source = source
        self._lookback_days = lookback_days or dart_config.LOOKBACK_DAYS
        self._page_size = page_size or dart_config.PAGE_SIZE
        ttl = dart_config.CACHE_TTL_SECONDS if cache_ttl_seconds is None else cache_ttl_seconds
        self._cache: TTLCache[List[Disclosure]] = TTLCache(ttl, clock=clock)

    async def get_recent_disclosures(self, limit: Optional[int] = None) -> List[Disclosure]:
        """Recent disclosures, newest first. Raises DisclosureSourceError."""
        disclosures = self._cache.get()
        if disclosures is None:
            raws = await self._source.get_recent_filings(
                self._lookback_days, self._page_size
            )
            disclosures = sorted(
                normalize_filings(raws), key=lambda d: d.submitted_at, reverse=True
            )
            self._cache.set(disclosures)
            logger.info(f"Cached {len(disclosures)} of {len(raws)} filings")
        return disclosures[:limit] if limit else list(disclosures)

    async def get_company_disclosures(self, stock_code: str, limit: int = 10) -> List[Disclosure]:
        raws = await self._source.get_company_filings(stock_code, limit)
        return normalize_filings(raws)

    def invalidate(self) -> None:
        self._cache.invalidate()
