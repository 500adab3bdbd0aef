"""DART OpenAPI client (regulatory disclosures)."""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
import logging

import httpx

from stockweather.config import dart_config
from stockweather.domain.entities import RawFiling
from stockweather.domain.exceptions import DisclosureSourceError
from stockweather.domain.interfaces import DisclosureSource
from stockweather.utils.dates import to_dart_date

logger = logging.getLogger(__name__)

STATUS_OK = "000"
STATUS_NO_DATA = "013"

# DART corp_code is required for company-scoped queries.
CORP_CODES: Dict[str, str] = {
    "005930": "00126380",  # 삼성전자
    "005380": "00164779",  # 현대차
    "373220": "00401731",  # LG에너지솔루션
    "000660": "00126217",  # SK하이닉스
    "035420": "00139717",  # NAVER
    "005490": "00164742",  # POSCO홀딩스
    "066570": "00282462",  # LG전자
    "323410": "00434456",  # 카카오뱅크
    "207940": "00356370",  # 삼성바이오로직스
    "003670": "00165570",  # 포스코퓨처엠
}


class DartClient(DisclosureSource):
    """Async client for the DART disclosure list endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        corp_cls: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key if api_key is not None else dart_config.API_KEY
        self._corp_cls = corp_cls or dart_config.CORP_CLS
        self._client = httpx.AsyncClient(
            base_url=base_url or dart_config.BASE_URL,
            timeout=timeout or dart_config.TIMEOUT_SECONDS,
            transport=transport,
        )

    async def get_recent_filings(
        self, lookback_days: int, page_size: int
    ) -> List[RawFiling]:
        """Get market filings submitted within the last ``lookback_days``."""
        end = datetime.now()
        start = end - timedelta(days=lookback_days)
        return await self._list({
            "bgn_de": to_dart_date(start),
            "end_de": to_dart_date(end),
            "corp_cls": self._corp_cls,
            "page_no": 1,
            "page_count": page_size,
        })

    async def get_company_filings(self, stock_code: str, limit: int) -> List[RawFiling]:
        """Get the latest filings of a single company."""
        corp_code = CORP_CODES.get(stock_code)
        if corp_code is None:
            logger.warning(f"No DART corp_code mapping for {stock_code}")
            return []
        filings = await self._list({
            "corp_code": corp_code,
            "page_no": 1,
            "page_count": limit,
        })
        for filing in filings:
            filing.stock_code = filing.stock_code or stock_code
        return filings

    async def _list(self, params: Dict[str, Any]) -> List[RawFiling]:
        try:
            response = await self._client.get(
                "/list.json", params={"crtfc_key": self._api_key, **params}
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DisclosureSourceError(f"DART request failed: {e}") from e

        status = data.get("status")
        if status == STATUS_NO_DATA:
            logger.info("DART returned no disclosures for the requested window")
            return []
        if status != STATUS_OK:
            raise DisclosureSourceError(
                f"DART API error {status}: {data.get('message', 'unknown')}"
            )

        items = data.get("list") or []
        logger.info(f"Fetched {len(items)} filings from DART")
        return [RawFiling.model_validate(item) for item in items]

    async def close(self) -> None:
        await self._client.aclose()
