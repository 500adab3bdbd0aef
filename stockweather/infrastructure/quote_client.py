"""Yahoo Finance quote client for KRX-listed securities."""
from typing import Optional
import logging

import yfinance as yf

from stockweather.domain.entities import Market, Quote, Security
from stockweather.domain.interfaces import QuoteSource

logger = logging.getLogger(__name__)

_SUFFIX = {
    Market.KOSPI: ".KS",
    Market.KOSDAQ: ".KQ",
    Market.KONEX: ".KS",
}


def yahoo_symbol(security: Security) -> str:
    """Yahoo ticker for a KRX code, e.g. 005930 -> 005930.KS."""
    return f"{security.code}{_SUFFIX.get(security.market, '.KS')}"


class YahooQuoteClient(QuoteSource):
    """Daily-close quotes from yfinance."""

    def __init__(self, period: str = "5d"):
        self._period = period

    def get_quote(self, security: Security) -> Optional[Quote]:
        """Latest close and day change, or None when Yahoo has no data."""
        symbol = yahoo_symbol(security)
        try:
            hist = yf.Ticker(symbol).history(period=self._period)
        except Exception as e:
            logger.error(f"Error fetching quote for {symbol}: {e}")
            return None

        if hist is None or hist.empty:
            logger.warning(f"No quote data for {symbol}")
            return None

        last = hist.iloc[-1]
        close = float(last["Close"])
        previous = float(hist.iloc[-2]["Close"]) if len(hist) > 1 else close
        change = close - previous
        change_percent = (change / previous * 100) if previous else 0.0
        return Quote(
            code=security.code,
            price=close,
            change=round(change, 2),
            change_percent=round(change_percent, 2),
            volume=int(last["Volume"]),
            timestamp=hist.index[-1].to_pydatetime().replace(tzinfo=None),
        )
