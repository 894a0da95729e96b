"""
Yahoo Finance Data Adapter

Fetches REAL market data from Yahoo Finance. yfinance is blocking, so
every call runs in a worker thread off the event loop.
"""

import asyncio
import logging
from datetime import timezone
from typing import Optional

import yfinance as yf
from pydantic import ValidationError as PydanticValidationError

from app.schemas.market import OHLCV, SymbolData, Timeframe
from app.services.base import ExternalAPIError
from app.services.data_ingestion.interface import SeriesProvider

logger = logging.getLogger(__name__)


# Timeframe mapping for yfinance
TIMEFRAME_MAP = {
    Timeframe.H1: "1h",
    Timeframe.D1: "1d",
    Timeframe.W1: "1wk",
}


def choose_period(timeframe: Timeframe, lookback: int) -> str:
    """Smallest yfinance period that covers `lookback` bars."""
    if timeframe == Timeframe.H1:
        # Yahoo keeps ~730 days of hourly bars; ~7 bars per session
        return "1mo" if lookback <= 140 else "6mo" if lookback <= 800 else "2y"
    if timeframe == Timeframe.W1:
        return "5y" if lookback <= 260 else "max"
    # Daily: 252 trading days per year
    if lookback <= 120:
        return "6mo"
    if lookback <= 252:
        return "1y"
    if lookback <= 504:
        return "2y"
    if lookback <= 1260:
        return "5y"
    return "max"


def _download(symbol: str, timeframe: Timeframe, lookback: int):
    ticker = yf.Ticker(symbol)
    return ticker.history(
        period=choose_period(timeframe, lookback),
        interval=TIMEFRAME_MAP.get(timeframe, "1d"),
    )


class YahooSeriesProvider(SeriesProvider):
    """Reference provider backed by yfinance."""

    @property
    def name(self) -> str:
        return "YahooSeriesProvider"

    async def fetch_series(
        self,
        symbol: str,
        timeframe: Timeframe = Timeframe.D1,
        lookback: int = 90,
    ) -> Optional[SymbolData]:
        yahoo_symbol = symbol.upper().strip()
        logger.info(f"Fetching {yahoo_symbol} from Yahoo Finance...")

        try:
            hist = await asyncio.to_thread(_download, yahoo_symbol, timeframe, lookback)
        except Exception as e:
            raise ExternalAPIError(
                self.name, f"Yahoo Finance request failed for {yahoo_symbol}: {e}"
            ) from e

        if hist is None or hist.empty:
            logger.warning(f"No data returned for {yahoo_symbol}")
            return None

        hist = hist.dropna(subset=["Open", "High", "Low", "Close", "Volume"]).tail(lookback)

        ohlcv_list = []
        for idx, row in hist.iterrows():
            ts = idx.to_pydatetime()
            if ts.tzinfo is None:
                ts = ts.replace(tzinfo=timezone.utc)

            try:
                ohlcv_list.append(
                    OHLCV(
                        timestamp=ts,
                        open=float(row["Open"]),
                        high=float(row["High"]),
                        low=float(row["Low"]),
                        close=float(row["Close"]),
                        volume=float(row["Volume"]),
                    )
                )
            except PydanticValidationError as e:
                logger.debug(f"Dropping malformed {yahoo_symbol} bar at {ts}: {e}")

        if not ohlcv_list:
            return None

        return SymbolData(symbol=yahoo_symbol, timeframe=timeframe, ohlcv=ohlcv_list)

    async def health_check(self) -> bool:
        """Check that Yahoo answers for a liquid symbol."""
        try:
            hist = await asyncio.to_thread(_download, "SPY", Timeframe.D1, 5)
            return not hist.empty
        except Exception:
            return False
