"""
Mock Data Generator

Generates realistic mock market data for development and testing.
Every symbol is seeded from its own name, so a symbol always yields the
same series.
"""

import random
import zlib
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.schemas.market import OHLCV, SymbolData, Timeframe
from app.services.data_ingestion.interface import SeriesProvider


# Base prices for common symbols
SYMBOL_BASE_PRICES = {
    "AAPL": 190.0,
    "MSFT": 410.0,
    "GOOGL": 150.0,
    "AMZN": 180.0,
    "NVDA": 880.0,
    "TSLA": 175.0,
    "META": 490.0,
    "AMD": 160.0,
    "SPY": 520.0,
    "QQQ": 440.0,
}

TIMEFRAME_STEP = {
    Timeframe.H1: timedelta(hours=1),
    Timeframe.D1: timedelta(days=1),
    Timeframe.W1: timedelta(weeks=1),
}

# Series end here rather than at wall-clock time
MOCK_END_TIME = datetime(2024, 6, 28, 20, 0, tzinfo=timezone.utc)


def symbol_seed(symbol: str) -> int:
    return zlib.crc32(symbol.upper().encode("utf-8"))


def get_base_price(symbol: str, rng: random.Random) -> float:
    """Get base price for a symbol."""
    return SYMBOL_BASE_PRICES.get(symbol.upper(), 20.0 + rng.random() * 380.0)


def generate_mock_ohlcv(
    symbol: str,
    timeframe: Timeframe = Timeframe.D1,
    lookback: int = 90,
    end_time: Optional[datetime] = None,
) -> list[OHLCV]:
    """Generate mock OHLCV candles as a seeded random walk."""
    rng = random.Random(symbol_seed(symbol))
    end_time = end_time or MOCK_END_TIME
    step = TIMEFRAME_STEP[timeframe]

    price = get_base_price(symbol, rng)
    drift = rng.uniform(-0.003, 0.003)
    daily_vol = rng.uniform(0.01, 0.04)
    base_volume = rng.randint(500_000, 20_000_000)

    candles = []
    timestamp = end_time - step * (lookback - 1)

    for _ in range(lookback):
        change = rng.gauss(drift, daily_vol)

        open_price = price
        close_price = max(open_price * (1 + change), 0.5)
        high_price = max(open_price, close_price) * (1 + rng.random() * daily_vol * 0.5)
        low_price = min(open_price, close_price) * (1 - rng.random() * daily_vol * 0.5)

        # Heavier volume on larger moves
        volume = base_volume * (0.5 + rng.random()) * (1 + abs(change) * 20)

        candles.append(
            OHLCV(
                timestamp=timestamp,
                open=round(open_price, 2),
                high=round(high_price, 2),
                low=round(low_price, 2),
                close=round(close_price, 2),
                volume=float(int(volume)),
            )
        )

        price = close_price
        timestamp += step

    return candles


def generate_mock_symbol_data(
    symbol: str,
    timeframe: Timeframe = Timeframe.D1,
    lookback: int = 90,
) -> SymbolData:
    """Generate complete mock symbol data."""
    return SymbolData(
        symbol=symbol.upper(),
        timeframe=timeframe,
        ohlcv=generate_mock_ohlcv(symbol, timeframe, lookback),
    )


class MockSeriesProvider(SeriesProvider):
    """Offline provider. Never fails, never touches the network."""

    @property
    def name(self) -> str:
        return "MockSeriesProvider"

    async def fetch_series(
        self,
        symbol: str,
        timeframe: Timeframe = Timeframe.D1,
        lookback: int = 90,
    ) -> Optional[SymbolData]:
        return generate_mock_symbol_data(symbol, timeframe, lookback)
