"""
CONTRACT 1: Series Provider

Input: symbol + timeframe + lookback
Output: SymbolData

The provider fetches raw OHLCV bars from an external market-data source and
normalizes them into a chronologically ascending series. The engine consumes
these read-only.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# ENUMS
# =============================================================================


class Exchange(str, Enum):
    NASDAQ = "NASDAQ"
    NYSE = "NYSE"
    NSE = "NSE"
    BSE = "BSE"
    OTHER = "OTHER"


class Timeframe(str, Enum):
    H1 = "1h"
    D1 = "1d"
    W1 = "1w"


# =============================================================================
# SERIES
# =============================================================================


class OHLCV(BaseModel):
    """Single bar. Malformed bars are rejected here, before the engine."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    open: float = Field(..., gt=0)
    high: float = Field(..., gt=0)
    low: float = Field(..., gt=0)
    close: float = Field(..., gt=0)
    volume: float = Field(..., ge=0)

    @model_validator(mode="after")
    def check_range(self) -> "OHLCV":
        if self.high < self.low:
            raise ValueError(f"high ({self.high}) < low ({self.low})")
        return self


class SymbolData(BaseModel):
    """Complete series for a single instrument."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "symbol": "AAPL",
                "name": "Apple Inc.",
                "exchange": "NASDAQ",
                "timeframe": "1d",
                "ohlcv": [
                    {
                        "timestamp": "2024-02-05T00:00:00Z",
                        "open": 187.15,
                        "high": 189.25,
                        "low": 185.84,
                        "close": 187.68,
                        "volume": 69668800,
                    }
                ],
            }
        },
    )

    symbol: str
    name: Optional[str] = None
    exchange: Exchange = Exchange.OTHER
    timeframe: Timeframe = Timeframe.D1
    ohlcv: list[OHLCV] = Field(..., description="Bars in ascending time order")

    @model_validator(mode="after")
    def check_order(self) -> "SymbolData":
        for prev, bar in zip(self.ohlcv, self.ohlcv[1:]):
            if bar.timestamp <= prev.timestamp:
                raise ValueError(
                    f"Bars must be strictly ascending: {bar.timestamp} after {prev.timestamp}"
                )
        return self

    @property
    def current_price(self) -> float:
        return self.ohlcv[-1].close

    @property
    def display_name(self) -> str:
        return self.name or self.symbol


# =============================================================================
# INPUT: SeriesRequest
# =============================================================================


class SeriesRequest(BaseModel):
    """Request for one instrument's history from a series provider."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., min_length=1)
    timeframe: Timeframe = Timeframe.D1
    lookback: int = Field(default=90, ge=1, le=1000)
