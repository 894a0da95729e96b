"""
CONTRACT 2: Indicator Engine

Input: SymbolData (OHLCV series)
Output: IndicatorSummary + FibonacciLevels

This module performs the derived-series calculations.
Pure Python/NumPy - deterministic and reproducible.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class OBVTrend(str, Enum):
    RISING = "RISING"
    FALLING = "FALLING"
    NEUTRAL = "NEUTRAL"


class ADTrend(str, Enum):
    ACCUMULATION = "ACCUMULATION"
    DISTRIBUTION = "DISTRIBUTION"
    NEUTRAL = "NEUTRAL"


class VPTTrend(str, Enum):
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"


class TrendDirection(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    SIDEWAYS = "SIDEWAYS"


FIBONACCI_RATIOS: tuple[float, ...] = (0.236, 0.382, 0.5, 0.618, 0.786)


# =============================================================================
# OUTPUT: Indicator Components
# =============================================================================


class OnBalanceVolume(BaseModel):
    """Latest OBV value with its trend classification."""

    model_config = ConfigDict(frozen=True)

    current: float
    trend: OBVTrend
    divergence: bool = Field(..., description="Price falling while OBV rising (bullish only)")


class AccumulationDistribution(BaseModel):
    """Latest AD-line value with trend and strength."""

    model_config = ConfigDict(frozen=True)

    current: float
    trend: ADTrend
    strength: float = Field(..., ge=0, description="|relative change| * 100")


class VolumePriceTrend(BaseModel):
    model_config = ConfigDict(frozen=True)

    current: float
    trend: VPTTrend


class MovingAverages(BaseModel):
    """Simple moving averages and price position relative to them."""

    model_config = ConfigDict(frozen=True)

    sma_20: float
    sma_50: float
    price_vs_sma_20: float = Field(..., description="% distance of close from SMA20")
    price_vs_sma_50: float = Field(..., description="% distance of close from SMA50")
    trend: TrendDirection


class FibonacciLevels(BaseModel):
    """
    Retracement levels over a swing range.

    support[r] = swing_high - range * r
    resistance[r] = swing_low + range * r
    """

    model_config = ConfigDict(frozen=True)

    swing_high: float
    swing_low: float
    support: dict[float, float]
    resistance: dict[float, float]


class IndicatorSummary(BaseModel):
    """
    Current value + trend enum for every derived series.
    Consumed by: Structure Classifier, Scoring Engine, Recommendation Engine
    """

    model_config = ConfigDict(frozen=True)

    current_price: float = Field(..., gt=0)
    previous_close: float = Field(..., gt=0)
    change: float
    change_percent: float
    volume: float = Field(..., ge=0)
    avg_volume: float = Field(..., ge=0)
    volume_ratio: float = Field(..., ge=0, description="Latest volume / mean volume")
    rsi_14: float = Field(..., ge=0, le=100)
    volatility: float = Field(..., ge=0, description="Std dev of daily % returns, in %")
    obv: OnBalanceVolume
    accumulation_distribution: AccumulationDistribution
    volume_price_trend: VolumePriceTrend
    moving_averages: MovingAverages
    fibonacci: FibonacciLevels
