"""
Indicator Engine Service Implementation

Summarizes every derived series of an OHLCV series into current values
plus trend classifications. Pure Python/NumPy calculations.
"""

import logging
from dataclasses import dataclass
from typing import Optional
import numpy as np

from app.core.config import settings
from app.schemas.market import SymbolData, OHLCV
from app.schemas.indicators import (
    IndicatorSummary,
    OnBalanceVolume,
    AccumulationDistribution,
    VolumePriceTrend,
    MovingAverages,
    FibonacciLevels,
)
from app.services.base import BaseService, require_bars
from app.services.indicators.calculations import (
    sma,
    latest_rsi,
    volatility,
    obv,
    obv_trend,
    obv_divergence,
    ad_line,
    ad_trend,
    vpt,
    vpt_trend,
    volume_ratio,
    fibonacci_levels,
    moving_average_trend,
    percent_from,
)

logger = logging.getLogger(__name__)

# Longest window any summary field needs (OBV/AD trend: last 10 vs prior 10)
MIN_SUMMARY_BARS = 20


@dataclass(frozen=True)
class OHLCVData:
    """OHLCV data arrays for calculations. One owned buffer per instrument."""

    opens: np.ndarray
    highs: np.ndarray
    lows: np.ndarray
    closes: np.ndarray
    volumes: np.ndarray

    def __len__(self) -> int:
        return len(self.closes)

    @classmethod
    def from_candles(cls, candles: list[OHLCV]) -> "OHLCVData":
        """Convert OHLCV list to read-only numpy arrays."""
        arrays = [
            np.array([c.open for c in candles], dtype=float),
            np.array([c.high for c in candles], dtype=float),
            np.array([c.low for c in candles], dtype=float),
            np.array([c.close for c in candles], dtype=float),
            np.array([c.volume for c in candles], dtype=float),
        ]
        for arr in arrays:
            arr.flags.writeable = False
        return cls(*arrays)


class IndicatorService(BaseService[SymbolData, IndicatorSummary]):
    """
    Indicator Engine Service.

    Stateless: every call owns its inputs and outputs.
    """

    def __init__(self, fibonacci_lookback: Optional[int] = None):
        self._fibonacci_lookback = fibonacci_lookback or settings.fibonacci_lookback

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: SymbolData) -> IndicatorSummary:
        return self.summarize(OHLCVData.from_candles(input_data.ohlcv))

    def summarize(self, data: OHLCVData) -> IndicatorSummary:
        """Calculate the indicator summary for one series."""
        require_bars(
            "Indicator summary", len(data), max(MIN_SUMMARY_BARS, self._fibonacci_lookback)
        )

        closes, volumes = data.closes, data.volumes
        current = float(closes[-1])
        prev_close = float(closes[-2])

        obv_values = obv(closes, volumes)
        ad_values = ad_line(data.highs, data.lows, closes, volumes)
        vpt_values = vpt(closes, volumes)
        ad_direction, ad_strength = ad_trend(ad_values)

        return IndicatorSummary(
            current_price=current,
            previous_close=prev_close,
            change=current - prev_close,
            change_percent=percent_from(current, prev_close),
            volume=float(volumes[-1]),
            avg_volume=float(np.mean(volumes)),
            volume_ratio=volume_ratio(volumes),
            rsi_14=latest_rsi(closes),
            volatility=volatility(closes),
            obv=OnBalanceVolume(
                current=float(obv_values[-1]),
                trend=obv_trend(obv_values),
                divergence=obv_divergence(closes, obv_values),
            ),
            accumulation_distribution=AccumulationDistribution(
                current=float(ad_values[-1]),
                trend=ad_direction,
                strength=ad_strength,
            ),
            volume_price_trend=VolumePriceTrend(
                current=float(vpt_values[-1]),
                trend=vpt_trend(vpt_values),
            ),
            moving_averages=self._moving_averages(closes),
            fibonacci=FibonacciLevels(
                **fibonacci_levels(data.highs, data.lows, self._fibonacci_lookback)
            ),
        )

    def _moving_averages(self, closes: np.ndarray) -> MovingAverages:
        current = float(closes[-1])
        sma_20 = sma(closes, 20)
        sma_50 = sma(closes, 50)

        return MovingAverages(
            sma_20=sma_20,
            sma_50=sma_50,
            price_vs_sma_20=percent_from(current, sma_20),
            price_vs_sma_50=percent_from(current, sma_50),
            trend=moving_average_trend(current, sma_20, sma_50),
        )

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
