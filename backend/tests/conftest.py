"""
Shared fixtures: synthetic bars and ready-made engine models.
"""

import os

# Tests never touch the network
os.environ.setdefault("DATA_SOURCE", "mock")
os.environ.setdefault("ENABLE_MOCK_FALLBACK", "false")

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

import pytest

from app.schemas.analysis import SignalSet
from app.schemas.indicators import (
    FIBONACCI_RATIOS,
    ADTrend,
    AccumulationDistribution,
    FibonacciLevels,
    IndicatorSummary,
    MovingAverages,
    OBVTrend,
    OnBalanceVolume,
    TrendDirection,
    VolumePriceTrend,
    VPTTrend,
)
from app.schemas.market import OHLCV, SymbolData
from app.schemas.structure import (
    ConsolidationDescriptor,
    MarketPhase,
    PhaseDescriptor,
    StructureAnalysis,
    VolumeProfileDescriptor,
)
from app.services.indicators.service import OHLCVData

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_bars(
    closes: Sequence[float],
    volumes: Optional[Sequence[float]] = None,
    spread: float = 0.01,
) -> list[OHLCV]:
    """
    Daily bars opening at the previous close, with high/low `spread` beyond
    the body.
    """
    if volumes is None:
        volumes = [1000.0] * len(closes)

    bars = []
    prev = closes[0]
    for i, (close, volume) in enumerate(zip(closes, volumes)):
        open_ = prev
        bars.append(
            OHLCV(
                timestamp=START + timedelta(days=i),
                open=open_,
                high=max(open_, close) * (1 + spread),
                low=min(open_, close) * (1 - spread),
                close=close,
                volume=volume,
            )
        )
        prev = close
    return bars


def make_symbol_data(
    closes: Sequence[float],
    volumes: Optional[Sequence[float]] = None,
    symbol: str = "TEST",
    name: Optional[str] = None,
) -> SymbolData:
    return SymbolData(symbol=symbol, name=name, ohlcv=make_bars(closes, volumes))


def make_arrays(
    closes: Sequence[float],
    volumes: Optional[Sequence[float]] = None,
) -> OHLCVData:
    return OHLCVData.from_candles(make_bars(closes, volumes))


def make_fibonacci(swing_high: float = 110.0, swing_low: float = 90.0) -> FibonacciLevels:
    diff = swing_high - swing_low
    return FibonacciLevels(
        swing_high=swing_high,
        swing_low=swing_low,
        support={r: swing_high - diff * r for r in FIBONACCI_RATIOS},
        resistance={r: swing_low + diff * r for r in FIBONACCI_RATIOS},
    )


def make_indicators(
    price: float = 100.0,
    rsi: float = 50.0,
    price_vs_sma20: float = 0.0,
    volume_ratio: float = 1.0,
    volatility: float = 2.0,
    change_percent: float = 0.0,
    obv_trend: OBVTrend = OBVTrend.NEUTRAL,
    obv_divergence: bool = False,
    ad_trend: ADTrend = ADTrend.NEUTRAL,
    ma_trend: TrendDirection = TrendDirection.SIDEWAYS,
    fibonacci: Optional[FibonacciLevels] = None,
) -> IndicatorSummary:
    sma_20 = price / (1 + price_vs_sma20 / 100)
    return IndicatorSummary(
        current_price=price,
        previous_close=price,
        change=0.0,
        change_percent=change_percent,
        volume=1000.0 * volume_ratio,
        avg_volume=1000.0,
        volume_ratio=volume_ratio,
        rsi_14=rsi,
        volatility=volatility,
        obv=OnBalanceVolume(current=0.0, trend=obv_trend, divergence=obv_divergence),
        accumulation_distribution=AccumulationDistribution(current=0.0, trend=ad_trend, strength=5.0),
        volume_price_trend=VolumePriceTrend(current=0.0, trend=VPTTrend.NEUTRAL),
        moving_averages=MovingAverages(
            sma_20=sma_20,
            sma_50=sma_20,
            price_vs_sma_20=price_vs_sma20,
            price_vs_sma_50=price_vs_sma20,
            trend=ma_trend,
        ),
        fibonacci=fibonacci or make_fibonacci(),
    )


def make_structure(
    is_consolidating: bool = False,
    phase: MarketPhase = MarketPhase.UNKNOWN,
    high_volume_at_lows: bool = False,
) -> StructureAnalysis:
    return StructureAnalysis(
        consolidation=ConsolidationDescriptor(
            is_consolidating=is_consolidating,
            range_tightness_pct=8.0 if is_consolidating else 25.0,
            duration_bars=12,
            support_level=90.0,
            resistance_level=110.0,
        ),
        phase=PhaseDescriptor(
            phase=phase,
            confidence=50 if phase == MarketPhase.ACCUMULATION else 0,
        ),
        volume_profile=VolumeProfileDescriptor(
            high_volume_at_lows=high_volume_at_lows,
            avg_volume_at_lows=1500.0 if high_volume_at_lows else 1000.0,
            avg_volume_at_highs=1000.0,
            volume_ratio=1.5 if high_volume_at_lows else 1.0,
        ),
    )


@pytest.fixture
def rising_closes() -> list[float]:
    """30 bars, +1 per bar."""
    return [100.0 + i for i in range(30)]


@pytest.fixture
def no_signals() -> SignalSet:
    return SignalSet()
