"""
Technical Indicator Calculations

Pure Python/NumPy implementations of the volume and price indicators.
All math is deterministic: no clock, no randomness, no shared state.

Every guard against an undefined value is an explicit sentinel:
    - CLV when high == low              -> 0.0
    - RSI when average loss is 0        -> 100.0
    - relative change when baseline = 0 -> 0.0
"""

import numpy as np
from typing import Optional

from app.schemas.indicators import (
    FIBONACCI_RATIOS,
    ADTrend,
    OBVTrend,
    TrendDirection,
    VPTTrend,
)
from app.services.base import require_bars


OBV_TREND_THRESHOLD = 0.05
OBV_DIVERGENCE_THRESHOLD = 0.02
AD_TREND_THRESHOLD = 0.03
TREND_WINDOW = 10
DIVERGENCE_WINDOW = 20
VPT_SLOPE_WINDOW = 5
RSI_PERIOD = 14


# =============================================================================
# WINDOW HELPERS
# =============================================================================


def window_mean(values: np.ndarray, start: int, stop: Optional[int] = None) -> float:
    """
    Mean over values[start:stop].

    Negative indices count from the end, as with slicing. Slicing a NumPy
    array yields a view, so the underlying buffer is never copied.
    """
    window = values[start:stop]
    if len(window) == 0:
        return 0.0
    return float(np.mean(window))


def relative_change(current: float, baseline: float) -> float:
    """(current - baseline) / |baseline|, or 0.0 when the baseline is 0."""
    if baseline == 0:
        return 0.0
    return (current - baseline) / abs(baseline)


def recent_vs_prior(values: np.ndarray, window: int = TREND_WINDOW) -> float:
    """Relative change of mean(last `window`) against mean(prior `window`)."""
    recent = window_mean(values, -window)
    prior = window_mean(values, -2 * window, -window)
    return relative_change(recent, prior)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma_series(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average, aligned with `data` (NaN before index period-1)."""
    if len(data) < period:
        return np.full(len(data), np.nan)

    result = np.full(len(data), np.nan)
    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def sma(data: np.ndarray, period: int) -> float:
    """
    Latest SMA value.

    With fewer than `period` bars this falls back to the last value rather
    than failing.
    """
    require_bars("SMA", len(data), 1)
    if len(data) < period:
        return float(data[-1])
    return window_mean(data, -period)


def moving_average_trend(price: float, sma_20: float, sma_50: float) -> TrendDirection:
    if price > sma_20 > sma_50:
        return TrendDirection.BULLISH
    if price < sma_20 < sma_50:
        return TrendDirection.BEARISH
    return TrendDirection.SIDEWAYS


def percent_from(price: float, reference: float) -> float:
    """Percentage distance of price from reference (0.0 if reference is 0)."""
    return relative_change(price, reference) * 100


# =============================================================================
# MOMENTUM / VOLATILITY
# =============================================================================


def rsi(closes: np.ndarray, period: int = RSI_PERIOD) -> np.ndarray:
    """
    Relative Strength Index series.

    Each point averages gains and losses over the `period` deltas ending
    there, so a loss older than the window no longer counts.
    """
    if len(closes) < period + 1:
        return np.full(len(closes), np.nan)

    # Calculate price changes
    deltas = np.diff(closes)

    # Separate gains and losses
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    result = np.full(len(closes), np.nan)
    for i in range(period, len(closes)):
        avg_gain = np.mean(gains[i - period:i])
        avg_loss = np.mean(losses[i - period:i])
        result[i] = _rsi_value(avg_gain, avg_loss)

    return result


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def latest_rsi(closes: np.ndarray, period: int = RSI_PERIOD) -> float:
    """Latest RSI, clamped to [0, 100]."""
    require_bars(f"RSI({period})", len(closes), period + 1)
    value = float(rsi(closes, period)[-1])
    return min(100.0, max(0.0, value))


def daily_returns(closes: np.ndarray) -> np.ndarray:
    """Fractional close-to-close returns."""
    return np.diff(closes) / closes[:-1]


def volatility(closes: np.ndarray) -> float:
    """Population std dev of daily % returns, expressed as a percentage."""
    require_bars("Volatility", len(closes), 2)
    return float(np.std(daily_returns(closes)) * 100)


# =============================================================================
# VOLUME INDICATORS
# =============================================================================


def obv(closes: np.ndarray, volumes: np.ndarray) -> np.ndarray:
    """On-Balance Volume."""
    result = np.zeros(len(closes))
    result[0] = volumes[0]

    for i in range(1, len(closes)):
        if closes[i] > closes[i - 1]:
            result[i] = result[i - 1] + volumes[i]
        elif closes[i] < closes[i - 1]:
            result[i] = result[i - 1] - volumes[i]
        else:
            result[i] = result[i - 1]

    return result


def obv_trend(obv_values: np.ndarray) -> OBVTrend:
    """RISING / FALLING when the last-10 mean moved more than 5% from the prior 10."""
    require_bars("OBV trend", len(obv_values), 2 * TREND_WINDOW)
    change = recent_vs_prior(obv_values)

    if change > OBV_TREND_THRESHOLD:
        return OBVTrend.RISING
    if change < -OBV_TREND_THRESHOLD:
        return OBVTrend.FALLING
    return OBVTrend.NEUTRAL


def obv_divergence(closes: np.ndarray, obv_values: np.ndarray) -> bool:
    """
    Bullish divergence only: price down more than 2% over the last 20 bars
    while OBV is up more than 2%. Bearish divergence is not detected.
    """
    require_bars("OBV divergence", len(closes), DIVERGENCE_WINDOW)
    price_change = relative_change(closes[-1], closes[-DIVERGENCE_WINDOW])
    obv_change = relative_change(obv_values[-1], obv_values[-DIVERGENCE_WINDOW])

    return bool(price_change < -OBV_DIVERGENCE_THRESHOLD and obv_change > OBV_DIVERGENCE_THRESHOLD)


def close_location_value(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray
) -> np.ndarray:
    """CLV = ((close - low) - (high - close)) / (high - low); 0 on a flat bar."""
    spread = highs - lows
    numerator = (closes - lows) - (highs - closes)
    clv = np.zeros(len(closes))
    np.divide(numerator, spread, out=clv, where=spread != 0)
    return clv


def ad_line(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, volumes: np.ndarray
) -> np.ndarray:
    """Accumulation/Distribution line: running sum of CLV * volume."""
    money_flow_volume = close_location_value(highs, lows, closes) * volumes
    return np.cumsum(money_flow_volume)


def ad_trend(ad_values: np.ndarray) -> tuple[ADTrend, float]:
    """
    Returns: (trend, strength)

    strength = |relative change| * 100
    """
    require_bars("AD trend", len(ad_values), 2 * TREND_WINDOW)
    change = recent_vs_prior(ad_values)
    strength = abs(change) * 100

    if change > AD_TREND_THRESHOLD:
        return ADTrend.ACCUMULATION, strength
    if change < -AD_TREND_THRESHOLD:
        return ADTrend.DISTRIBUTION, strength
    return ADTrend.NEUTRAL, strength


def vpt(closes: np.ndarray, volumes: np.ndarray) -> np.ndarray:
    """Volume-Price Trend."""
    result = np.zeros(len(closes))
    for i in range(1, len(closes)):
        result[i] = result[i - 1] + volumes[i] * (closes[i] - closes[i - 1]) / closes[i - 1]
    return result


def vpt_trend(vpt_values: np.ndarray) -> VPTTrend:
    """Sign of the slope over the last 5 points."""
    require_bars("VPT trend", len(vpt_values), VPT_SLOPE_WINDOW)
    slope = (vpt_values[-1] - vpt_values[-VPT_SLOPE_WINDOW]) / VPT_SLOPE_WINDOW

    if slope > 0:
        return VPTTrend.POSITIVE
    if slope < 0:
        return VPTTrend.NEGATIVE
    return VPTTrend.NEUTRAL


def volume_ratio(volumes: np.ndarray) -> float:
    """Latest volume over the mean volume of the whole series."""
    require_bars("Volume ratio", len(volumes), 1)
    average = float(np.mean(volumes))
    if average == 0:
        return 0.0
    return float(volumes[-1]) / average


# =============================================================================
# SUPPORT/RESISTANCE
# =============================================================================


def fibonacci_levels(
    highs: np.ndarray,
    lows: np.ndarray,
    lookback: int = 20,
    ratios: tuple[float, ...] = FIBONACCI_RATIOS,
) -> dict:
    """
    Fibonacci retracement levels over the last `lookback` bars.

    Returns: {"swing_high", "swing_low", "support", "resistance"}
    """
    require_bars("Fibonacci levels", len(highs), lookback)
    swing_high = float(np.max(highs[-lookback:]))
    swing_low = float(np.min(lows[-lookback:]))
    diff = swing_high - swing_low

    return {
        "swing_high": swing_high,
        "swing_low": swing_low,
        "support": {r: swing_high - diff * r for r in ratios},
        "resistance": {r: swing_low + diff * r for r in ratios},
    }
