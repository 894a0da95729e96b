"""
Structure Detection Algorithms

Detects consolidation ranges, classifies the Wyckoff-style market phase
and measures where volume trades within the recent price range.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence
import numpy as np

from app.schemas.structure import (
    ConsolidationDescriptor,
    MarketPhase,
    PhaseDescriptor,
    VolumeProfileDescriptor,
)
from app.services.base import require_bars
from app.services.indicators.calculations import window_mean

logger = logging.getLogger(__name__)

CONSOLIDATION_WINDOW = 20
CONSOLIDATION_MAX_RANGE_PCT = 15.0
CONSOLIDATION_BAND = 0.05

PHASE_WINDOW = 20
PHASE_LOOKBACK = 30
ACCUMULATION_THRESHOLD = 40

PROFILE_WINDOW = 30
HIGH_VOLUME_AT_LOWS_RATIO = 1.2


def detect_consolidation(
    highs: np.ndarray,
    lows: np.ndarray,
    closes: np.ndarray,
    timestamps: Optional[Sequence[datetime]] = None,
) -> ConsolidationDescriptor:
    """
    Detect a consolidation range over the last 20 bars.

    Range tightness is (highest high - lowest low) / lowest low * 100 and the
    series is consolidating below 15%. Duration counts the most recent
    consecutive closes inside [lowest low * 0.95, highest high * 1.05].
    """
    require_bars("Consolidation", len(closes), CONSOLIDATION_WINDOW)

    highest_high = float(np.max(highs[-CONSOLIDATION_WINDOW:]))
    lowest_low = float(np.min(lows[-CONSOLIDATION_WINDOW:]))
    range_tightness = (highest_high - lowest_low) / lowest_low * 100

    band_low = lowest_low * (1 - CONSOLIDATION_BAND)
    band_high = highest_high * (1 + CONSOLIDATION_BAND)

    duration = 0
    for i in range(len(closes) - 1, -1, -1):
        if band_low <= closes[i] <= band_high:
            duration += 1
        else:
            break

    start = None
    if timestamps is not None and duration > 0:
        start = timestamps[len(closes) - duration]

    return ConsolidationDescriptor(
        is_consolidating=range_tightness < CONSOLIDATION_MAX_RANGE_PCT,
        range_tightness_pct=range_tightness,
        duration_bars=duration,
        support_level=lowest_low,
        resistance_level=highest_high,
        consolidation_start=start,
    )


def classify_phase(
    closes: np.ndarray,
    volumes: np.ndarray,
    lows: np.ndarray,
) -> PhaseDescriptor:
    """
    Score accumulation evidence (0-100) from four additive checks.

    - Down days on falling volume in >30% of the last 20 bars      (+30)
    - Up days on rising volume in >20% of the last 20 bars         (+20)
    - Price within 5% of 10 bars ago while volume grew >1.1x       (+25)
    - Spring: recent 5-bar low within 2% of the 30-bar low, close
      recovered more than 5% above it                              (+25)

    A score of 40 or more is labelled ACCUMULATION, anything else UNKNOWN.
    """
    require_bars("Phase classification", len(closes), PHASE_LOOKBACK)

    characteristics: list[str] = []
    score = 0

    recent_closes = closes[-PHASE_WINDOW:]
    recent_volumes = volumes[-PHASE_WINDOW:]
    down_days_low_volume = 0
    up_days_high_volume = 0

    for i in range(1, PHASE_WINDOW):
        if recent_closes[i] < recent_closes[i - 1] and recent_volumes[i] < recent_volumes[i - 1]:
            down_days_low_volume += 1
        if recent_closes[i] > recent_closes[i - 1] and recent_volumes[i] > recent_volumes[i - 1]:
            up_days_high_volume += 1

    if down_days_low_volume > PHASE_WINDOW * 0.3:
        score += 30
        characteristics.append("Declining volume on down moves")

    if up_days_high_volume > PHASE_WINDOW * 0.2:
        score += 20
        characteristics.append("Higher volume on up moves")

    # Price stability with volume increase
    price_drift = abs(closes[-1] - closes[-10]) / closes[-10]
    prior_volume = window_mean(volumes, -20, -10)
    volume_increase = window_mean(volumes, -10) / prior_volume if prior_volume > 0 else 0.0

    if price_drift < 0.05 and volume_increase > 1.1:
        score += 25
        characteristics.append("Price stability with volume increase")

    # Spring pattern (false breakdown)
    lowest_low = float(np.min(lows[-PHASE_LOOKBACK:]))
    recent_low = float(np.min(lows[-5:]))

    if recent_low <= lowest_low * 1.02 and closes[-1] > lowest_low * 1.05:
        score += 25
        characteristics.append("Spring pattern detected")

    phase = MarketPhase.ACCUMULATION if score >= ACCUMULATION_THRESHOLD else MarketPhase.UNKNOWN
    logger.debug(f"Phase score {score} -> {phase.value}")

    return PhaseDescriptor(
        phase=phase,
        confidence=score,
        characteristics=characteristics,
    )


def analyze_volume_profile(
    closes: np.ndarray,
    volumes: np.ndarray,
) -> VolumeProfileDescriptor:
    """
    Compare mean volume in the bottom and top close quartiles of the last
    30 bars. An empty top bucket counts as a mean volume of 1.
    """
    require_bars("Volume profile", len(closes), PROFILE_WINDOW)

    recent_closes = closes[-PROFILE_WINDOW:]
    recent_volumes = volumes[-PROFILE_WINDOW:]

    sorted_closes = np.sort(recent_closes)
    q1 = sorted_closes[int(len(sorted_closes) * 0.25)]
    q3 = sorted_closes[int(len(sorted_closes) * 0.75)]

    low_bucket = recent_closes <= q1
    high_bucket = (recent_closes >= q3) & ~low_bucket

    avg_at_lows = float(np.mean(recent_volumes[low_bucket])) if low_bucket.any() else 0.0
    avg_at_highs = float(np.mean(recent_volumes[high_bucket])) if high_bucket.any() else 1.0
    ratio = avg_at_lows / avg_at_highs if avg_at_highs > 0 else 0.0

    return VolumeProfileDescriptor(
        high_volume_at_lows=ratio > HIGH_VOLUME_AT_LOWS_RATIO,
        avg_volume_at_lows=avg_at_lows,
        avg_volume_at_highs=avg_at_highs,
        volume_ratio=ratio,
    )
