"""
Scoring Engine

Turns indicator and structure output into a SignalSet, a flat feature
mapping, and a clamped composite Score driven by a WeightTable.
"""

from typing import Any

from app.schemas.analysis import SignalSet, Score
from app.schemas.indicators import ADTrend, IndicatorSummary
from app.schemas.structure import MarketPhase, StructureAnalysis
from app.services.base import ValidationError
from app.services.scoring.weights import WeightTable

OVERSOLD_RSI = 30
OVERBOUGHT_RSI = 70
VOLUME_SPIKE_RATIO = 2.0
BREAKOUT_VOLATILITY = 3.0
BREAKOUT_VOLUME_RATIO = 1.5
KEY_LEVEL_DISTANCE_PCT = 5.0


def derive_signals(indicators: IndicatorSummary, structure: StructureAnalysis) -> SignalSet:
    """Map indicator and structure output to named boolean signals."""
    price_vs_sma = indicators.moving_averages.price_vs_sma_20
    phase = structure.phase
    profile = structure.volume_profile

    return SignalSet(
        volume_divergence=indicators.obv.divergence,
        price_consolidation=structure.consolidation.is_consolidating,
        smart_money_flow=indicators.accumulation_distribution.trend == ADTrend.ACCUMULATION,
        wyckoff_accumulation=phase is not None and phase.phase == MarketPhase.ACCUMULATION,
        high_volume_at_support=profile is not None and profile.high_volume_at_lows,
        oversold=indicators.rsi_14 < OVERSOLD_RSI,
        overbought=indicators.rsi_14 > OVERBOUGHT_RSI,
        volume_spike=indicators.volume_ratio > VOLUME_SPIKE_RATIO,
        breakout_candidate=(
            indicators.volatility > BREAKOUT_VOLATILITY
            and indicators.volume_ratio > BREAKOUT_VOLUME_RATIO
        ),
        near_support=-KEY_LEVEL_DISTANCE_PCT < price_vs_sma < 0,
        near_resistance=0 < price_vs_sma < KEY_LEVEL_DISTANCE_PCT,
    )


def build_features(
    indicators: IndicatorSummary,
    structure: StructureAnalysis,
    signals: SignalSet,
) -> dict[str, Any]:
    """Flat feature mapping that weight-table rules and reasons refer to."""
    phase = structure.phase
    profile = structure.volume_profile

    features: dict[str, Any] = signals.model_dump()
    features.update(
        {
            "obv_trend": indicators.obv.trend.value,
            "obv_divergence": indicators.obv.divergence,
            "ad_trend": indicators.accumulation_distribution.trend.value,
            "ad_strength": indicators.accumulation_distribution.strength,
            "vpt_trend": indicators.volume_price_trend.trend.value,
            "is_consolidating": structure.consolidation.is_consolidating,
            "consolidation_days": structure.consolidation.duration_bars,
            "range_tightness": structure.consolidation.range_tightness_pct,
            # Short series carry no phase or profile
            "phase": phase.phase.value if phase is not None else MarketPhase.UNKNOWN.value,
            "phase_confidence": phase.confidence if phase is not None else 0,
            "high_volume_at_lows": profile.high_volume_at_lows if profile is not None else False,
            "profile_volume_ratio": profile.volume_ratio if profile is not None else 0.0,
            "volatility": indicators.volatility,
            "volume_ratio": indicators.volume_ratio,
            "rsi": indicators.rsi_14,
            "price_vs_sma20": indicators.moving_averages.price_vs_sma_20,
            "ma_trend": indicators.moving_averages.trend.value,
            "change_percent": indicators.change_percent,
            "near_key_level": signals.near_support or signals.near_resistance,
        }
    )
    return features


def score(features: dict[str, Any], table: WeightTable) -> Score:
    """
    Apply a weight table.

    value = clamp(baseline + sum(weights of matched rules), floor, ceiling).
    Reasoning lines follow table order.
    """
    raw = table.baseline
    reasoning: list[str] = []
    matched_groups: set[str] = set()

    for rule in table.rules:
        if rule.group is not None and rule.group in matched_groups:
            continue
        if rule.feature not in features:
            raise ValidationError(
                "ScoringEngine",
                f"Table '{table.name}' references unknown feature '{rule.feature}'",
            )
        if not rule.matches(features[rule.feature]):
            continue

        raw += rule.weight
        reasoning.append(rule.reason.format(**features))
        if rule.group is not None:
            matched_groups.add(rule.group)

    return Score(
        value=max(table.floor, min(table.ceiling, raw)),
        raw_value=raw,
        variant=table.name,
        reasoning=reasoning,
    )
