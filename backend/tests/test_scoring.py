import json

import pytest

from app.schemas.indicators import ADTrend, OBVTrend
from app.schemas.structure import MarketPhase, StructureAnalysis
from app.services.analysis import WeightTableRegistry, get_table_registry
from app.services.base import ValidationError
from app.services.scoring import (
    ACCUMULATION_TABLE,
    BREAKOUT_TABLE,
    TREND_TABLE,
    Operator,
    ScoringRule,
    WeightTable,
    build_features,
    derive_signals,
    score,
)

from conftest import make_indicators, make_structure


def accumulation_features(**overrides):
    features = {
        "obv_trend": "NEUTRAL",
        "obv_divergence": False,
        "ad_trend": "NEUTRAL",
        "ad_strength": 1.0,
        "is_consolidating": False,
        "consolidation_days": 0,
        "range_tightness": 30.0,
        "phase": "UNKNOWN",
        "phase_confidence": 0,
        "high_volume_at_lows": False,
        "profile_volume_ratio": 1.0,
    }
    features.update(overrides)
    return features


def breakout_features(**overrides):
    features = {
        "volatility": 1.0,
        "volume_spike": False,
        "volume_ratio": 1.0,
        "oversold": False,
        "overbought": False,
        "rsi": 50.0,
        "near_key_level": False,
        "breakout_candidate": False,
        "change_percent": 0.0,
    }
    features.update(overrides)
    return features


# =============================================================================
# ACCUMULATION
# =============================================================================


def test_accumulation_max_is_clamped_to_100():
    features = accumulation_features(
        obv_trend="RISING",
        obv_divergence=True,
        ad_trend="ACCUMULATION",
        ad_strength=12.345,
        is_consolidating=True,
        consolidation_days=14,
        range_tightness=8.3,
        phase="ACCUMULATION",
        phase_confidence=70,
        high_volume_at_lows=True,
        profile_volume_ratio=1.6,
    )

    result = score(features, ACCUMULATION_TABLE)

    assert ACCUMULATION_TABLE.max_raw_value == 115
    assert result.raw_value == 115
    assert result.value == 100
    assert result.variant == "accumulation"
    assert result.reasoning == [
        "On-Balance Volume showing rising trend indicates accumulation",
        "Accumulation/Distribution Line shows 12.3 strength",
        "Price consolidating for 14 days with 8.3% range",
        "Wyckoff analysis indicates ACCUMULATION phase with 70% confidence",
        "High volume at lower prices (1.6x ratio)",
        "Positive divergence between price and volume flow",
    ]


def test_accumulation_nothing_matched():
    result = score(accumulation_features(), ACCUMULATION_TABLE)

    assert result.value == 0
    assert result.raw_value == 0
    assert result.reasoning == []


def test_accumulation_partial():
    result = score(
        accumulation_features(obv_trend="RISING", high_volume_at_lows=True),
        ACCUMULATION_TABLE,
    )
    assert result.value == 40


# =============================================================================
# BREAKOUT (tiered groups)
# =============================================================================


def test_breakout_groups_take_first_match_only():
    features = breakout_features(
        volatility=6.0,
        volume_spike=True,
        volume_ratio=2.5,
        oversold=True,
        rsi=25.0,
        near_key_level=True,
        breakout_candidate=True,
        change_percent=-4.0,
    )

    result = score(features, BREAKOUT_TABLE)

    assert BREAKOUT_TABLE.max_raw_value == 125
    assert result.raw_value == 125
    assert result.value == 100
    assert "High volatility (6.0%) indicates potential for large price movements" in result.reasoning
    assert not any(line.startswith("Moderate volatility") for line in result.reasoning)


def test_breakout_lower_tiers():
    result = score(breakout_features(volatility=4.0, volume_ratio=1.6), BREAKOUT_TABLE)

    assert result.value == 35
    assert result.reasoning == [
        "Moderate volatility (4.0%) suggests active trading",
        "Above-average volume (1.6x normal) indicates increased activity",
    ]


# =============================================================================
# TREND (baseline + penalties)
# =============================================================================


def test_trend_starts_at_baseline():
    features = {
        "oversold": False,
        "overbought": False,
        "volume_ratio": 1.0,
        "ma_trend": "SIDEWAYS",
        "breakout_candidate": False,
        "near_support": False,
        "near_resistance": False,
    }
    assert score(features, TREND_TABLE).value == 50

    features.update(overbought=True, ma_trend="BEARISH", near_resistance=True)
    result = score(features, TREND_TABLE)
    assert result.value == 20
    assert result.raw_value == 20


# =============================================================================
# CONTRACT
# =============================================================================


def test_negative_total_is_clamped_to_floor():
    table = WeightTable(
        name="penalty",
        rules=[ScoringRule(feature="overbought", weight=-10, reason="Overbought")],
    )

    result = score({"overbought": True}, table)

    assert result.value == 0
    assert result.raw_value == -10


def test_unknown_feature_is_rejected():
    table = WeightTable(
        name="broken",
        rules=[ScoringRule(feature="no_such_feature", weight=5, reason="x")],
    )
    with pytest.raises(ValidationError):
        score({}, table)


def test_operators():
    assert ScoringRule(feature="x", op=Operator.ABS_GT, threshold=3, weight=1, reason="").matches(-4)
    assert not ScoringRule(feature="x", op=Operator.LT, threshold=3, weight=1, reason="").matches(3)
    assert ScoringRule(feature="x", op=Operator.LE, threshold=3, weight=1, reason="").matches(3)
    assert ScoringRule(feature="x", threshold="RISING", weight=1, reason="").matches("RISING")


def test_floor_above_ceiling_rejected():
    with pytest.raises(ValueError):
        WeightTable(name="bad", rules=[], floor=50, ceiling=10)


def test_unknown_variant():
    with pytest.raises(KeyError):
        WeightTableRegistry().get("no_such_variant")


def test_tables_load_from_json(tmp_path):
    path = tmp_path / "tables.json"
    path.write_text(
        json.dumps(
            [
                {
                    "name": "volume_only",
                    "description": "Volume spikes",
                    "rules": [
                        {
                            "feature": "volume_ratio",
                            "op": "gt",
                            "threshold": 2,
                            "weight": 60,
                            "reason": "Volume {volume_ratio:.1f}x",
                        }
                    ],
                }
            ]
        )
    )

    registry = WeightTableRegistry()
    loaded = registry.load_file(str(path))

    assert [t.name for t in loaded] == ["volume_only"]
    table = registry.get("volume_only")
    result = score({"volume_ratio": 3.0}, table)
    assert result.value == 60
    assert result.reasoning == ["Volume 3.0x"]


def test_registries_do_not_share_tables():
    extra = WeightTable(
        name="extra",
        rules=[ScoringRule(feature="volume_spike", weight=10, reason="Spike")],
    )
    registry = WeightTableRegistry()

    registry.register(extra)

    assert registry.get("extra") is extra
    with pytest.raises(KeyError):
        WeightTableRegistry().get("extra")
    with pytest.raises(KeyError):
        get_table_registry().get("extra")


def test_builtin_variants_registered():
    names = [t.name for t in WeightTableRegistry().list_tables()]
    assert names == ["accumulation", "breakout", "trend"]


# =============================================================================
# SIGNALS & FEATURES
# =============================================================================


def test_derive_signals():
    indicators = make_indicators(
        rsi=25.0,
        price_vs_sma20=-3.0,
        volume_ratio=2.5,
        volatility=3.5,
        obv_divergence=True,
        ad_trend=ADTrend.ACCUMULATION,
    )
    structure = make_structure(
        is_consolidating=True,
        phase=MarketPhase.ACCUMULATION,
        high_volume_at_lows=True,
    )

    signals = derive_signals(indicators, structure)

    assert signals.oversold and not signals.overbought
    assert signals.volume_spike
    assert signals.breakout_candidate
    assert signals.near_support and not signals.near_resistance
    assert signals.volume_divergence
    assert signals.price_consolidation
    assert signals.smart_money_flow
    assert signals.wyckoff_accumulation
    assert signals.high_volume_at_support


def test_every_builtin_table_resolves_its_features():
    indicators = make_indicators(obv_trend=OBVTrend.RISING)
    structure = make_structure()
    features = build_features(indicators, structure, derive_signals(indicators, structure))

    for table in (ACCUMULATION_TABLE, BREAKOUT_TABLE, TREND_TABLE):
        result = score(features, table)
        assert table.floor <= result.value <= table.ceiling

    assert features["obv_trend"] == "RISING"
    assert features["near_key_level"] is False


def test_features_without_phase_or_profile():
    indicators = make_indicators()
    structure = StructureAnalysis(consolidation=make_structure().consolidation)

    signals = derive_signals(indicators, structure)
    features = build_features(indicators, structure, signals)

    assert signals.wyckoff_accumulation is False
    assert signals.high_volume_at_support is False
    assert features["phase"] == "UNKNOWN"
    assert features["high_volume_at_lows"] is False
    assert score(features, BREAKOUT_TABLE).value >= 0
