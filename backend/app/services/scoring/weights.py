"""
Scoring Weight Tables

Each scoring variant is plain data: a list of rules over named features.
Tables are immutable values passed to `score()` by the caller. New variants
are added as data (for example the JSON file named by SCORING_TABLES_PATH),
never by adding a code path.
"""

import json
import operator
from enum import Enum
from pathlib import Path
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Operator(str, Enum):
    EQ = "eq"
    GT = "gt"
    GE = "ge"
    LT = "lt"
    LE = "le"
    ABS_GT = "abs_gt"


_COMPARATORS = {
    Operator.EQ: operator.eq,
    Operator.GT: operator.gt,
    Operator.GE: operator.ge,
    Operator.LT: operator.lt,
    Operator.LE: operator.le,
    Operator.ABS_GT: lambda value, threshold: abs(value) > threshold,
}


class ScoringRule(BaseModel):
    """
    One weighted condition.

    Rules sharing a `group` are exclusive: only the first matching rule of
    the group contributes.
    """

    model_config = ConfigDict(frozen=True)

    feature: str
    op: Operator = Operator.EQ
    threshold: Union[bool, int, float, str] = True
    weight: int
    reason: str = Field(..., description="str.format template over the feature mapping")
    group: Optional[str] = None

    def matches(self, value) -> bool:
        return bool(_COMPARATORS[self.op](value, self.threshold))


class WeightTable(BaseModel):
    """A complete scoring variant."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    rules: list[ScoringRule]
    baseline: int = 0
    floor: int = 0
    ceiling: int = 100
    min_bars: int = Field(default=20, ge=1)

    @model_validator(mode="after")
    def check_bounds(self) -> "WeightTable":
        if self.floor > self.ceiling:
            raise ValueError(f"floor ({self.floor}) > ceiling ({self.ceiling})")
        return self

    @property
    def max_raw_value(self) -> int:
        """Highest reachable unclamped value (one rule per exclusive group)."""
        total = self.baseline
        best_in_group: dict[str, int] = {}
        for rule in self.rules:
            if rule.weight <= 0:
                continue
            if rule.group is None:
                total += rule.weight
            else:
                best_in_group[rule.group] = max(best_in_group.get(rule.group, 0), rule.weight)
        return total + sum(best_in_group.values())


# =============================================================================
# BUILT-IN TABLES
# =============================================================================


ACCUMULATION_TABLE = WeightTable(
    name="accumulation",
    description="Smart-money accumulation: volume flow, consolidation and Wyckoff phase",
    min_bars=30,
    rules=[
        ScoringRule(
            feature="obv_trend",
            threshold="RISING",
            weight=25,
            reason="On-Balance Volume showing rising trend indicates accumulation",
        ),
        ScoringRule(
            feature="ad_trend",
            threshold="ACCUMULATION",
            weight=20,
            reason="Accumulation/Distribution Line shows {ad_strength:.1f} strength",
        ),
        ScoringRule(
            feature="is_consolidating",
            weight=20,
            reason="Price consolidating for {consolidation_days} days with {range_tightness:.1f}% range",
        ),
        ScoringRule(
            feature="phase",
            threshold="ACCUMULATION",
            weight=25,
            reason="Wyckoff analysis indicates {phase} phase with {phase_confidence:.0f}% confidence",
        ),
        ScoringRule(
            feature="high_volume_at_lows",
            weight=15,
            reason="High volume at lower prices ({profile_volume_ratio:.1f}x ratio)",
        ),
        ScoringRule(
            feature="obv_divergence",
            weight=10,
            reason="Positive divergence between price and volume flow",
        ),
    ],
)


BREAKOUT_TABLE = WeightTable(
    name="breakout",
    description="Probability of a large move: volatility, volume, RSI extremes and momentum",
    min_bars=20,
    rules=[
        ScoringRule(
            feature="volatility",
            op=Operator.GT,
            threshold=5,
            weight=30,
            group="volatility",
            reason="High volatility ({volatility:.1f}%) indicates potential for large price movements",
        ),
        ScoringRule(
            feature="volatility",
            op=Operator.GT,
            threshold=3,
            weight=20,
            group="volatility",
            reason="Moderate volatility ({volatility:.1f}%) suggests active trading",
        ),
        ScoringRule(
            feature="volume_spike",
            weight=25,
            group="volume",
            reason="Volume spike ({volume_ratio:.1f}x normal) suggests institutional interest",
        ),
        ScoringRule(
            feature="volume_ratio",
            op=Operator.GT,
            threshold=1.5,
            weight=15,
            group="volume",
            reason="Above-average volume ({volume_ratio:.1f}x normal) indicates increased activity",
        ),
        ScoringRule(
            feature="oversold",
            weight=20,
            group="rsi",
            reason="Oversold RSI ({rsi:.1f}) suggests potential bounce",
        ),
        ScoringRule(
            feature="overbought",
            weight=20,
            group="rsi",
            reason="Overbought RSI ({rsi:.1f}) suggests potential pullback",
        ),
        ScoringRule(
            feature="near_key_level",
            weight=15,
            reason="Price near key moving average level - potential breakout or reversal",
        ),
        ScoringRule(
            feature="breakout_candidate",
            weight=20,
            reason="High volatility + volume spike = breakout candidate",
        ),
        ScoringRule(
            feature="change_percent",
            op=Operator.ABS_GT,
            threshold=3,
            weight=15,
            reason="Strong daily momentum ({change_percent:.1f}%) may continue",
        ),
    ],
)


TREND_TABLE = WeightTable(
    name="trend",
    description="Neutral-baseline trend score with penalties for stretched moves",
    baseline=50,
    min_bars=20,
    rules=[
        ScoringRule(feature="oversold", weight=15, reason="RSI indicates oversold conditions"),
        ScoringRule(feature="overbought", weight=-15, reason="RSI indicates overbought conditions"),
        ScoringRule(
            feature="volume_ratio",
            op=Operator.GT,
            threshold=1.5,
            weight=10,
            reason="Above average volume spike detected",
        ),
        ScoringRule(
            feature="ma_trend",
            threshold="BULLISH",
            weight=10,
            reason="Price above moving averages - bullish trend",
        ),
        ScoringRule(
            feature="ma_trend",
            threshold="BEARISH",
            weight=-10,
            reason="Price below moving averages - bearish trend",
        ),
        ScoringRule(
            feature="breakout_candidate",
            weight=20,
            reason="Technical patterns suggest potential breakout",
        ),
        ScoringRule(feature="near_support", weight=5, reason="Price holding just above SMA20 support"),
        ScoringRule(feature="near_resistance", weight=-5, reason="Price pressing just below resistance"),
    ],
)


# =============================================================================
# BUILT-IN TABLES
# =============================================================================


BUILTIN_TABLES: tuple[WeightTable, ...] = (ACCUMULATION_TABLE, BREAKOUT_TABLE, TREND_TABLE)


def read_tables_file(path: str) -> list[WeightTable]:
    """Parse weight tables from a JSON list. Registers nothing."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return [WeightTable.model_validate(item) for item in raw]
