"""
Recommendation Engine

A first-match decision table that turns the current signals into a trade
plan. Rows are evaluated in fixed priority order:

    1. Oversold Bounce       (BUY)
    2. Overbought Reversal   (SELL)
    3. Volume Breakout       (BUY)
    4. Support Bounce        (BUY)
    5. otherwise             HOLD
"""

from dataclasses import dataclass
from typing import Callable, Optional

from app.schemas.analysis import (
    ConfidenceLevel,
    SignalSet,
    TradeAction,
    TradingRecommendation,
)
from app.schemas.indicators import FibonacciLevels, IndicatorSummary

HIGH_VOLATILITY = 4.0


@dataclass(frozen=True)
class RecommendationContext:
    """Everything a decision-table row may look at."""

    price: float
    rsi: float
    price_vs_sma20: float
    volume_ratio: float
    volatility: float
    signals: SignalSet
    fibonacci: FibonacciLevels

    @classmethod
    def from_analysis(
        cls, indicators: IndicatorSummary, signals: SignalSet
    ) -> "RecommendationContext":
        return cls(
            price=indicators.current_price,
            rsi=indicators.rsi_14,
            price_vs_sma20=indicators.moving_averages.price_vs_sma_20,
            volume_ratio=indicators.volume_ratio,
            volatility=indicators.volatility,
            signals=signals,
            fibonacci=indicators.fibonacci,
        )

    def support(self, ratio: float) -> float:
        return self.fibonacci.support[ratio]

    def resistance(self, ratio: float) -> float:
        return self.fibonacci.resistance[ratio]


@dataclass(frozen=True)
class TradePlan:
    entry: float
    stop: float
    target_1: float
    target_2: float
    holding_days: int
    reasoning: list[str]


@dataclass(frozen=True)
class RecommendationRule:
    """One row of the decision table."""

    strategy: str
    action: TradeAction
    applies: Callable[[RecommendationContext], bool]
    plan: Callable[[RecommendationContext], TradePlan]


# =============================================================================
# LEVEL HELPERS
# =============================================================================


def _entry_below(ctx: RecommendationContext, level: float, max_pullback: float = 0.02) -> float:
    """Current price pulled toward a support level lying below it."""
    if level < ctx.price:
        return max(level, ctx.price * (1 - max_pullback))
    return ctx.price


def _entry_above(ctx: RecommendationContext, level: float, max_pullback: float = 0.02) -> float:
    """Current price pulled toward a resistance level lying above it."""
    if level > ctx.price:
        return min(level, ctx.price * (1 + max_pullback))
    return ctx.price


def _stop_below(entry: float, level: float, fallback: float, floor: Optional[float] = None) -> float:
    stop = level if level < entry else fallback
    if floor is not None:
        stop = max(stop, floor)
    return stop


def _stop_above(entry: float, level: float, fallback: float, ceiling: Optional[float] = None) -> float:
    stop = level if level > entry else fallback
    if ceiling is not None:
        stop = min(stop, ceiling)
    return stop


def _target_above(entry: float, level: float, fallback: float, cap: Optional[float] = None) -> float:
    target = level if level > entry else fallback
    if cap is not None:
        target = min(target, cap)
    return target


def _target_below(entry: float, level: float, fallback: float, floor: Optional[float] = None) -> float:
    target = level if level < entry else fallback
    if floor is not None:
        target = max(target, floor)
    return target


def _holding_days(ctx: RecommendationContext, volatile: int, calm: int) -> int:
    return volatile if ctx.volatility > HIGH_VOLATILITY else calm


# =============================================================================
# DECISION TABLE ROWS
# =============================================================================


def _plan_oversold_bounce(ctx: RecommendationContext) -> TradePlan:
    p = ctx.price
    entry = _entry_below(ctx, ctx.support(0.618))
    stop = _stop_below(entry, ctx.support(0.786), fallback=p * 0.95, floor=p * 0.95)
    target_1 = _target_above(entry, ctx.resistance(0.382), fallback=p * 1.08, cap=p * 1.08)
    target_2 = _target_above(entry, ctx.resistance(0.618), fallback=p * 1.15, cap=p * 1.15)

    return TradePlan(
        entry=entry,
        stop=stop,
        target_1=target_1,
        target_2=max(target_2, target_1),
        holding_days=_holding_days(ctx, volatile=3, calm=7),
        reasoning=[
            f"RSI at {ctx.rsi:.1f} signals oversold conditions",
            f"Price {ctx.price_vs_sma20:+.1f}% from SMA20 - not in free fall",
            f"Entry near 61.8% Fibonacci support ({ctx.support(0.618):.2f})",
            f"Stop below 78.6% support, no more than 5% under current price",
        ],
    )


def _plan_overbought_reversal(ctx: RecommendationContext) -> TradePlan:
    p = ctx.price
    entry = _entry_above(ctx, ctx.resistance(0.618))
    stop = _stop_above(entry, ctx.resistance(0.786), fallback=p * 1.05, ceiling=p * 1.05)
    target_1 = _target_below(entry, ctx.support(0.382), fallback=p * 0.92, floor=p * 0.92)
    target_2 = _target_below(entry, ctx.support(0.618), fallback=p * 0.85, floor=p * 0.85)

    return TradePlan(
        entry=entry,
        stop=stop,
        target_1=target_1,
        target_2=min(target_2, target_1),
        holding_days=_holding_days(ctx, volatile=3, calm=7),
        reasoning=[
            f"RSI at {ctx.rsi:.1f} signals overbought conditions",
            f"Price {ctx.price_vs_sma20:+.1f}% from SMA20 - not in a runaway move",
            f"Entry near 61.8% Fibonacci resistance ({ctx.resistance(0.618):.2f})",
            f"Stop above 78.6% resistance, no more than 5% over current price",
        ],
    )


def _plan_volume_breakout(ctx: RecommendationContext) -> TradePlan:
    p = ctx.price
    entry = p * 1.005
    stop = _stop_below(entry, ctx.support(0.5), fallback=p * 0.96, floor=p * 0.96)

    return TradePlan(
        entry=entry,
        stop=stop,
        target_1=entry * 1.10,
        target_2=entry * 1.18,
        holding_days=_holding_days(ctx, volatile=2, calm=5),
        reasoning=[
            f"Volume running at {ctx.volume_ratio:.1f}x average with {ctx.volatility:.1f}% volatility",
            "Entry on a 0.5% confirmation premium above current price",
            f"Stop near 50% Fibonacci support ({ctx.support(0.5):.2f}), no more than 4% under price",
            "Fixed +10% / +18% breakout targets",
        ],
    )


def _plan_support_bounce(ctx: RecommendationContext) -> TradePlan:
    p = ctx.price
    entry = _entry_below(ctx, ctx.support(0.618))
    stop = _stop_below(entry, ctx.support(0.786), fallback=p * 0.95)
    target_1 = _target_above(entry, ctx.resistance(0.382), fallback=p * 1.08)
    target_2 = _target_above(entry, ctx.resistance(0.618), fallback=p * 1.15)

    return TradePlan(
        entry=entry,
        stop=stop,
        target_1=target_1,
        target_2=max(target_2, target_1),
        holding_days=10,
        reasoning=[
            f"Price holding {ctx.price_vs_sma20:+.1f}% from SMA20 support",
            f"RSI at {ctx.rsi:.1f} leaves room to the upside",
            f"Entry near 61.8% Fibonacci support ({ctx.support(0.618):.2f})",
        ],
    )


DECISION_TABLE: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        strategy="Oversold Bounce",
        action=TradeAction.BUY,
        applies=lambda ctx: ctx.signals.oversold and ctx.price_vs_sma20 > -10,
        plan=_plan_oversold_bounce,
    ),
    RecommendationRule(
        strategy="Overbought Reversal",
        action=TradeAction.SELL,
        applies=lambda ctx: ctx.signals.overbought and ctx.price_vs_sma20 < 10,
        plan=_plan_overbought_reversal,
    ),
    RecommendationRule(
        strategy="Volume Breakout",
        action=TradeAction.BUY,
        applies=lambda ctx: ctx.signals.breakout_candidate and ctx.volume_ratio > 2,
        plan=_plan_volume_breakout,
    ),
    RecommendationRule(
        strategy="Support Bounce",
        action=TradeAction.BUY,
        applies=lambda ctx: ctx.signals.near_support and ctx.rsi < 40,
        plan=_plan_support_bounce,
    ),
)


# =============================================================================
# PUBLIC API
# =============================================================================


def risk_reward_ratio(entry: float, stop: float, target: float) -> float:
    """|target - entry| / |entry - stop|, or 0.0 when entry == stop."""
    risk = abs(entry - stop)
    if risk == 0:
        return 0.0
    return abs(target - entry) / risk


def grade_confidence(rr: float, volume_ratio: float, price_vs_sma20: float) -> ConfidenceLevel:
    if rr > 2 and volume_ratio > 1.5 and abs(price_vs_sma20) < 5:
        return ConfidenceLevel.HIGH
    if rr > 1.5 and volume_ratio > 1.2:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def recommend(
    ctx: RecommendationContext,
    table: tuple[RecommendationRule, ...] = DECISION_TABLE,
) -> TradingRecommendation:
    """Evaluate the decision table; the first matching row wins."""
    for rule in table:
        if rule.applies(ctx):
            plan = rule.plan(ctx)
            return _build(ctx, rule.action, rule.strategy, plan)

    hold = TradePlan(
        entry=ctx.price,
        stop=ctx.price,
        target_1=ctx.price,
        target_2=ctx.price,
        holding_days=0,
        reasoning=["No decision-table setup is active - wait for a clearer signal"],
    )
    return _build(ctx, TradeAction.HOLD, "No Setup", hold)


def _build(
    ctx: RecommendationContext,
    action: TradeAction,
    strategy: str,
    plan: TradePlan,
) -> TradingRecommendation:
    entry = round(plan.entry, 2)
    stop = round(plan.stop, 2)
    target_1 = round(plan.target_1, 2)
    target_2 = round(plan.target_2, 2)
    rr = round(risk_reward_ratio(entry, stop, target_1), 2)

    return TradingRecommendation(
        action=action,
        entry_price=entry,
        stop_loss=stop,
        take_profit_1=target_1,
        take_profit_2=target_2,
        risk_reward_ratio=rr,
        max_holding_days=plan.holding_days,
        confidence=grade_confidence(rr, ctx.volume_ratio, ctx.price_vs_sma20),
        strategy=strategy,
        reasoning=list(plan.reasoning),
    )
