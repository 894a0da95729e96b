"""
CONTRACT 4: Scoring, Recommendation and Screening

Input: IndicatorSummary + StructureAnalysis
Output: AnalysisResult (per instrument), ScreeningResponse (per universe)

All models are plain data with no behavior, suitable for direct JSON
transmission.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.indicators import IndicatorSummary
from app.schemas.market import SymbolData
from app.schemas.structure import StructureAnalysis


# =============================================================================
# ENUMS
# =============================================================================


class TradeAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class ConfidenceLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# =============================================================================
# SIGNALS & SCORE
# =============================================================================


class SignalSet(BaseModel):
    """Named boolean signals derived from indicators and structure."""

    model_config = ConfigDict(frozen=True)

    # Accumulation signals
    volume_divergence: bool = False
    price_consolidation: bool = False
    smart_money_flow: bool = False
    wyckoff_accumulation: bool = False
    high_volume_at_support: bool = False

    # Screening signals
    oversold: bool = False
    overbought: bool = False
    volume_spike: bool = False
    breakout_candidate: bool = False
    near_support: bool = False
    near_resistance: bool = False


class Score(BaseModel):
    """
    Composite score.

    value = clamp(baseline + sum(matched weights), floor, ceiling)
    raw_value is the unclamped sum.
    """

    model_config = ConfigDict(frozen=True)

    value: int
    raw_value: int
    variant: str
    reasoning: list[str] = Field(default_factory=list)


# =============================================================================
# RECOMMENDATION
# =============================================================================


class TradingRecommendation(BaseModel):
    """Concrete trade plan. HOLD plans carry the current price at every level."""

    model_config = ConfigDict(frozen=True)

    action: TradeAction
    entry_price: float
    stop_loss: float
    take_profit_1: float
    take_profit_2: float
    risk_reward_ratio: float = Field(..., ge=0)
    max_holding_days: int = Field(..., ge=0)
    confidence: ConfidenceLevel
    strategy: str
    reasoning: list[str] = Field(default_factory=list)


# =============================================================================
# INPUT: AnalysisRequest
# =============================================================================


class AnalysisRequest(BaseModel):
    """One series plus the scoring variant to apply."""

    model_config = ConfigDict(frozen=True)

    symbol_data: SymbolData
    variant: str = "accumulation"


# =============================================================================
# OUTPUT: AnalysisResult
# =============================================================================


class AnalysisResult(BaseModel):
    """
    Full engine output for one instrument.
    Returned by: Analysis Service
    Consumed by: Screening Pipeline, API
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    as_of: datetime = Field(..., description="Timestamp of the latest bar")
    bars_analyzed: int
    indicators: IndicatorSummary
    structure: StructureAnalysis
    signals: SignalSet
    score: Score
    recommendation: TradingRecommendation


# =============================================================================
# SCREENING
# =============================================================================


class ScreeningConfig(BaseModel):
    """Orchestrator configuration. Not consumed by the engine."""

    model_config = ConfigDict(frozen=True)

    universe: list[str] = Field(..., min_length=1)
    variant: str = "accumulation"
    min_score: int = Field(default=60, ge=0)
    limit: int = Field(default=15, ge=1)
    min_price: Optional[float] = Field(default=None, ge=0)
    max_price: Optional[float] = Field(default=None, ge=0)
    exclude: list[str] = Field(default_factory=list)


class ScreeningResponse(BaseModel):
    total_screened: int
    candidates_found: int
    criteria: ScreeningConfig
    results: list[AnalysisResult]
    skipped: list[str] = Field(
        default_factory=list,
        description="Symbols dropped for missing or insufficient data",
    )
    timestamp: datetime
