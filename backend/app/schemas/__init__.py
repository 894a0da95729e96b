"""
FlowScan Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from app.schemas.market import (
    Exchange,
    Timeframe,
    OHLCV,
    SymbolData,
    SeriesRequest,
)
from app.schemas.indicators import (
    OBVTrend,
    ADTrend,
    VPTTrend,
    TrendDirection,
    OnBalanceVolume,
    AccumulationDistribution,
    VolumePriceTrend,
    MovingAverages,
    FibonacciLevels,
    IndicatorSummary,
)
from app.schemas.structure import (
    MarketPhase,
    ConsolidationDescriptor,
    PhaseDescriptor,
    VolumeProfileDescriptor,
    StructureAnalysis,
)
from app.schemas.analysis import (
    TradeAction,
    ConfidenceLevel,
    SignalSet,
    Score,
    TradingRecommendation,
    AnalysisRequest,
    AnalysisResult,
    ScreeningConfig,
    ScreeningResponse,
)

__all__ = [
    # Market
    "Exchange",
    "Timeframe",
    "OHLCV",
    "SymbolData",
    "SeriesRequest",
    # Indicators
    "OBVTrend",
    "ADTrend",
    "VPTTrend",
    "TrendDirection",
    "OnBalanceVolume",
    "AccumulationDistribution",
    "VolumePriceTrend",
    "MovingAverages",
    "FibonacciLevels",
    "IndicatorSummary",
    # Structure
    "MarketPhase",
    "ConsolidationDescriptor",
    "PhaseDescriptor",
    "VolumeProfileDescriptor",
    "StructureAnalysis",
    # Analysis
    "TradeAction",
    "ConfidenceLevel",
    "SignalSet",
    "Score",
    "TradingRecommendation",
    "AnalysisRequest",
    "AnalysisResult",
    "ScreeningConfig",
    "ScreeningResponse",
]
