"""
Analysis Service

CONTRACT:
    Input:  AnalysisRequest (SymbolData + scoring variant)
    Output: AnalysisResult

RESPONSIBILITIES:
    - Summarize indicators
    - Classify market structure
    - Derive signals and score them with the selected weight table
    - Own the registry of scoring variants (name -> weight table)
    - Produce a trading recommendation

Deterministic: the same series always yields the same result.
"""

from app.services.analysis.interface import AnalysisServiceInterface
from app.services.analysis.registry import WeightTableRegistry, get_table_registry
from app.services.analysis.service import (
    AnalysisService,
    MIN_ANALYSIS_BARS,
    get_analysis_service,
)

__all__ = [
    "AnalysisServiceInterface",
    "AnalysisService",
    "MIN_ANALYSIS_BARS",
    "get_analysis_service",
    "WeightTableRegistry",
    "get_table_registry",
]
