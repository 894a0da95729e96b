"""
Scoring Engine

Data-driven weight tables over named features. Each variant is a table,
passed in explicitly by the caller.
"""

from app.services.scoring.engine import derive_signals, build_features, score
from app.services.scoring.weights import (
    ACCUMULATION_TABLE,
    BREAKOUT_TABLE,
    BUILTIN_TABLES,
    TREND_TABLE,
    Operator,
    ScoringRule,
    WeightTable,
    read_tables_file,
)

__all__ = [
    "derive_signals",
    "build_features",
    "score",
    "ACCUMULATION_TABLE",
    "BREAKOUT_TABLE",
    "BUILTIN_TABLES",
    "TREND_TABLE",
    "Operator",
    "ScoringRule",
    "WeightTable",
    "read_tables_file",
]
