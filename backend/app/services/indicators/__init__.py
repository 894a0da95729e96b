"""
Indicator Engine Service

CONTRACT:
    Input:  SymbolData (with OHLCV data)
    Output: IndicatorSummary

RESPONSIBILITIES:
    - Calculate cumulative volume series (OBV, AD line, VPT)
    - Classify their trends over sliding windows
    - Calculate SMA, RSI, volatility and Fibonacci retracement levels

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from app.services.indicators.service import (
    IndicatorService,
    OHLCVData,
    get_indicator_service,
)

__all__ = [
    "IndicatorService",
    "OHLCVData",
    "get_indicator_service",
]
