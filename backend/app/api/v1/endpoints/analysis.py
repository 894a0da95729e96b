"""
Analysis API Endpoints

Run the engine for a single instrument.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.config import settings
from app.schemas.analysis import AnalysisResult
from app.schemas.market import SymbolData, Timeframe
from app.services.analysis import AnalysisService, get_analysis_service
from app.services.base import ExternalAPIError, InsufficientDataError, ValidationError
from app.services.data_ingestion import SeriesProvider, get_series_provider

logger = logging.getLogger(__name__)

router = APIRouter()


def _run_analysis(service: AnalysisService, data: SymbolData, variant: str) -> AnalysisResult:
    try:
        return service.analyze(data, variant)
    except (InsufficientDataError, ValidationError) as e:
        raise HTTPException(status_code=422, detail=e.message)


@router.get("/{symbol}", response_model=AnalysisResult)
async def analyze_symbol(
    symbol: str,
    variant: str = Query("accumulation", description="Scoring variant: accumulation, breakout, trend"),
    lookback: Optional[int] = Query(None, ge=20, le=1000, description="Bars to fetch"),
    timeframe: Timeframe = Query(Timeframe.D1, description="Timeframe: 1h, 1d, 1w"),
    provider: SeriesProvider = Depends(get_series_provider),
    service: AnalysisService = Depends(get_analysis_service),
):
    """
    Fetch history for a symbol and analyze it.

    Example:
    - `/analysis/AAPL` - Accumulation analysis over the default lookback
    - `/analysis/TSLA?variant=breakout&lookback=120`
    """
    symbol = symbol.upper().strip()

    try:
        data = await provider.fetch_series(symbol, timeframe, lookback or settings.history_lookback)
    except ExternalAPIError as e:
        logger.error(f"Data source error for {symbol}: {e}")
        raise HTTPException(status_code=502, detail=e.message)

    if data is None:
        raise HTTPException(status_code=404, detail=f"Data not found for {symbol}")

    return _run_analysis(service, data, variant)


@router.post("", response_model=AnalysisResult)
async def analyze_series(
    symbol_data: SymbolData,
    variant: str = Query("accumulation", description="Scoring variant"),
    service: AnalysisService = Depends(get_analysis_service),
):
    """Analyze caller-supplied bars (no data source involved)."""
    return _run_analysis(service, symbol_data, variant)
