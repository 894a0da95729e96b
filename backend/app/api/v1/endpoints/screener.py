"""
Screener API Endpoints

Screen a universe of stocks with a scoring variant.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.config import settings
from app.schemas.analysis import ScreeningConfig, ScreeningResponse
from app.services.base import ValidationError
from app.services.data_ingestion import SeriesProvider, get_series_provider, universe_for_variant
from app.services.analysis.registry import get_table_registry
from app.services.screening import ScreeningPipeline

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/tables")
async def get_scoring_tables():
    """List registered scoring variants and their rules."""
    tables = get_table_registry().list_tables()
    return {
        "count": len(tables),
        "tables": [
            {**t.model_dump(mode="json"), "max_raw_value": t.max_raw_value}
            for t in tables
        ],
    }


@router.get("/{variant}", response_model=ScreeningResponse)
async def screen(
    variant: str,
    min_score: Optional[int] = Query(None, ge=0, description="Minimum score"),
    limit: Optional[int] = Query(None, ge=1, le=100, description="Number of results"),
    symbols: Optional[str] = Query(None, description="Comma-separated symbols (default: built-in universe)"),
    exclude: Optional[str] = Query(None, description="Comma-separated symbols to skip"),
    include_etfs: bool = Query(False, description="Keep broad index ETFs in the built-in universe"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    provider: SeriesProvider = Depends(get_series_provider),
):
    """
    Screen stocks and return the highest scores.

    Example:
    - `/screener/accumulation` - Broad universe, accumulation scoring
    - `/screener/breakout?min_score=50&limit=10` - Momentum screen
    - `/screener/trend?symbols=AAPL,MSFT,NVDA`
    """
    if symbols:
        universe = [s.strip().upper() for s in symbols.split(",") if s.strip()]
    else:
        universe = universe_for_variant(variant, include_etfs)

    if not universe:
        raise HTTPException(status_code=422, detail="No symbols to screen")

    config = ScreeningConfig(
        universe=universe,
        variant=variant,
        min_score=settings.default_min_score if min_score is None else min_score,
        limit=limit or settings.default_limit,
        min_price=min_price,
        max_price=max_price,
        exclude=[s.strip().upper() for s in exclude.split(",") if s.strip()] if exclude else [],
    )

    try:
        return await ScreeningPipeline(provider=provider).run(config)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
