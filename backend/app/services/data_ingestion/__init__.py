"""
Data Ingestion Service

CONTRACT:
    Input:  SeriesRequest
    Output: SymbolData (or None when the source has no data)

RESPONSIBILITIES:
    - Fetch OHLCV history from Yahoo Finance
    - Normalize bars to the OHLCV schema, dropping malformed rows
    - Serve deterministic mock series offline
    - Provide the built-in screening universes

The engine never calls this layer; only the screening pipeline and the API do.
"""

from app.services.data_ingestion.interface import SeriesProvider
from app.services.data_ingestion.mock_data import MockSeriesProvider
from app.services.data_ingestion.service import (
    DataIngestionService,
    get_series_provider,
)
from app.services.data_ingestion.stock_list import (
    ACCUMULATION_UNIVERSE,
    ETF_SYMBOLS,
    SCREENER_UNIVERSE,
    get_universe,
    universe_for_variant,
)
from app.services.data_ingestion.yahoo_adapter import YahooSeriesProvider

__all__ = [
    "SeriesProvider",
    "MockSeriesProvider",
    "YahooSeriesProvider",
    "DataIngestionService",
    "get_series_provider",
    "ACCUMULATION_UNIVERSE",
    "ETF_SYMBOLS",
    "SCREENER_UNIVERSE",
    "get_universe",
    "universe_for_variant",
]
