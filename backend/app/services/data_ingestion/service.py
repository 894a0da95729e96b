"""
Data Ingestion Service Implementation

Chooses a series provider by the DATA_SOURCE setting.
Primary: Yahoo Finance (free, real data)
Fallback: Mock data (only when ENABLE_MOCK_FALLBACK is set)
"""

import logging
from typing import Optional

from app.core.config import settings
from app.schemas.market import SymbolData, Timeframe
from app.services.base import ExternalAPIError, ValidationError
from app.services.data_ingestion.interface import SeriesProvider
from app.services.data_ingestion.mock_data import MockSeriesProvider
from app.services.data_ingestion.yahoo_adapter import YahooSeriesProvider

logger = logging.getLogger(__name__)

PROVIDERS = {
    "yahoo": YahooSeriesProvider,
    "mock": MockSeriesProvider,
}


class DataIngestionService(SeriesProvider):
    """
    Data Ingestion Service.

    Delegates to the configured provider. When the primary source fails or
    has no data and mock fallback is enabled, serves mock data instead.
    """

    def __init__(
        self,
        data_source: Optional[str] = None,
        use_mock_fallback: Optional[bool] = None,
    ):
        source = (data_source or settings.data_source).lower()
        if source not in PROVIDERS:
            raise ValidationError(
                "DataIngestionService",
                f"Unknown data source '{source}'. Options: {', '.join(PROVIDERS)}",
            )
        self._source = source
        self._primary: SeriesProvider = PROVIDERS[source]()
        if use_mock_fallback is None:
            use_mock_fallback = settings.enable_mock_fallback
        self._fallback: Optional[SeriesProvider] = (
            MockSeriesProvider() if use_mock_fallback and source != "mock" else None
        )

    @property
    def name(self) -> str:
        return "DataIngestionService"

    @property
    def source(self) -> str:
        return self._source

    async def fetch_series(
        self,
        symbol: str,
        timeframe: Timeframe = Timeframe.D1,
        lookback: int = 90,
    ) -> Optional[SymbolData]:
        try:
            data = await self._primary.fetch_series(symbol, timeframe, lookback)
        except ExternalAPIError as e:
            if self._fallback is None:
                raise
            logger.warning(f"Using mock data for {symbol}: {e.message}")
            return await self._fallback.fetch_series(symbol, timeframe, lookback)

        if data is None and self._fallback is not None:
            logger.warning(f"Using mock data for {symbol} (no data from {self._primary.name})")
            return await self._fallback.fetch_series(symbol, timeframe, lookback)

        if data is not None:
            logger.debug(f"Got {len(data.ohlcv)} bars for {symbol}: {data.current_price:.2f}")
        return data

    async def health_check(self) -> bool:
        """Check connectivity to the primary source."""
        return await self._primary.health_check()


# Singleton instance
_service_instance: Optional[DataIngestionService] = None


def get_series_provider() -> DataIngestionService:
    """Get or create data ingestion service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = DataIngestionService()
    return _service_instance
