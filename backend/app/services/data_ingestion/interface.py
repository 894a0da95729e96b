"""
Series Provider Interface

Defines the contract for the market-data boundary.
"""

from abc import abstractmethod
from typing import Optional

from app.services.base import BaseService
from app.schemas.market import SeriesRequest, SymbolData, Timeframe


class SeriesProvider(BaseService[SeriesRequest, Optional[SymbolData]]):
    """
    Series Provider Contract.

    INPUT: SeriesRequest
        - symbol: Instrument identifier
        - timeframe: Bar interval
        - lookback: Number of most recent bars

    OUTPUT: SymbolData or None
        - None when the source has no data for the symbol

    Raises:
        ExternalAPIError: The source itself failed
    """

    async def execute(self, input_data: SeriesRequest) -> Optional[SymbolData]:
        return await self.fetch_series(
            input_data.symbol, input_data.timeframe, input_data.lookback
        )

    @abstractmethod
    async def fetch_series(
        self,
        symbol: str,
        timeframe: Timeframe = Timeframe.D1,
        lookback: int = 90,
    ) -> Optional[SymbolData]:
        """Fetch the most recent `lookback` bars in ascending order."""
        pass

    async def health_check(self) -> bool:
        return True
