"""
Screening Pipeline

Walks a universe of symbols, runs the engine on each, and keeps the best
scores.

Usage:
    pipeline = ScreeningPipeline()
    response = await pipeline.run(ScreeningConfig(universe=["AAPL", "MSFT"]))
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from app.core.config import settings
from app.schemas.analysis import AnalysisResult, ScreeningConfig, ScreeningResponse
from app.schemas.market import Timeframe
from app.services.analysis.service import AnalysisService
from app.services.base import (
    BaseService,
    ExternalAPIError,
    InsufficientDataError,
)
from app.services.data_ingestion.interface import SeriesProvider
from app.services.data_ingestion.service import get_series_provider

logger = logging.getLogger(__name__)


class ScreeningPipeline(BaseService[ScreeningConfig, ScreeningResponse]):
    """
    Fetches series concurrently (bounded by a semaphore), analyzes each one,
    filters by score and price band, then sorts and truncates.
    """

    def __init__(
        self,
        provider: Optional[SeriesProvider] = None,
        analysis_service: Optional[AnalysisService] = None,
        max_concurrent: Optional[int] = None,
        lookback: Optional[int] = None,
        timeframe: Timeframe = Timeframe.D1,
    ):
        self._provider = provider or get_series_provider()
        self._analysis = analysis_service or AnalysisService()
        self._max_concurrent = max_concurrent or settings.max_concurrent_fetches
        self._lookback = lookback or settings.history_lookback
        self._timeframe = timeframe

    @property
    def name(self) -> str:
        return "ScreeningPipeline"

    async def execute(self, input_data: ScreeningConfig) -> ScreeningResponse:
        return await self.run(input_data)

    async def run(self, config: ScreeningConfig) -> ScreeningResponse:
        # Fails fast on an unknown variant, before any fetch
        self._analysis.resolve_table(config.variant)

        excluded = {s.upper() for s in config.exclude}
        symbols = [s for s in dict.fromkeys(config.universe) if s.upper() not in excluded]

        logger.info(
            f"Screening {len(symbols)} symbols with '{config.variant}' "
            f"(min score {config.min_score}, limit {config.limit})"
        )

        semaphore = asyncio.Semaphore(self._max_concurrent)
        outcomes = await asyncio.gather(
            *[self._screen_symbol(symbol, config.variant, semaphore) for symbol in symbols]
        )

        analyzed: list[AnalysisResult] = []
        skipped: list[str] = []
        for symbol, result in zip(symbols, outcomes):
            if result is None:
                skipped.append(symbol)
            else:
                analyzed.append(result)

        candidates = [
            r for r in analyzed
            if r.score.value >= config.min_score and self._in_price_band(r, config)
        ]
        # sort() is stable: equal scores keep universe order
        candidates.sort(key=lambda r: r.score.value, reverse=True)
        results = candidates[: config.limit]

        logger.info(
            f"Analyzed {len(analyzed)} symbols, found {len(results)} candidates "
            f"({len(skipped)} skipped)"
        )

        return ScreeningResponse(
            total_screened=len(analyzed),
            candidates_found=len(results),
            criteria=config,
            results=results,
            skipped=skipped,
            timestamp=datetime.now(timezone.utc),
        )

    async def _screen_symbol(
        self,
        symbol: str,
        variant: str,
        semaphore: asyncio.Semaphore,
    ) -> Optional[AnalysisResult]:
        async with semaphore:
            try:
                data = await self._provider.fetch_series(symbol, self._timeframe, self._lookback)
            except ExternalAPIError as e:
                logger.warning(f"Skipping {symbol}: {e.message}")
                return None

        if data is None:
            logger.warning(f"Skipping {symbol}: no data")
            return None

        try:
            return self._analysis.analyze(data, variant)
        except InsufficientDataError as e:
            logger.warning(f"Skipping {symbol}: {e.message}")
            return None

    @staticmethod
    def _in_price_band(result: AnalysisResult, config: ScreeningConfig) -> bool:
        price = result.indicators.current_price
        if config.min_price is not None and price < config.min_price:
            return False
        if config.max_price is not None and price > config.max_price:
            return False
        return True

    async def health_check(self) -> bool:
        return await self._provider.health_check()
