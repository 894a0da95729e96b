"""
Analysis Service Implementation

Runs the engine end to end for one series:

    indicators -> structure -> signals -> score -> recommendation

Pure function of its inputs. No clock, no randomness, no shared state.
"""

import logging
from typing import Optional

from app.schemas.analysis import AnalysisRequest, AnalysisResult
from app.schemas.market import SymbolData
from app.services.analysis.interface import AnalysisServiceInterface
from app.services.analysis.registry import WeightTableRegistry, get_table_registry
from app.services.base import ValidationError, require_bars
from app.services.indicators.service import IndicatorService, OHLCVData, get_indicator_service
from app.services.recommendation.engine import RecommendationContext, recommend
from app.services.scoring.engine import build_features, derive_signals, score
from app.services.scoring.weights import WeightTable
from app.services.structure.service import StructureService

logger = logging.getLogger(__name__)

# Indicator summary (OBV/AD trends, Fibonacci) needs 20 bars; each variant
# may ask for more through its table's min_bars
MIN_ANALYSIS_BARS = 20


class AnalysisService(AnalysisServiceInterface):
    """Full engine run for one instrument."""

    def __init__(
        self,
        indicator_service: Optional[IndicatorService] = None,
        structure_service: Optional[StructureService] = None,
        tables: Optional[WeightTableRegistry] = None,
    ):
        self._indicators = indicator_service or get_indicator_service()
        self._structure = structure_service or StructureService()
        self._tables = tables or get_table_registry()

    async def execute(self, input_data: AnalysisRequest) -> AnalysisResult:
        return self.analyze(input_data.symbol_data, input_data.variant)

    def resolve_table(self, variant: str) -> WeightTable:
        """Weight table for a variant. Raises ValidationError when unknown."""
        try:
            return self._tables.get(variant)
        except KeyError as e:
            raise ValidationError(self.name, str(e.args[0]), {"variant": variant}) from None

    def analyze(self, symbol_data: SymbolData, variant: str = "accumulation") -> AnalysisResult:
        table = self.resolve_table(variant)

        bars = len(symbol_data.ohlcv)
        require_bars("Analysis", bars, max(MIN_ANALYSIS_BARS, table.min_bars))

        data = OHLCVData.from_candles(symbol_data.ohlcv)
        timestamps = [c.timestamp for c in symbol_data.ohlcv]

        indicators = self._indicators.summarize(data)
        structure = self._structure.classify(data, timestamps)
        signals = derive_signals(indicators, structure)
        result_score = score(build_features(indicators, structure, signals), table)
        recommendation = recommend(RecommendationContext.from_analysis(indicators, signals))

        logger.debug(
            f"{symbol_data.symbol}: {table.name} score {result_score.value} "
            f"(raw {result_score.raw_value}), {recommendation.action.value} "
            f"via {recommendation.strategy}"
        )

        return AnalysisResult(
            symbol=symbol_data.symbol,
            name=symbol_data.display_name,
            as_of=timestamps[-1],
            bars_analyzed=bars,
            indicators=indicators,
            structure=structure,
            signals=signals,
            score=result_score,
            recommendation=recommendation,
        )

    async def health_check(self) -> bool:
        return await self._indicators.health_check() and await self._structure.health_check()


# Singleton instance
_service_instance: Optional[AnalysisService] = None


def get_analysis_service() -> AnalysisService:
    """Get or create analysis service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AnalysisService()
    return _service_instance
