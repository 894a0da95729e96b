"""
Structure Classifier Service Implementation

Runs every structure detector over one series snapshot.
"""

from datetime import datetime
from typing import Optional, Sequence

from app.schemas.market import SymbolData
from app.schemas.structure import StructureAnalysis
from app.services.base import BaseService
from app.services.indicators.service import OHLCVData
from app.services.structure.classifier import (
    PHASE_LOOKBACK,
    PROFILE_WINDOW,
    detect_consolidation,
    classify_phase,
    analyze_volume_profile,
)

# Below this, only consolidation is measured
FULL_STRUCTURE_BARS = max(PHASE_LOOKBACK, PROFILE_WINDOW)


class StructureService(BaseService[SymbolData, StructureAnalysis]):
    """
    Structure Classifier.

    Needs at least 20 bars for consolidation. Phase and volume profile are
    added once 30 bars are available.
    """

    @property
    def name(self) -> str:
        return "StructureService"

    async def execute(self, input_data: SymbolData) -> StructureAnalysis:
        return self.classify(
            OHLCVData.from_candles(input_data.ohlcv),
            [c.timestamp for c in input_data.ohlcv],
        )

    def classify(
        self,
        data: OHLCVData,
        timestamps: Optional[Sequence[datetime]] = None,
    ) -> StructureAnalysis:
        consolidation = detect_consolidation(data.highs, data.lows, data.closes, timestamps)

        if len(data.closes) < FULL_STRUCTURE_BARS:
            return StructureAnalysis(consolidation=consolidation)

        return StructureAnalysis(
            consolidation=consolidation,
            phase=classify_phase(data.closes, data.volumes, data.lows),
            volume_profile=analyze_volume_profile(data.closes, data.volumes),
        )

    async def health_check(self) -> bool:
        return True
