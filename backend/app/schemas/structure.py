"""
CONTRACT 3: Structure Classifier

Input: OHLCV series (+ indicator series)
Output: ConsolidationDescriptor, PhaseDescriptor, VolumeProfileDescriptor

Heuristic market-structure labels. Computed once per series snapshot.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class MarketPhase(str, Enum):
    ACCUMULATION = "ACCUMULATION"
    MARKUP = "MARKUP"
    DISTRIBUTION = "DISTRIBUTION"
    MARKDOWN = "MARKDOWN"
    UNKNOWN = "UNKNOWN"


class ConsolidationDescriptor(BaseModel):
    """Bounded, low-range trading over the most recent 20 bars."""

    model_config = ConfigDict(frozen=True)

    is_consolidating: bool
    range_tightness_pct: float = Field(..., ge=0)
    duration_bars: int = Field(..., ge=0)
    support_level: float
    resistance_level: float
    consolidation_start: Optional[datetime] = Field(
        default=None,
        description="Timestamp of the first bar of the in-band run",
    )


class PhaseDescriptor(BaseModel):
    """Wyckoff-style phase label."""

    model_config = ConfigDict(frozen=True)

    phase: MarketPhase
    confidence: int = Field(..., ge=0, le=100)
    characteristics: list[str] = Field(default_factory=list)


class VolumeProfileDescriptor(BaseModel):
    """Volume traded at the low vs high price quartiles."""

    model_config = ConfigDict(frozen=True)

    high_volume_at_lows: bool
    avg_volume_at_lows: float = Field(..., ge=0)
    avg_volume_at_highs: float = Field(..., ge=0)
    volume_ratio: float = Field(..., ge=0)


class StructureAnalysis(BaseModel):
    """
    Structure of one series. Phase and volume profile need 30 bars and are
    None on shorter series.
    """

    model_config = ConfigDict(frozen=True)

    consolidation: ConsolidationDescriptor
    phase: Optional[PhaseDescriptor] = None
    volume_profile: Optional[VolumeProfileDescriptor] = None
