"""
Structure Classifier Service

Detects consolidation, classifies accumulation phase and volume profile.
"""

from app.services.structure.classifier import (
    detect_consolidation,
    classify_phase,
    analyze_volume_profile,
)
from app.services.structure.service import StructureService

__all__ = [
    "StructureService",
    "detect_consolidation",
    "classify_phase",
    "analyze_volume_profile",
]
