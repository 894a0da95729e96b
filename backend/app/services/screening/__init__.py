"""
Screening Pipeline

Runs the engine over a universe and returns the top-scoring instruments.
"""

from app.services.screening.pipeline import ScreeningPipeline

__all__ = ["ScreeningPipeline"]
