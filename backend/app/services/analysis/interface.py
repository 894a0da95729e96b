"""
Analysis Service Interface

Defines the contract for the full per-instrument engine run.
"""

from abc import abstractmethod

from app.services.base import BaseService
from app.schemas.analysis import AnalysisRequest, AnalysisResult
from app.schemas.market import SymbolData


class AnalysisServiceInterface(BaseService[AnalysisRequest, AnalysisResult]):
    """
    Analysis Service Contract.

    INPUT: AnalysisRequest
        - symbol_data: SymbolData with at least 30 ascending bars
        - variant: Name of a registered scoring weight table

    OUTPUT: AnalysisResult
        - indicators, structure, signals
        - score for the requested variant
        - trading recommendation
    """

    @property
    def name(self) -> str:
        return "AnalysisService"

    @abstractmethod
    async def execute(self, input_data: AnalysisRequest) -> AnalysisResult:
        """Run the engine for one series."""
        pass

    @abstractmethod
    def analyze(self, symbol_data: SymbolData, variant: str = "accumulation") -> AnalysisResult:
        """
        Synchronous engine run.

        Raises:
            InsufficientDataError: Series shorter than the engine minimum
            ValidationError: Unknown scoring variant
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass
