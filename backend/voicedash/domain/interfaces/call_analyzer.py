"""
Call Analysis Interface
Abstract base class for transcript classifiers
"""
from abc import ABC, abstractmethod
from typing import Optional

from voicedash.domain.models.analysis import AnalysisResult


class CallAnalyzer(ABC):
    """Classifies a call's intent, sentiment, outcome and appointment"""

    @abstractmethod
    async def analyze(
        self,
        summary: str,
        transcript: str,
        api_key: str
    ) -> Optional[AnalysisResult]:
        """
        Analyze one call.

        Args:
            summary: Platform-provided call summary
            transcript: Full call transcript
            api_key: Tenant's analysis credential

        Returns:
            AnalysisResult, or None on any failure or unparsable response.
            Must never raise.
        """
        pass
