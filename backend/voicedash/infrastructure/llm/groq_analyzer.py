"""
Groq Call Analyzer
Classifies a finished call (intent, sentiment, outcome, appointment) with a
Groq-hosted model in JSON mode, using the tenant's own API key.
"""
import json
import logging
from typing import Any, Callable, Optional

from groq import AsyncGroq

from voicedash.domain.interfaces.call_analyzer import CallAnalyzer
from voicedash.domain.models.analysis import AnalysisResult

logger = logging.getLogger(__name__)


ANALYSIS_SYSTEM_PROMPT = """You are an AI that analyzes customer service call recordings. Analyze the call and respond with a JSON object containing:

REQUIRED FIELDS:
- intent: The customer's primary intent (e.g., "Scheduling", "Information", "Complaint", "Purchase", "Support")
- sentiment: The overall sentiment of the call ("Positive", "Neutral", or "Negative")
- outcome: The call outcome ("Successful", "Unsuccessful", "Follow-up Required", "Abandoned")

OPTIONAL FIELDS (extract if mentioned in the call):
- customer_name: The customer's full name (if mentioned)
- customer_email: The customer's email address (if mentioned)

APPOINTMENT FIELDS (ONLY if intent is "Scheduling" and an appointment was successfully booked):
- appointment_date: The appointment date in ISO format (YYYY-MM-DD)
- appointment_time: The appointment time in 12-hour format (e.g., "2:00 PM", "10:30 AM")
- appointment_type: Type of appointment (e.g., "Consultation", "Service Call", "Follow-up", "Installation")
- appointment_notes: Any special notes about the appointment

Only include appointment fields if an appointment was ACTUALLY SCHEDULED.

Only respond with the JSON object, no additional text."""


def _default_client_factory(api_key: str) -> AsyncGroq:
    return AsyncGroq(api_key=api_key)


class GroqCallAnalyzer(CallAnalyzer):
    """
    Groq-backed call classifier.

    A client is opened per call from the tenant's key and closed when the
    request finishes; nothing is shared across tenants.
    """

    def __init__(
        self,
        model: str = "llama-3.3-70b-versatile",
        temperature: float = 0.3,
        client_factory: Callable[[str], Any] = _default_client_factory
    ):
        self._model = model
        self._temperature = temperature
        self._client_factory = client_factory

    @staticmethod
    def build_user_prompt(summary: str, transcript: str) -> str:
        return f"Call Summary: {summary}\n\nFull Transcript:\n{transcript}"

    async def analyze(
        self,
        summary: str,
        transcript: str,
        api_key: str
    ) -> Optional[AnalysisResult]:
        try:
            async with self._client_factory(api_key) as client:
                completion = await client.chat.completions.create(
                    model=self._model,
                    messages=[
                        {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                        {"role": "user", "content": self.build_user_prompt(summary, transcript)},
                    ],
                    temperature=self._temperature,
                    response_format={"type": "json_object"},
                )
            content = completion.choices[0].message.content
        except Exception as e:
            logger.error(f"Call analysis request failed: {e}")
            return None

        return self.parse_response(content)

    @staticmethod
    def parse_response(content: Optional[str]) -> Optional[AnalysisResult]:
        """Decode the model's JSON answer; None when it is not a JSON object."""
        if not content:
            logger.warning("Call analysis returned empty content")
            return None
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Call analysis returned unparsable content: {e}")
            return None
        if not isinstance(data, dict):
            logger.warning("Call analysis returned non-object JSON")
            return None
        return AnalysisResult.from_llm_json(data)

    def __repr__(self) -> str:
        return f"GroqCallAnalyzer(model={self._model}, temp={self._temperature})"
