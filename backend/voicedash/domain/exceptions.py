"""
Pipeline Exceptions
Errors raised on the synchronous webhook path and mapped to HTTP status codes
"""
from typing import Optional


class PipelineError(Exception):
    """Base class for call event pipeline errors"""

    status_code: int = 500

    def __init__(self, message: str, webhook_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.webhook_id = webhook_id


class WebhookNotFoundError(PipelineError):
    """Webhook identifier is unknown or inactive"""

    status_code = 404


class MalformedPayloadError(PipelineError):
    """Webhook body could not be parsed as a JSON object"""

    status_code = 400


class IngestionError(PipelineError):
    """Persisting a terminal call event failed"""

    status_code = 500
