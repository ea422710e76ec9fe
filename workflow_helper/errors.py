"""
Error taxonomy for the workflow helper.

Every request-level failure is a ``WorkflowHelperError`` carrying the HTTP
status and a message that is safe to show the caller. ``detail`` holds the
private diagnostic (upstream bodies, raw model text) and is only logged.
"""

from typing import Optional


class WorkflowHelperError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(WorkflowHelperError):
    """Required input missing or out of bounds. The caller can fix and retry."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(WorkflowHelperError):
    """Unknown workflow id. The caller should restart the flow."""

    status_code = 404
    default_message = "Workflow not found. Please submit your workflow again."


class UpstreamServiceError(WorkflowHelperError):
    """Generation or email API failed, or returned something unusable."""

    status_code = 502
    default_message = "An upstream service failed. Please try again."


class StorageError(WorkflowHelperError):
    """Persistence failed. Transient; the caller may resubmit."""

    status_code = 503
    default_message = "Could not save your workflow right now. Please try again."


FETCH_FAILED_MESSAGE = "Could not load your workflow right now. Please try again."


class MalformedResponse(Exception):
    """No JSON array could be recovered from generated text."""

    def __init__(self, raw_text: str, reason: str = "no JSON array found"):
        self.raw_text = raw_text
        self.reason = reason
        super().__init__(f"Malformed model response: {reason}")


class ConfigurationError(Exception):
    """Required configuration is absent. Raised at startup, not per request."""
