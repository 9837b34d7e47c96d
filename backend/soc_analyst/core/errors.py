# backend/soc_analyst/core/errors.py
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from soc_analyst.schemas.analysis import ChatMessage


class AnalysisError(Exception):
    """Base class for failures raised by the analyst conversation engine."""

    status_code: int = 500
    error: str = "Failed to analyze security events"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.error)
        self.detail = detail or self.error


class AnalysisValidationError(AnalysisError):
    """A required field (message, question) is missing or empty."""

    status_code = 400
    error = "Invalid request"


class SessionNotFoundError(AnalysisError):
    status_code = 404
    error = "Session not found"

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class AIServiceUnavailableError(AnalysisError):
    """
    The model backend has no usable credentials / endpoint.
    Raised before any model call is attempted.
    `session_id` names the session the stored user turn went to, if any.
    """

    status_code = 503
    error = "AI service unavailable"

    def __init__(self, detail: str = "", session_id: Optional[str] = None) -> None:
        super().__init__(detail)
        self.session_id = session_id


class AIBackendError(AnalysisError):
    """
    The model backend was configured but the call failed or returned
    nothing usable. In session mode `message` is the fallback assistant
    turn that was persisted in place of a real answer.
    """

    status_code = 502
    error = "Failed to analyze security events"

    def __init__(self, detail: str = "", message: Optional["ChatMessage"] = None) -> None:
        super().__init__(detail)
        self.message = message
