# backend/soc_analyst/schemas/analysis.py
from typing import Annotated, List, Literal, Optional, Union
from datetime import datetime
from enum import Enum

from pydantic import Field

from soc_analyst.schemas.common import CamelModel
from soc_analyst.schemas.events import EventFilters


DEFAULT_SESSION_TITLE = "New Analysis Session"


class AnalysisMode(str, Enum):
    """Session analysis keeps history; quick analysis is one stateless turn."""
    ANALYSIS = "analysis"
    QUICK = "quick"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


class MessageContext(CamelModel):
    """Which events (and which filters) grounded a turn."""
    event_ids: List[str] = Field(default_factory=list)
    filters: Optional[EventFilters] = None


# ----------------------------------------------------------------------
# Chat messages: closed union on `role`
# ----------------------------------------------------------------------
class _ChatMessageBase(CamelModel):
    id: str
    session_id: str
    user_id: Optional[str] = None
    content: str
    timestamp: datetime
    context: Optional[MessageContext] = None


class UserMessage(_ChatMessageBase):
    role: Literal["user"] = "user"


class AssistantMessage(_ChatMessageBase):
    """Model reply. `content` is always sanitized output."""
    role: Literal["assistant"] = "assistant"
    token_count: int = 0


class SystemMessage(_ChatMessageBase):
    """Stored for audit only; never replayed to the model."""
    role: Literal["system"] = "system"


ChatMessage = Annotated[
    Union[UserMessage, AssistantMessage, SystemMessage],
    Field(discriminator="role"),
]

MESSAGE_TYPES = {
    "user": UserMessage,
    "assistant": AssistantMessage,
    "system": SystemMessage,
}


# ----------------------------------------------------------------------
# Sessions
# ----------------------------------------------------------------------
class AnalysisSession(CamelModel):
    id: str
    user_id: Optional[str] = None
    title: str
    status: str = SessionStatus.ACTIVE.value
    created_at: datetime
    updated_at: datetime


class SessionCreateRequest(CamelModel):
    title: Optional[str] = None


class SessionUpdateRequest(CamelModel):
    title: Optional[str] = None
    status: Optional[SessionStatus] = None


# ----------------------------------------------------------------------
# Conversation requests / responses
# ----------------------------------------------------------------------
class AnalyzeRequest(CamelModel):
    """
    Session analysis turn. `message` is validated by the conversation
    service so that an empty message is rejected before anything is stored.
    Without `session_id` a new session is opened.
    """
    session_id: Optional[str] = None
    message: Optional[str] = None
    event_ids: Optional[List[str]] = None
    filters: Optional[EventFilters] = None


class AnalyzeResponse(CamelModel):
    message: AssistantMessage
    events_analyzed: int
    tokens_used: int


class QuickAnalyzeRequest(CamelModel):
    question: Optional[str] = None
    event_ids: Optional[List[str]] = None


class QuickAnalyzeResponse(CamelModel):
    answer: str
    events_analyzed: int


class ErrorResponse(CamelModel):
    error: str
    details: Optional[str] = None
    # unavailable-service guidance
    message: Optional[Union[str, AssistantMessage]] = None
    # session holding the stored user turn when the backend was unavailable
    session_id: Optional[str] = None
