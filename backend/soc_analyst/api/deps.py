# backend/soc_analyst/api/deps.py
from typing import Optional

from fastapi import Header

from soc_analyst.services.analysis.chat_store_service import (
    ChatStoreService,
    chat_store_service,
)
from soc_analyst.services.analysis.conversation_service import (
    ConversationService,
    conversation_service,
)
from soc_analyst.services.events.event_store_service import (
    EventStoreService,
    event_store_service,
)


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """
    Opaque caller identity set by the authenticating proxy.
    Anonymous requests get None.
    """
    if x_user_id and x_user_id.strip():
        return x_user_id.strip()
    return None


def get_event_store() -> EventStoreService:
    return event_store_service


def get_chat_store() -> ChatStoreService:
    return chat_store_service


def get_conversation_service() -> ConversationService:
    return conversation_service
