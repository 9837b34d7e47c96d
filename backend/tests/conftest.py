"""
Shared pytest fixtures for the SOC analyst backend.

Provides:
- a throwaway SQLite database (set before any soc_analyst import)
- event / chat stores bound to it, reset per test
- a scripted fake model backend
- a FastAPI TestClient wired to the fake backend
"""

import os
import tempfile
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="soc-analyst-tests-")
os.environ["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ.pop("AI_INTEGRATIONS_OPENAI_BASE_URL", None)
os.environ.pop("AI_INTEGRATIONS_OPENAI_API_KEY", None)

from fastapi.testclient import TestClient  # noqa: E402

from soc_analyst.db.init_db import init_db  # noqa: E402
from soc_analyst.schemas.events import (  # noqa: E402
    EventIngestRequest,
    EventSeverity,
    SecurityEvent,
)
from soc_analyst.services.analysis.chat_store_service import ChatStoreService  # noqa: E402
from soc_analyst.services.analysis.conversation_service import ConversationService  # noqa: E402
from soc_analyst.services.events.event_store_service import EventStoreService  # noqa: E402
from soc_analyst.services.llm.openai_client import Completion  # noqa: E402


BASE_TIME = datetime(2025, 6, 1, 12, 0, 0)


# ============================================================================
# Fake model backend
# ============================================================================

class FakeBackend:
    """Records every prompt and answers from a script."""

    def __init__(self, text: Optional[str] = "Analysis complete.", total_tokens: int = 42):
        self.text = text
        self.total_tokens = total_tokens
        self.error: Optional[Exception] = None
        self.calls: List[Dict] = []

    async def complete(self, messages, max_tokens):
        self.calls.append({"messages": messages, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return Completion(text=self.text, total_tokens=self.total_tokens)

    @property
    def last_messages(self) -> List[Dict[str, str]]:
        return self.calls[-1]["messages"]


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def reset_db():
    init_db(reset=True)
    yield


@pytest.fixture
def event_store() -> EventStoreService:
    return EventStoreService()


@pytest.fixture
def chat_store() -> ChatStoreService:
    return ChatStoreService()


@pytest.fixture
def add_event(event_store):
    """
    Factory storing one event. `minutes_ago` controls ordering:
    smaller values are more recent.
    """

    def _add(
        minutes_ago: int = 0,
        severity: EventSeverity = EventSeverity.HIGH,
        event_type: str = "Malware Detected",
        source: str = "10.0.0.5",
        category: Optional[str] = "Malware",
        **extra,
    ) -> SecurityEvent:
        payload = EventIngestRequest(
            timestamp=BASE_TIME - timedelta(minutes=minutes_ago),
            event_type=event_type,
            severity=severity,
            source=source,
            destination=extra.pop("destination", "192.168.1.1"),
            description=extra.pop("description", f"{event_type} detected from {source}"),
            category=category,
            **extra,
        )
        return event_store.store_event(payload)

    return _add


# ============================================================================
# Conversation fixtures
# ============================================================================

@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def service(event_store, chat_store, backend) -> ConversationService:
    return ConversationService(
        event_store=event_store,
        chat_store=chat_store,
        client_provider=lambda: backend,
    )


@pytest.fixture
def unconfigured_service(event_store, chat_store) -> ConversationService:
    return ConversationService(
        event_store=event_store,
        chat_store=chat_store,
        client_provider=lambda: None,
    )


@pytest.fixture
def api_client(service):
    from soc_analyst.api.deps import get_conversation_service
    from soc_analyst.main import app

    app.dependency_overrides[get_conversation_service] = lambda: service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
