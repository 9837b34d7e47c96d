# backend/soc_analyst/api/v1/routes_ai.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from soc_analyst.api.deps import (
    get_chat_store,
    get_conversation_service,
    get_current_user_id,
)
from soc_analyst.schemas.analysis import (
    AnalysisSession,
    AnalyzeRequest,
    AnalyzeResponse,
    ChatMessage,
    QuickAnalyzeRequest,
    QuickAnalyzeResponse,
    SessionCreateRequest,
    SessionUpdateRequest,
)
from soc_analyst.services.analysis.chat_store_service import ChatStoreService
from soc_analyst.services.analysis.conversation_service import ConversationService

router = APIRouter(
    prefix="/ai",
    tags=["ai", "analysis"],
)


# ------------------------------------------------------------------
# Sessions
# ------------------------------------------------------------------
@router.get("/sessions", response_model=List[AnalysisSession])
def list_sessions(
    user_id: Optional[str] = Depends(get_current_user_id),
    store: ChatStoreService = Depends(get_chat_store),
) -> List[AnalysisSession]:
    """Caller's sessions (all sessions for anonymous callers), newest activity first."""
    return store.list_sessions(user_id)


@router.post(
    "/sessions",
    response_model=AnalysisSession,
    status_code=status.HTTP_201_CREATED,
)
def create_session(
    payload: Optional[SessionCreateRequest] = None,
    user_id: Optional[str] = Depends(get_current_user_id),
    store: ChatStoreService = Depends(get_chat_store),
) -> AnalysisSession:
    title = payload.title if payload else None
    return store.create_session(user_id=user_id, title=title)


@router.get("/sessions/{session_id}", response_model=AnalysisSession)
def get_session(
    session_id: str,
    store: ChatStoreService = Depends(get_chat_store),
) -> AnalysisSession:
    session = store.get_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )
    return session


@router.patch("/sessions/{session_id}", response_model=AnalysisSession)
def update_session(
    session_id: str,
    payload: SessionUpdateRequest,
    store: ChatStoreService = Depends(get_chat_store),
) -> AnalysisSession:
    session = store.update_session(
        session_id,
        title=payload.title,
        status=payload.status.value if payload.status else None,
    )
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )
    return session


@router.get("/sessions/{session_id}/messages", response_model=List[ChatMessage])
def list_messages(
    session_id: str,
    store: ChatStoreService = Depends(get_chat_store),
) -> List[ChatMessage]:
    return store.list_messages(session_id)


# ------------------------------------------------------------------
# Conversation
# ------------------------------------------------------------------
@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    payload: AnalyzeRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
    service: ConversationService = Depends(get_conversation_service),
) -> AnalyzeResponse:
    """
    One analyst turn inside a session, grounded on the selected events.
    Failures are rendered by the AnalysisError handler registered in main.
    """
    return await service.analyze(payload, user_id=user_id)


@router.post("/quick-analyze", response_model=QuickAnalyzeResponse)
async def quick_analyze(
    payload: QuickAnalyzeRequest,
    service: ConversationService = Depends(get_conversation_service),
) -> QuickAnalyzeResponse:
    """Stateless one-off question over the most recent (or given) events."""
    return await service.quick_analyze(payload)
