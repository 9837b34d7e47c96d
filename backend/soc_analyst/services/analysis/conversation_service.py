# backend/soc_analyst/services/analysis/conversation_service.py

import logging
from typing import Callable, List, Optional, Tuple

from soc_analyst.core.config import settings
from soc_analyst.core.errors import (
    AIBackendError,
    AIServiceUnavailableError,
    AnalysisValidationError,
    SessionNotFoundError,
)
from soc_analyst.schemas.analysis import (
    DEFAULT_SESSION_TITLE,
    AnalysisMode,
    AnalysisSession,
    AnalyzeRequest,
    AnalyzeResponse,
    MessageContext,
    QuickAnalyzeRequest,
    QuickAnalyzeResponse,
)
from soc_analyst.services.analysis.chat_store_service import (
    ChatStoreService,
    chat_store_service,
)
from soc_analyst.services.analysis.context_selector import select_context
from soc_analyst.services.analysis.prompt_assembler import assemble
from soc_analyst.services.analysis.sanitizer import sanitize
from soc_analyst.services.events.event_store_service import (
    EventStoreService,
    event_store_service,
)
from soc_analyst.services.llm.openai_client import Completion, ModelBackend
from soc_analyst.services.llm.provider import get_model_client

logger = logging.getLogger(__name__)

TITLE_MAX_WORDS = 5
TITLE_MAX_CHARS = 30

UNAVAILABLE_MESSAGE = (
    "The AI integration is not configured. Please set "
    "AI_INTEGRATIONS_OPENAI_BASE_URL and AI_INTEGRATIONS_OPENAI_API_KEY "
    "to enable security event analysis."
)


def derive_title(message: str) -> str:
    """First five words of the message, capped at 30 chars plus '...'."""
    title = " ".join(message.split()[:TITLE_MAX_WORDS])
    if len(title) > TITLE_MAX_CHARS:
        return title[:TITLE_MAX_CHARS] + "..."
    return title


class ConversationService:
    """
    AI security-analyst conversations.

    Session mode (`analyze`):
      1. validate, resolve or open the session
      2. select grounding events
      3. store the user turn (survives any backend failure)
      4. check the model backend is configured
      5. assemble prompt from fresh history
      6. call the model, sanitize the reply
      7. store the assistant turn
      8. name the session after its first message

    Quick mode (`quick_analyze`) is steps 2, 5 and 6 with no session or history.
    """

    def __init__(
        self,
        event_store: EventStoreService = event_store_service,
        chat_store: ChatStoreService = chat_store_service,
        client_provider: Callable[[], Optional[ModelBackend]] = get_model_client,
        analysis_max_tokens: int = settings.ANALYSIS_MAX_COMPLETION_TOKENS,
        quick_max_tokens: int = settings.QUICK_MAX_COMPLETION_TOKENS,
        response_max_length: int = settings.AI_RESPONSE_MAX_LENGTH,
    ) -> None:
        self.event_store = event_store
        self.chat_store = chat_store
        self.client_provider = client_provider
        self.analysis_max_tokens = analysis_max_tokens
        self.quick_max_tokens = quick_max_tokens
        self.response_max_length = response_max_length

    # -------------------------------------------------------------------------
    # Session analysis
    # -------------------------------------------------------------------------
    async def analyze(
        self, request: AnalyzeRequest, user_id: Optional[str] = None
    ) -> AnalyzeResponse:
        if not request.message or not request.message.strip():
            raise AnalysisValidationError("Message is required")

        session = self._resolve_session(request.session_id, user_id)

        context_events = select_context(
            self.event_store.list_events(),
            event_ids=request.event_ids,
            filters=request.filters,
            mode=AnalysisMode.ANALYSIS,
        )
        event_ids = [e.id for e in context_events]

        user_turn = self.chat_store.create_message(
            session.id,
            "user",
            request.message,
            user_id=user_id,
            context=MessageContext(event_ids=event_ids, filters=request.filters),
        )

        client = self._require_client(session.id)

        # Re-read from the store rather than trusting any cached history
        history = [
            m for m in self.chat_store.list_messages(session.id)
            if m.id != user_turn.id
        ]

        prompt = assemble(context_events, history, request.message, AnalysisMode.ANALYSIS)
        completion, failure = await self._complete(client, prompt, self.analysis_max_tokens)

        assistant_turn = self.chat_store.create_message(
            session.id,
            "assistant",
            sanitize(completion.text, self.response_max_length),
            user_id=user_id,
            context=MessageContext(event_ids=event_ids),
            token_count=completion.total_tokens,
        )

        if not history and session.title == DEFAULT_SESSION_TITLE:
            self.chat_store.update_session(session.id, title=derive_title(request.message))

        if failure:
            raise AIBackendError(failure, message=assistant_turn)

        logger.info(
            "Session %s: analyzed %d events, %d tokens",
            session.id, len(context_events), completion.total_tokens,
        )
        return AnalyzeResponse(
            message=assistant_turn,
            events_analyzed=len(context_events),
            tokens_used=completion.total_tokens,
        )

    # -------------------------------------------------------------------------
    # Quick analysis (stateless)
    # -------------------------------------------------------------------------
    async def quick_analyze(self, request: QuickAnalyzeRequest) -> QuickAnalyzeResponse:
        if not request.question or not request.question.strip():
            raise AnalysisValidationError("Question is required")

        client = self._require_client()

        context_events = select_context(
            self.event_store.list_events(),
            event_ids=request.event_ids,
            mode=AnalysisMode.QUICK,
        )
        prompt = assemble(context_events, [], request.question, AnalysisMode.QUICK)
        completion, failure = await self._complete(client, prompt, self.quick_max_tokens)

        if failure:
            raise AIBackendError(failure)

        return QuickAnalyzeResponse(
            answer=sanitize(completion.text, self.response_max_length),
            events_analyzed=len(context_events),
        )

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------
    def _resolve_session(
        self, session_id: Optional[str], user_id: Optional[str]
    ) -> AnalysisSession:
        if not session_id:
            return self.chat_store.create_session(user_id=user_id)

        session = self.chat_store.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def _require_client(self, session_id: Optional[str] = None) -> ModelBackend:
        client = self.client_provider()
        if client is None:
            logger.warning("AI analysis requested but the model backend is not configured.")
            raise AIServiceUnavailableError(UNAVAILABLE_MESSAGE, session_id=session_id)
        return client

    async def _complete(
        self, client: ModelBackend, prompt: List[dict], max_tokens: int
    ) -> Tuple[Completion, Optional[str]]:
        """
        Call the backend once. Returns the completion and a failure reason;
        on failure the completion is empty so sanitize() yields its fallback.
        """
        try:
            completion = await client.complete(prompt, max_tokens)
        except AIBackendError as e:
            logger.error("Model backend call failed: %s", e.detail)
            return Completion(text=None), e.detail
        except Exception as e:
            logger.exception("Unexpected model backend error")
            return Completion(text=None), f"{type(e).__name__}: {e}"

        text = completion.text
        if not isinstance(text, str) or not text.strip():
            logger.warning("Model backend returned no usable content.")
            return Completion(text=None, total_tokens=completion.total_tokens), (
                "Model backend returned no content"
            )
        return completion, None


conversation_service = ConversationService()
