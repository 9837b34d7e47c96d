# backend/soc_analyst/services/llm/provider.py

import logging
from typing import Optional

from soc_analyst.core.config import settings
from soc_analyst.services.llm.openai_client import OpenAIChatClient

logger = logging.getLogger(__name__)

_client: Optional[OpenAIChatClient] = None


def is_ai_configured() -> bool:
    return bool(
        settings.AI_INTEGRATIONS_OPENAI_BASE_URL
        and settings.AI_INTEGRATIONS_OPENAI_API_KEY
    )


def get_model_client() -> Optional[OpenAIChatClient]:
    """
    Build the model client on first use and reuse it afterwards.
    Returns None while credentials / endpoint are missing.
    """
    global _client

    if not is_ai_configured():
        logger.info("AI integration not configured; model client unavailable.")
        return None

    if _client is None:
        _client = OpenAIChatClient(
            base_url=settings.AI_INTEGRATIONS_OPENAI_BASE_URL,
            api_key=settings.AI_INTEGRATIONS_OPENAI_API_KEY,
            model=settings.AI_MODEL,
            timeout=settings.AI_REQUEST_TIMEOUT_SECONDS,
        )
        logger.info("Model client initialized (model=%s)", settings.AI_MODEL)
    return _client
