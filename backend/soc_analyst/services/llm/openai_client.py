# backend/soc_analyst/services/llm/openai_client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import httpx

from soc_analyst.core.errors import AIBackendError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Completion:
    text: Optional[str]
    total_tokens: int = 0


class ModelBackend(Protocol):
    """The single capability the conversation engine needs from a model."""

    async def complete(
        self, messages: List[Dict[str, str]], max_tokens: int
    ) -> Completion:
        ...


class OpenAIChatClient:
    """
    Minimal client for an OpenAI-compatible /chat/completions endpoint.

    Any transport error, non-2xx status or malformed body is raised as
    AIBackendError; the caller decides what to store in its place.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self._timeout = timeout
        self._transport = transport

    async def complete(
        self, messages: List[Dict[str, str]], max_tokens: int
    ) -> Completion:
        payload = {
            "model": self.model,
            "messages": messages,
            "max_completion_tokens": max_tokens,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(
                    f"{self.base_url}/chat/completions",
                    headers=self._headers,
                    json=payload,
                )
                resp.raise_for_status()
                data: Dict[str, Any] = resp.json()
        except httpx.HTTPStatusError as e:
            raise AIBackendError(
                f"Model backend returned HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise AIBackendError(f"{type(e).__name__}: {e}") from e

        if not isinstance(data, dict):
            raise AIBackendError("Model backend returned a malformed body")

        choices = data.get("choices") or []
        text = None
        if choices:
            text = (choices[0].get("message") or {}).get("content")
        # some gateways answer with a list of content parts
        if text is not None and not isinstance(text, str):
            raise AIBackendError("Model backend returned malformed content")

        usage = data.get("usage") or {}
        total_tokens = usage.get("total_tokens") or 0

        logger.debug(
            "Completion from %s: %d choices, %d tokens",
            self.model, len(choices), total_tokens,
        )
        return Completion(text=text, total_tokens=total_tokens)
