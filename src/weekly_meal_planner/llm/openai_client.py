"""OpenAI-compatible LLM client implementation."""

import logging
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from weekly_meal_planner.config import get_settings
from weekly_meal_planner.llm.base import LLMClient, LLMError, LLMTransientError

logger = logging.getLogger(__name__)

_TRANSIENT = (
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class OpenAIClient(LLMClient):
    """OpenAI API client - works with OpenAI or compatible endpoints (e.g. Gemini, LiteLLM)."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.llm_api_key
        self._base_url = base_url or settings.llm_base_url
        self._model = model or settings.llm_model
        self._timeout = timeout_seconds or settings.generation_timeout_seconds
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        """Lazy-init; retries are handled by the caller, so the SDK's own are off."""
        if self._client is None:
            client_kwargs: dict[str, Any] = {
                "api_key": self._api_key,
                "timeout": httpx.Timeout(self._timeout, connect=10.0),
                "max_retries": 0,
            }
            if self._base_url:
                client_kwargs["base_url"] = self._base_url
            self._client = AsyncOpenAI(**client_kwargs)
        return self._client

    async def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        max_tokens: int = 2048,
    ) -> str:
        """Call OpenAI-compatible chat completion."""
        m = model or self._model
        try:
            response = await self._get_client().chat.completions.create(
                model=m,
                messages=messages,
                max_tokens=max_tokens,
            )
        except _TRANSIENT as e:
            raise LLMTransientError(f"{type(e).__name__}: {e}") from e
        except openai.OpenAIError as e:
            raise LLMError(f"{type(e).__name__}: {e}") from e
        if not response.choices:
            return ""
        content = response.choices[0].message.content
        return content or ""
