"""LLM client abstract interface - OpenAI-compatible API."""

from abc import ABC, abstractmethod


class LLMError(Exception):
    """Upstream model call failed."""


class LLMTransientError(LLMError):
    """Failure worth retrying: timeout, connection drop, rate limit, 5xx."""


class LLMClient(ABC):
    """OpenAI-compatible LLM client interface."""

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        max_tokens: int = 2048,
    ) -> str:
        """
        Send chat completion request and return assistant message content.
        messages: [{"role": "system"|"user"|"assistant", "content": "..."}]
        Raises LLMTransientError for retryable failures, LLMError otherwise.
        """
        ...
