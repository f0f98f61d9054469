"""Generation client - one prompt in, raw model text out, with timeout and bounded retry."""

import asyncio
import logging

from weekly_meal_planner.llm.base import LLMClient, LLMError, LLMTransientError
from weekly_meal_planner.planning.prompt import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """The model call failed, timed out on every attempt, or returned no text."""


class GenerationClient:
    """Wraps an LLMClient with a per-attempt timeout and exponential backoff on transient errors."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        timeout_seconds: float = 30.0,
        max_retries: int = 2,
        backoff_seconds: float = 1.0,
        max_tokens: int = 2048,
    ) -> None:
        self._llm = llm
        self._timeout = timeout_seconds
        self._max_retries = max_retries
        self._backoff = backoff_seconds
        self._max_tokens = max_tokens

    async def generate(self, prompt: str, *, system_prompt: str = SYSTEM_PROMPT) -> str:
        """Return raw response text. Raises GenerationError."""
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ]
        for attempt in range(self._max_retries + 1):
            try:
                text = await asyncio.wait_for(
                    self._llm.chat(messages, max_tokens=self._max_tokens),
                    timeout=self._timeout,
                )
            except (asyncio.TimeoutError, LLMTransientError) as e:
                reason = str(e) or "timeout"
                if attempt == self._max_retries:
                    raise GenerationError(
                        f"Generation failed after {attempt + 1} attempts: {reason}"
                    ) from e
                delay = self._backoff * (2**attempt)
                logger.warning(
                    "Generation attempt %d failed (%s), retrying in %.1fs",
                    attempt + 1,
                    reason,
                    delay,
                )
                await asyncio.sleep(delay)
                continue
            except LLMError as e:
                raise GenerationError(str(e)) from e
            if not text or not text.strip():
                raise GenerationError("Model returned no text")
            return text
        raise GenerationError("Generation failed")
