"""LLM abstraction - OpenAI-compatible."""

from weekly_meal_planner.llm.base import LLMClient, LLMError, LLMTransientError
from weekly_meal_planner.llm.openai_client import OpenAIClient

__all__ = ["LLMClient", "LLMError", "LLMTransientError", "OpenAIClient"]
