import asyncio

import pytest

from weekly_meal_planner.llm import LLMError, LLMTransientError
from weekly_meal_planner.services import GenerationClient, GenerationError
from conftest import FakeLLM


class SlowLLM(FakeLLM):
    async def chat(self, messages, *, model=None, max_tokens=2048):
        self.calls.append(messages)
        await asyncio.sleep(1)
        return "{}"


@pytest.mark.asyncio
async def test_returns_text_and_sends_system_and_user_messages():
    llm = FakeLLM(default="{ }")
    text = await GenerationClient(llm, backoff_seconds=0).generate("plan my week")
    assert text == "{ }"
    roles = [m["role"] for m in llm.calls[0]]
    assert roles == ["system", "user"]
    assert llm.calls[0][1]["content"] == "plan my week"


@pytest.mark.asyncio
async def test_retries_transient_then_succeeds():
    llm = FakeLLM([LLMTransientError("503"), LLMTransientError("429"), "ok"])
    text = await GenerationClient(llm, max_retries=2, backoff_seconds=0).generate("p")
    assert text == "ok"
    assert len(llm.calls) == 3


@pytest.mark.asyncio
async def test_gives_up_after_bounded_retries():
    llm = FakeLLM(default=LLMTransientError("503"))
    with pytest.raises(GenerationError):
        await GenerationClient(llm, max_retries=2, backoff_seconds=0).generate("p")
    assert len(llm.calls) == 3


@pytest.mark.asyncio
async def test_non_transient_error_not_retried():
    llm = FakeLLM([LLMError("bad request"), "ok"])
    with pytest.raises(GenerationError, match="bad request"):
        await GenerationClient(llm, max_retries=2, backoff_seconds=0).generate("p")
    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_blank_response_is_error():
    with pytest.raises(GenerationError):
        await GenerationClient(FakeLLM(default="   "), backoff_seconds=0).generate("p")


@pytest.mark.asyncio
async def test_timeout_counts_as_transient():
    llm = SlowLLM()
    client = GenerationClient(llm, timeout_seconds=0.01, max_retries=1, backoff_seconds=0)
    with pytest.raises(GenerationError, match="timeout"):
        await client.generate("p")
    assert len(llm.calls) == 2
