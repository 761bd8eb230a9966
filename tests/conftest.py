"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from tone_picker.clients.llm_client import LLMClient, LLMResponse
from tone_picker.models.tone import ToneState
from tone_picker.pipeline.orchestrator import ToneOrchestrator


class FakeProvider:
    """Scripted tone provider.

    Each call pops the next entry from ``responses``; an exception entry is
    raised instead of returned. When ``gate`` is set, calls block until it is.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls: list[tuple[str, float, float]] = []
        self.gate: asyncio.Event | None = None
        self.started = asyncio.Event()

    async def adjust(self, text: str, formality_level: float, friendliness_level: float) -> str:
        self.calls.append((text, formality_level, friendliness_level))
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def sample_text() -> str:
    return "Hello there, how are you?"


@pytest.fixture
def adjusted_text() -> str:
    return "Greetings! I hope you're doing wonderfully today!"


@pytest.fixture
def initial_state(sample_text) -> ToneState:
    return ToneState(text=sample_text)


@pytest.fixture
def fake_provider(adjusted_text) -> FakeProvider:
    return FakeProvider([adjusted_text])


@pytest.fixture
def orchestrator(fake_provider, initial_state) -> ToneOrchestrator:
    return ToneOrchestrator(fake_provider, initial_state)


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="Adjusted text.", input_tokens=100, output_tokens=50)
    )
    return client


@pytest.fixture
def make_provider():
    """Factory for FakeProvider instances with custom scripts."""
    return FakeProvider
