"""Shared pytest configuration and fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from condense.core.config import reset_debug_flags
from condense.features.tracing import reset_tracer
from condense.llm.endpoints.base import ChatEndpoint, ChatResponse, EndpointInfo
from condense.rendering.renderer import DefaultPromptRenderer
from condense.types.types import (
    Conversation,
    Round,
    ToolInvocation,
    Turn,
    TurnRequest,
    TurnStatus,
)


class FakeEndpoint(ChatEndpoint):
    """Endpoint whose ``invoke`` is an AsyncMock returning a fixed response."""

    def __init__(self, response: ChatResponse | None = None, max_prompt_tokens=None):
        self.info = EndpointInfo(
            model="fake-model", family="fake", max_prompt_tokens=max_prompt_tokens
        )
        self.invoke = AsyncMock(
            return_value=response or ChatResponse.success("Summary text", model="fake-model")
        )

    async def invoke(self, messages, options):
        raise NotImplementedError


def build_conversation(
    rounds_per_turn: list[int],
    summaries: dict[str, str] | None = None,
    session_id: str = "test-session",
) -> Conversation:
    """Build a conversation whose rounds are named ``t{turn}r{round}``.

    The last turn is the in-progress one; earlier turns are finished.
    """
    summaries = summaries or {}
    turns = []
    for turn_index, round_count in enumerate(rounds_per_turn):
        rounds = []
        for round_index in range(round_count):
            round_id = f"t{turn_index}r{round_index}"
            rounds.append(
                Round(
                    id=round_id,
                    response=f"Response {round_id}",
                    tool_calls=[
                        ToolInvocation(
                            id=f"call-{round_id}",
                            name="read_file",
                            arguments='{"path": "/test.txt"}',
                        )
                    ],
                    summary=summaries.get(round_id),
                )
            )
        is_last = turn_index == len(rounds_per_turn) - 1
        turns.append(
            Turn(
                id=f"turn-{turn_index}",
                request=TurnRequest(message=f"Request {turn_index}"),
                status=TurnStatus.IN_PROGRESS if is_last else TurnStatus.SUCCESS,
                rounds=rounds,
            )
        )
    return Conversation(session_id=session_id, turns=turns)


@pytest.fixture(autouse=True)
def reset_global_state():
    """Restore debug flags and the cached tracer around every test."""
    reset_debug_flags()
    reset_tracer()
    yield
    reset_debug_flags()
    reset_tracer()


@pytest.fixture
def make_conversation():
    """Factory for conversations with ``t{turn}r{round}`` round ids."""
    return build_conversation


@pytest.fixture
def conversation():
    """Three turns of two rounds each, none summarized."""
    return build_conversation([2, 2, 2])


@pytest.fixture
def fake_endpoint():
    """Endpoint returning a successful "Summary text" response."""
    return FakeEndpoint()


@pytest.fixture
def make_endpoint():
    """Factory for fake endpoints with a given response."""
    return FakeEndpoint


@pytest.fixture
def renderer():
    """Default prompt renderer."""
    return DefaultPromptRenderer()


@pytest.fixture
def mock_tracer():
    """Mock OpenTelemetry tracer."""
    tracer = MagicMock()
    span = MagicMock()
    span.__enter__ = MagicMock(return_value=span)
    span.__exit__ = MagicMock(return_value=False)
    tracer.start_as_current_span = MagicMock(return_value=span)
    return tracer


@pytest.fixture
def mock_openai_client():
    """Mock OpenAI AsyncOpenAI client."""
    client = AsyncMock()
    client.chat.completions.create = AsyncMock()
    return client
