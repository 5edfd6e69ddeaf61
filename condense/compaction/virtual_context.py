"""Prompt contexts and the read-only virtual view used for summarization.

``PromptContext`` points at the real turns and rounds of a conversation.
``build_virtual_context`` reshapes it around a boundary round into a
``VirtualPromptContext`` made only of frozen view objects, so nothing reachable
from the virtual context can write back into the conversation.
"""

from collections.abc import Sequence
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict

from ..core.errors import RoundNotFoundError
from ..types.types import Conversation, Round, ToolInfo, Turn, TurnStatus

CURRENT_TURN_ID = "current"


class ToolsDescriptor(BaseModel):
    """Tool capability descriptor handed to the prompt renderer.

    Renderers skip every tool-call round when no descriptor is present, so an
    empty descriptor is still required to get tool calls rendered.
    """

    model_config = ConfigDict(frozen=True)

    tool_references: tuple[str, ...] = ()
    available_tools: tuple[ToolInfo, ...] = ()


class PromptContext(BaseModel):
    """The prompt-building inputs for the next request of a conversation."""

    query: str
    history: list[Turn] = []
    tool_call_rounds: list[Round] | None = None
    conversation: Conversation | None = None
    is_continuation: bool = False
    tools: ToolsDescriptor | None = None

    def all_rounds(self) -> list[Round]:
        """All rounds in order: history turns first, then the current turn."""
        rounds = [round_ for turn in self.history for round_ in turn.rounds]
        rounds.extend(self.tool_call_rounds or [])
        return rounds


def build_prompt_context(
    conversation: Conversation, available_tools: Sequence[ToolInfo] | None = None
) -> PromptContext:
    """Build a prompt context from a conversation.

    The latest turn is the current one; all earlier turns become history. A tools
    descriptor is always attached, empty when no tools are given.
    """
    latest_turn = conversation.latest_turn()
    return PromptContext(
        query=latest_turn.request.message,
        history=conversation.turns[:-1],
        tool_call_rounds=latest_turn.rounds if latest_turn.rounds else None,
        conversation=conversation,
        is_continuation=False,
        tools=ToolsDescriptor(available_tools=tuple(available_tools or ())),
    )


# -- Frozen views ---------------------------------------------------------------


class ToolCallView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    arguments: str


class RoundView(BaseModel):
    """Read-only copy of a round."""

    model_config = ConfigDict(frozen=True)

    id: str
    response: str
    tool_calls: tuple[ToolCallView, ...] = ()
    summary: str | None = None

    @classmethod
    def from_round(cls, round_: Round) -> "RoundView":
        return cls(
            id=round_.id,
            response=round_.response,
            tool_calls=tuple(
                ToolCallView(id=call.id, name=call.name, arguments=call.arguments)
                for call in round_.tool_calls
            ),
            summary=round_.summary,
        )


class TurnView(BaseModel):
    """Read-only slice of a turn: its request and a subset of its rounds."""

    model_config = ConfigDict(frozen=True)

    turn_index: int
    turn_id: str
    request: str
    status: TurnStatus
    rounds: tuple[RoundView, ...] = ()
    is_current_turn: bool = False


class VirtualPromptContext(BaseModel):
    """Disposable projection of a conversation around a summarization boundary.

    - ``prior_summary`` replaces every round up to the last summarized one
    - ``historic`` holds the rounds of the span being summarized
    - ``current`` holds the rounds after the boundary, kept verbatim
    - ``tools`` is None when no tool descriptor was supplied; renderers then skip
      the tool calls of each round
    """

    model_config = ConfigDict(frozen=True)

    query: str
    summarized_round_id: str
    prior_summary: str | None = None
    historic: tuple[TurnView, ...] = ()
    current: tuple[TurnView, ...] = ()
    is_continuation: bool = True
    tools: ToolsDescriptor | None = None

    def historic_rounds(self) -> list[RoundView]:
        return [round_ for turn in self.historic for round_ in turn.rounds]

    def current_rounds(self) -> list[RoundView]:
        return [round_ for turn in self.current for round_ in turn.rounds]


# -- Builder ----------------------------------------------------------------------


class _TurnSource(NamedTuple):
    turn_id: str
    request: str
    status: TurnStatus
    rounds: list[Round]
    is_current_turn: bool


def _turn_sources(prompt_context: PromptContext) -> list[_TurnSource]:
    sources = [
        _TurnSource(turn.id, turn.request.message, turn.status, list(turn.rounds), False)
        for turn in prompt_context.history
    ]

    turn_id = CURRENT_TURN_ID
    status = TurnStatus.IN_PROGRESS
    conversation = prompt_context.conversation
    if conversation is not None and conversation.turns:
        latest_turn = conversation.latest_turn()
        turn_id, status = latest_turn.id, latest_turn.status
    sources.append(
        _TurnSource(
            turn_id,
            prompt_context.query,
            status,
            list(prompt_context.tool_call_rounds or []),
            True,
        )
    )
    return sources


def _make_view(index: int, source: _TurnSource, rounds: list[Round]) -> TurnView:
    return TurnView(
        turn_index=index,
        turn_id=source.turn_id,
        request=source.request,
        status=source.status,
        rounds=tuple(RoundView.from_round(round_) for round_ in rounds),
        is_current_turn=source.is_current_turn,
    )


def build_virtual_context(
    prompt_context: PromptContext, boundary_round_id: str
) -> VirtualPromptContext:
    """
    Build the virtual view of a prompt context around a boundary round.

    Args:
        prompt_context: Context pointing at the real turns and rounds
        boundary_round_id: Id of the last round of the span to summarize

    Returns:
        A frozen VirtualPromptContext; the input is left untouched

    Raises:
        RoundNotFoundError: If no round has the boundary id
    """
    sources = _turn_sources(prompt_context)
    positions = [
        (turn_index, round_)
        for turn_index, source in enumerate(sources)
        for round_ in source.rounds
    ]

    boundary_pos = next(
        (pos for pos, (_, round_) in enumerate(positions) if round_.id == boundary_round_id),
        None,
    )
    if boundary_pos is None:
        raise RoundNotFoundError(boundary_round_id)
    boundary_turn = positions[boundary_pos][0]

    collapse_pos = -1
    for pos in range(boundary_pos + 1):
        if positions[pos][1].has_summary:
            collapse_pos = pos
    prior_summary = positions[collapse_pos][1].summary if collapse_pos >= 0 else None
    collapse_turn = positions[collapse_pos][0] if collapse_pos >= 0 else -1

    span: dict[int, list[Round]] = {}
    tail: dict[int, list[Round]] = {}
    for pos, (turn_index, round_) in enumerate(positions):
        if collapse_pos < pos <= boundary_pos:
            span.setdefault(turn_index, []).append(round_)
        elif pos > boundary_pos:
            tail.setdefault(turn_index, []).append(round_)

    historic: list[TurnView] = []
    current: list[TurnView] = []
    for turn_index, source in enumerate(sources):
        if turn_index in span:
            historic.append(_make_view(turn_index, source, span[turn_index]))
        elif not source.rounds and collapse_turn < turn_index < boundary_turn:
            historic.append(_make_view(turn_index, source, []))

        if turn_index in tail:
            current.append(_make_view(turn_index, source, tail[turn_index]))
        elif not source.rounds and turn_index > boundary_turn:
            current.append(_make_view(turn_index, source, []))

    return VirtualPromptContext(
        query=prompt_context.query,
        summarized_round_id=boundary_round_id,
        prior_summary=prior_summary,
        historic=tuple(historic),
        current=tuple(current),
        is_continuation=True,
        tools=prompt_context.tools or ToolsDescriptor(),
    )
