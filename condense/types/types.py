"""Type definitions for conversations, turns, rounds and tool invocations."""

from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Usage(BaseModel):
    """Token usage information from LLM calls."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class ToolInvocation(BaseModel):
    """A tool call made by the model during a round."""

    id: str
    name: str
    arguments: str = "{}"  # JSON string


class ToolInfo(BaseModel):
    """Description of an invocable tool (name, description, parameter schema)."""

    name: str
    description: str = ""
    parameters: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )


class Round(BaseModel):
    """One model step inside a turn: a response plus its tool invocations.

    Rounds are the unit of compaction. A round whose ``summary`` is a non-empty
    string has already been compacted, together with every round before it.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str
    response: str = ""
    tool_calls: list[ToolInvocation] = []
    summary: str | None = None

    @property
    def has_summary(self) -> bool:
        return bool(self.summary)


class TurnStatus(str, Enum):
    """Lifecycle state of a turn's response."""

    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    CANCELLED = "cancelled"
    ERROR = "error"
    FILTERED = "filtered"


class TurnRequest(BaseModel):
    """The user request that opened a turn."""

    message: str
    type: str = "user"


class RoundSummaryRecord(BaseModel):
    """A summary persisted on turn metadata instead of on the round itself."""

    round_id: str
    text: str


class TurnResultMetadata(BaseModel):
    """Result metadata recorded when a turn finishes."""

    summaries: list[RoundSummaryRecord] = []


class Turn(BaseModel):
    """One user request and the rounds produced while answering it."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    request: TurnRequest
    status: TurnStatus = TurnStatus.IN_PROGRESS
    rounds: list[Round] = []
    result_metadata: TurnResultMetadata | None = None


class Conversation(BaseModel):
    """An ordered, append-only sequence of turns for one session.

    Only the last turn may be in progress.
    """

    session_id: str
    turns: list[Turn] = []

    def latest_turn(self) -> Turn:
        if not self.turns:
            raise ValueError(f"Conversation {self.session_id} has no turns")
        return self.turns[-1]

    def append_turn(self, turn: Turn) -> None:
        if self.turns and self.turns[-1].status == TurnStatus.IN_PROGRESS:
            # Closing the previous turn keeps "only the last turn is in progress" true
            self.turns[-1].status = TurnStatus.SUCCESS
        self.turns.append(turn)

    def iter_rounds(self) -> Iterator[tuple[int, int, Round]]:
        """Yield ``(turn_index, round_index, round)`` in conversation order."""
        for turn_index, turn in enumerate(self.turns):
            for round_index, round_ in enumerate(turn.rounds):
                yield turn_index, round_index, round_

    def all_rounds(self) -> list[Round]:
        return [round_ for _, _, round_ in self.iter_rounds()]

    def find_round(self, round_id: str) -> Round | None:
        for _, _, round_ in self.iter_rounds():
            if round_.id == round_id:
                return round_
        return None


def normalize_summaries_on_rounds(turns: list[Turn]) -> None:
    """Move summaries stored in turn metadata onto the rounds they belong to.

    Empty-string summaries are reset to ``None`` so that "has a summary" only ever
    means a non-empty one. A round that already holds a summary keeps it.
    """
    rounds_by_id: dict[str, Round] = {}
    for turn in turns:
        for round_ in turn.rounds:
            if round_.summary == "":
                round_.summary = None
            rounds_by_id[round_.id] = round_

    for turn in turns:
        if turn.result_metadata is None:
            continue
        for record in turn.result_metadata.summaries:
            round_ = rounds_by_id.get(record.round_id)
            if round_ is not None and not round_.has_summary and record.text:
                round_.summary = record.text
