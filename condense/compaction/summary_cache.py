"""Writing summaries back onto rounds.

This is the only place that mutates a conversation during compaction. A round goes
from "no summary" to "has summary" through a compare-and-set under a process-wide
lock, so concurrent committers cannot overwrite each other: the first one wins and
the rest get the winner's text back.
"""

import logging
import threading
from enum import Enum

from pydantic import BaseModel, ConfigDict

from ..core.errors import AlreadySummarizedError, RoundNotFoundError
from ..types.types import Conversation, Round
from .types import SummarizationResult

logger = logging.getLogger(__name__)

_commit_lock = threading.Lock()


class CommitStatus(str, Enum):
    COMMITTED = "committed"
    ALREADY_SUMMARIZED = "already_summarized"


class CommitResult(BaseModel):
    """Outcome of a commit; ``summary`` is the text the round now holds."""

    model_config = ConfigDict(frozen=True)

    status: CommitStatus
    round_id: str
    summary: str

    @property
    def committed(self) -> bool:
        return self.status == CommitStatus.COMMITTED


def commit_summary(
    conversation: Conversation,
    result: SummarizationResult,
    *,
    exclusive: bool = False,
) -> CommitResult:
    """
    Store a summarization result on its boundary round.

    Args:
        conversation: The real conversation the result was computed from
        result: A successful summarization result
        exclusive: Raise instead of reporting when another writer got there first

    Returns:
        CommitResult; status is ALREADY_SUMMARIZED when the round already had a
        summary, in which case the existing text is kept and returned

    Raises:
        ValueError: If the result carries an empty summary
        RoundNotFoundError: If the boundary round is not in the conversation
        AlreadySummarizedError: If exclusive is set and the round already has a summary
    """
    if result.is_empty:
        raise ValueError(
            f"Refusing to commit an empty summary for round {result.boundary_round_id}"
        )

    round_id = result.boundary_round_id
    with _commit_lock:
        round_ = conversation.find_round(round_id)
        if round_ is None:
            raise RoundNotFoundError(round_id)

        if round_.has_summary:
            existing = round_.summary or ""
        else:
            round_.summary = result.summary_text
            existing = None

    if existing is not None:
        logger.info("Round %s already summarized; keeping the existing summary", round_id)
        if exclusive:
            raise AlreadySummarizedError(round_id, existing)
        return CommitResult(
            status=CommitStatus.ALREADY_SUMMARIZED, round_id=round_id, summary=existing
        )

    logger.info(
        "Committed summary for round %s in session %s (%d chars)",
        round_id,
        conversation.session_id,
        len(result.summary_text),
    )
    return CommitResult(
        status=CommitStatus.COMMITTED, round_id=round_id, summary=result.summary_text
    )


def clear_round_summary(conversation: Conversation, round_id: str) -> bool:
    """Clear one round's summary so its span can be compacted again.

    Returns:
        True if a summary was cleared

    Raises:
        RoundNotFoundError: If the round is not in the conversation
    """
    with _commit_lock:
        round_ = conversation.find_round(round_id)
        if round_ is None:
            raise RoundNotFoundError(round_id)
        if not round_.has_summary:
            return False
        round_.summary = None

    logger.info("Cleared summary for round %s", round_id)
    return True


def clear_all_summaries(conversation: Conversation) -> int:
    """Clear every round summary in the conversation and return how many were cleared."""
    cleared: list[str] = []
    with _commit_lock:
        for _, _, round_ in conversation.iter_rounds():
            if round_.has_summary:
                round_.summary = None
                cleared.append(round_.id)

    for round_id in cleared:
        logger.info("Cleared summary for round %s", round_id)
    return len(cleared)


def summarized_rounds(conversation: Conversation) -> list[tuple[int, int, Round]]:
    """List ``(turn_index, round_index, round)`` for rounds that hold a summary."""
    return [entry for entry in conversation.iter_rounds() if entry[2].has_summary]
