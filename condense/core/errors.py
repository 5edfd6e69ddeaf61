"""Exceptions raised by the compaction pipeline."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..llm.endpoints.base import ResponseStatus


class CompactionError(Exception):
    """Base class for every failure surfaced by a compaction attempt."""


class NothingToSummarizeError(CompactionError):
    """
    Exception raised when fewer than two rounds are pending.

    Pending rounds are the unsummarized rounds after the last summarized one; an
    earlier unsummarized round is already covered by that summary. Compaction
    cannot make progress; the caller should skip it this cycle and must not issue
    a model call.
    """

    def __init__(self, pending_count: int = 0):
        self.pending_count = pending_count
        super().__init__(
            f"Nothing to summarize: need at least 2 pending rounds after the last "
            f"summary, found {pending_count}"
        )


class RenderError(CompactionError):
    """
    Exception raised when the summarization prompt could not be assembled.
    """

    def __init__(
        self,
        reason: str,
        turn_index: int | None = None,
        round_index: int | None = None,
    ):
        self.reason = reason
        self.turn_index = turn_index
        self.round_index = round_index
        message = f"Failed to render summarization prompt: {reason}"
        if turn_index is not None:
            message += f" (turn {turn_index}"
            if round_index is not None:
                message += f", round {round_index}"
            message += ")"
        super().__init__(message)


class ModelError(CompactionError):
    """
    Exception raised when the summarization request did not succeed.

    ``status`` is the endpoint's own classification (filtered, error) and
    ``reason`` its message, both passed through unchanged.
    """

    def __init__(self, status: "ResponseStatus", reason: str | None = None):
        self.status = status
        self.reason = reason
        status_value = getattr(status, "value", status)
        message = f"Summarization request failed with status '{status_value}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class AlreadySummarizedError(CompactionError):
    """
    Exception raised when an exclusive commit finds the round already summarized.
    """

    def __init__(self, round_id: str, existing_summary: str):
        self.round_id = round_id
        self.existing_summary = existing_summary
        super().__init__(f"Round {round_id} already has a summary")


class RoundNotFoundError(CompactionError):
    """
    Exception raised when a round id does not exist in the conversation.
    """

    def __init__(self, round_id: str):
        self.round_id = round_id
        super().__init__(f"Round {round_id} not found in conversation")


class CompactionCancelledError(CompactionError):
    """
    Exception raised when the external cancellation signal aborts an attempt.
    """

    def __init__(self, step: str):
        self.step = step
        super().__init__(f"Compaction cancelled during step '{step}'")
