"""Split-point selection.

Decides which rounds stay verbatim and which leading rounds form the span that the
next summarization must cover. Pure functions of round order and summary presence.
"""

from collections.abc import Sequence

from ..core.errors import NothingToSummarizeError
from ..types.types import Round

DEFAULT_KEEP_RECENT_ROUNDS = 2


def pending_rounds(rounds: Sequence[Round]) -> list[Round]:
    """Return the unsummarized rounds after the last summarized one.

    A summary on a round stands for that round and everything before it, so only
    the tail after the most recent summary is still pending.
    """
    start = 0
    for index, round_ in enumerate(rounds):
        if round_.has_summary:
            start = index + 1
    return list(rounds[start:])


def count_unsummarized(rounds: Sequence[Round]) -> int:
    return sum(1 for round_ in rounds if not round_.has_summary)


def select_split_point(
    rounds: Sequence[Round], keep_recent_rounds: int = DEFAULT_KEEP_RECENT_ROUNDS
) -> str:
    """
    Select the boundary round: the last round of the span to summarize.

    Previously summarized rounds are skipped. Of the pending rounds, the most
    recent ``keep_recent_rounds`` stay verbatim; the count is clamped so that at
    least one round is summarized and at least one is kept.

    Args:
        rounds: All rounds of the conversation, oldest first
        keep_recent_rounds: Number of trailing pending rounds to keep verbatim

    Returns:
        Id of the boundary round

    Raises:
        NothingToSummarizeError: If fewer than two pending rounds exist
        ValueError: If keep_recent_rounds is less than 1
    """
    if keep_recent_rounds < 1:
        raise ValueError("keep_recent_rounds must be at least 1")

    pending = pending_rounds(rounds)
    if len(pending) < 2:
        raise NothingToSummarizeError(len(pending))

    keep = min(keep_recent_rounds, len(pending) - 1)
    return pending[len(pending) - keep - 1].id
