"""Developer helpers for inspecting and exercising compaction.

Everything here reports through the module logger. Nothing in this module writes
a summary onto a round, except ``clear_summaries`` which removes them.
"""

import asyncio
import logging

from pydantic import BaseModel

from .compaction.split import (
    DEFAULT_KEEP_RECENT_ROUNDS,
    count_unsummarized,
    pending_rounds,
    select_split_point,
)
from .compaction.summarizer import attempt_compaction
from .compaction.summary_cache import clear_all_summaries, clear_round_summary
from .compaction.types import SummarizationResult
from .compaction.virtual_context import PromptContext, build_virtual_context
from .core.config import CompactionConfig, get_debug_flags, set_debug_flags
from .core.errors import NothingToSummarizeError
from .llm.endpoints.base import ChatEndpoint
from .rendering.renderer import PromptRenderer
from .store.conversation_store import ConversationStore
from .tools.registry import ToolRegistry
from .types.types import (
    Conversation,
    Round,
    ToolInvocation,
    Turn,
    TurnRequest,
    TurnStatus,
    normalize_summaries_on_rounds,
)

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


def _preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    return text if len(text) <= length else text[:length] + "..."


def _resolve_conversation(source: Conversation | ConversationStore) -> Conversation:
    """Accept a conversation directly or take the last one from a store."""
    if isinstance(source, ConversationStore):
        conversation = source.last_conversation
        if conversation is None:
            raise ValueError("No conversation available in store")
        return conversation
    return source


class RoundReport(BaseModel):
    index: int
    id: str
    tool_names: list[str]
    has_summary: bool


class TurnReport(BaseModel):
    index: int
    request_preview: str
    status: TurnStatus
    rounds: list[RoundReport]


class ConversationReport(BaseModel):
    """Structure of a conversation as seen by the compaction pipeline."""

    session_id: str
    turn_count: int
    total_rounds: int
    unsummarized_rounds: int
    pending_rounds: int
    turns: list[TurnReport]


def inspect_conversation(source: Conversation | ConversationStore) -> ConversationReport:
    """Describe turns, rounds, tools and summaries without calling any model.

    ``source`` may be a conversation or a store, whose last conversation is used.
    """
    conversation = _resolve_conversation(source)
    rounds = conversation.all_rounds()
    turns = [
        TurnReport(
            index=turn_index,
            request_preview=_preview(turn.request.message),
            status=turn.status,
            rounds=[
                RoundReport(
                    index=round_index,
                    id=round_.id,
                    tool_names=[call.name for call in round_.tool_calls],
                    has_summary=round_.has_summary,
                )
                for round_index, round_ in enumerate(turn.rounds)
            ],
        )
        for turn_index, turn in enumerate(conversation.turns)
    ]
    report = ConversationReport(
        session_id=conversation.session_id,
        turn_count=len(turns),
        total_rounds=len(rounds),
        unsummarized_rounds=count_unsummarized(rounds),
        pending_rounds=len(pending_rounds(rounds)),
        turns=turns,
    )

    logger.info("Session ID: %s", report.session_id)
    logger.info("Total turns: %d", report.turn_count)
    for turn in report.turns:
        logger.info('Turn %d: "%s"', turn.index, turn.request_preview)
        logger.info("  Status: %s", turn.status.value)
        logger.info("  Rounds: %d", len(turn.rounds))
        for round_ in turn.rounds:
            logger.info(
                "    Round %d: id=%s, tools=[%s], summary=%s",
                round_.index,
                round_.id,
                ", ".join(round_.tool_names) or "(no tools)",
                "YES" if round_.has_summary else "no",
            )
    logger.info("Total rounds across all turns: %d", report.total_rounds)
    logger.info(
        "Unsummarized rounds: %d (%d pending after the last summary)",
        report.unsummarized_rounds,
        report.pending_rounds,
    )
    return report


class SplitPreview(BaseModel):
    """Outcome of running split selection and the virtual context builder."""

    summarized_round_id: str
    historic_round_ids: list[str]
    current_round_ids: list[str]
    has_prior_summary: bool
    is_continuation: bool


def preview_split(
    prompt_context: PromptContext, keep_recent_rounds: int = DEFAULT_KEEP_RECENT_ROUNDS
) -> SplitPreview:
    """Run boundary selection and virtual context building only (no model call).

    Raises:
        NothingToSummarizeError: If fewer than two rounds are pending
    """
    boundary_round_id = select_split_point(prompt_context.all_rounds(), keep_recent_rounds)
    virtual_context = build_virtual_context(prompt_context, boundary_round_id)
    preview = SplitPreview(
        summarized_round_id=boundary_round_id,
        historic_round_ids=[round_.id for round_ in virtual_context.historic_rounds()],
        current_round_ids=[round_.id for round_ in virtual_context.current_rounds()],
        has_prior_summary=virtual_context.prior_summary is not None,
        is_continuation=virtual_context.is_continuation,
    )

    logger.info("summarized_round_id: %s", preview.summarized_round_id)
    for turn in virtual_context.historic:
        logger.info(
            "  Virtual historic turn %d: %s",
            turn.turn_index,
            [round_.id for round_ in turn.rounds],
        )
    for turn in virtual_context.current:
        logger.info(
            "  Virtual current turn %d: %s",
            turn.turn_index,
            [round_.id for round_ in turn.rounds],
        )
    return preview


async def dry_run_summarization(
    source: Conversation | ConversationStore,
    renderer: PromptRenderer,
    endpoint: ChatEndpoint,
    *,
    tool_registry: ToolRegistry | None = None,
    config: CompactionConfig | None = None,
    cancel_event: asyncio.Event | None = None,
) -> SummarizationResult:
    """
    Run a full summarization attempt and log the outcome without committing it.

    Summaries stored in turn metadata are normalized onto their rounds first, as
    the regular flow does. ``source`` may be a store, in which case its last
    conversation is used.

    Raises:
        NothingToSummarizeError, RenderError, ModelError, CompactionCancelledError
        ValueError: If ``source`` is a store holding no conversation
    """
    conversation = _resolve_conversation(source)
    flags = get_debug_flags()
    logger.info(
        "Using conversation %s with %d turns", conversation.session_id, len(conversation.turns)
    )
    logger.info("Using endpoint: %s", endpoint.info.model)
    logger.info("inject_tools=%s verbose_logging=%s", flags.inject_tools, flags.verbose_logging)

    normalize_summaries_on_rounds(conversation.turns)
    for turn_index, round_index, round_ in conversation.iter_rounds():
        logger.info(
            "  Turn %d Round %d: id=%s, summary=%s",
            turn_index,
            round_index,
            round_.id,
            "YES" if round_.has_summary else "no",
        )

    try:
        result = await attempt_compaction(
            conversation,
            renderer,
            endpoint,
            tool_registry=tool_registry,
            config=config or CompactionConfig.from_debug_flags(flags),
            cancel_event=cancel_event,
        )
    except NothingToSummarizeError:
        logger.error("Nothing to summarize: at least 2 pending rounds are required")
        raise

    logger.info("Request completed in %.0fms", result.elapsed_ms or 0.0)
    logger.info("summarized_round_id: %s", result.boundary_round_id)
    logger.info("Summary length: %d chars", len(result.summary_text))
    if result.is_empty:
        logger.warning(
            "Model returned an EMPTY summary (tool injection was %s)",
            "enabled" if flags.inject_tools else "disabled",
        )
    logger.info("--- BEGIN SUMMARY ---")
    for line in result.summary_text.split("\n"):
        logger.info("%s", line)
    logger.info("--- END SUMMARY ---")
    logger.info("Summary was NOT written to round.summary (dry run)")
    return result


def create_mock_conversation(session_id: str = "mock-session") -> Conversation:
    """Three finished turns of two rounds each, then a current turn with two rounds."""

    def make_round(round_id: str) -> Round:
        return Round(
            id=round_id,
            response=f"Response for {round_id}",
            tool_calls=[
                ToolInvocation(
                    id=f"tc-{round_id}", name="read_file", arguments='{"path": "/test.txt"}'
                )
            ],
        )

    turns = [
        Turn(
            id=f"turn{index}",
            request=TurnRequest(message=f"Mock request for turn{index}"),
            status=TurnStatus.SUCCESS,
            rounds=[make_round(f"turn{index}-round0"), make_round(f"turn{index}-round1")],
        )
        for index in range(3)
    ]
    turns.append(
        Turn(
            id="current",
            request=TurnRequest(message="Mock summarization request"),
            rounds=[make_round("current-round0"), make_round("current-round1")],
        )
    )
    return Conversation(session_id=session_id, turns=turns)


def toggle_tool_injection(enabled: bool | None = None) -> bool:
    """Set, or flip when ``enabled`` is None, the process-wide tool injection flag."""
    if enabled is None:
        enabled = not get_debug_flags().inject_tools
    set_debug_flags(inject_tools=enabled)
    logger.info("Summarization tool injection %s", "ENABLED" if enabled else "DISABLED")
    return enabled


def clear_summaries(
    source: Conversation | ConversationStore, round_id: str | None = None
) -> int:
    """Clear one round's summary, or all of them when ``round_id`` is None."""
    conversation = _resolve_conversation(source)
    if round_id is None:
        cleared = clear_all_summaries(conversation)
    else:
        cleared = 1 if clear_round_summary(conversation, round_id) else 0
    logger.info("Cleared %d round summary(ies)", cleared)
    return cleared
