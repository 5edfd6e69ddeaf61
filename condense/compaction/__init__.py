"""Round-level compaction of conversation history."""

from .split import (
    DEFAULT_KEEP_RECENT_ROUNDS,
    count_unsummarized,
    pending_rounds,
    select_split_point,
)
from .summarizer import HistorySummarizer, attempt_compaction, compact_conversation
from .summary_cache import (
    CommitResult,
    CommitStatus,
    clear_all_summaries,
    clear_round_summary,
    commit_summary,
    summarized_rounds,
)
from .types import SummarizationResult
from .virtual_context import (
    PromptContext,
    RoundView,
    ToolsDescriptor,
    TurnView,
    VirtualPromptContext,
    build_prompt_context,
    build_virtual_context,
)

__all__ = [
    "DEFAULT_KEEP_RECENT_ROUNDS",
    "CommitResult",
    "CommitStatus",
    "HistorySummarizer",
    "PromptContext",
    "RoundView",
    "SummarizationResult",
    "ToolsDescriptor",
    "TurnView",
    "VirtualPromptContext",
    "attempt_compaction",
    "build_prompt_context",
    "build_virtual_context",
    "clear_all_summaries",
    "clear_round_summary",
    "commit_summary",
    "compact_conversation",
    "count_unsummarized",
    "pending_rounds",
    "select_split_point",
    "summarized_rounds",
]
