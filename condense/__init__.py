__version__ = "0.1.0"

# Core imports
from .compaction import (
    DEFAULT_KEEP_RECENT_ROUNDS,
    CommitResult,
    CommitStatus,
    HistorySummarizer,
    PromptContext,
    SummarizationResult,
    ToolsDescriptor,
    VirtualPromptContext,
    attempt_compaction,
    build_prompt_context,
    build_virtual_context,
    clear_all_summaries,
    clear_round_summary,
    commit_summary,
    compact_conversation,
    count_unsummarized,
    pending_rounds,
    select_split_point,
    summarized_rounds,
)
from .core.config import (
    CompactionConfig,
    SummarizationDebugFlags,
    TemplateKind,
    get_debug_flags,
    reset_debug_flags,
    set_debug_flags,
)
from .core.errors import (
    AlreadySummarizedError,
    CompactionCancelledError,
    CompactionError,
    ModelError,
    NothingToSummarizeError,
    RenderError,
    RoundNotFoundError,
)
from .llm import (
    ChatEndpoint,
    ChatResponse,
    EndpointInfo,
    RequestOptions,
    ResponseStatus,
    get_endpoint,
    register_endpoint,
)
from .rendering import DefaultPromptRenderer, PromptRenderer, RenderedPrompt
from .store import ConversationStore, InMemoryConversationStore
from .tools import StaticToolRegistry, ToolRegistry
from .types.types import (
    Conversation,
    Round,
    RoundSummaryRecord,
    ToolInfo,
    ToolInvocation,
    Turn,
    TurnRequest,
    TurnResultMetadata,
    TurnStatus,
    Usage,
    normalize_summaries_on_rounds,
)

__all__ = [
    "__version__",
    # Compaction
    "DEFAULT_KEEP_RECENT_ROUNDS",
    "CommitResult",
    "CommitStatus",
    "HistorySummarizer",
    "PromptContext",
    "SummarizationResult",
    "ToolsDescriptor",
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
    # Config
    "CompactionConfig",
    "SummarizationDebugFlags",
    "TemplateKind",
    "get_debug_flags",
    "reset_debug_flags",
    "set_debug_flags",
    # Errors
    "AlreadySummarizedError",
    "CompactionCancelledError",
    "CompactionError",
    "ModelError",
    "NothingToSummarizeError",
    "RenderError",
    "RoundNotFoundError",
    # LLM
    "ChatEndpoint",
    "ChatResponse",
    "EndpointInfo",
    "RequestOptions",
    "ResponseStatus",
    "get_endpoint",
    "register_endpoint",
    # Rendering
    "DefaultPromptRenderer",
    "PromptRenderer",
    "RenderedPrompt",
    # Store and tools
    "ConversationStore",
    "InMemoryConversationStore",
    "StaticToolRegistry",
    "ToolRegistry",
    # Types
    "Conversation",
    "Round",
    "RoundSummaryRecord",
    "ToolInfo",
    "ToolInvocation",
    "Turn",
    "TurnRequest",
    "TurnResultMetadata",
    "TurnStatus",
    "Usage",
    "normalize_summaries_on_rounds",
]
