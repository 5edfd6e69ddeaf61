from .types import (
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
