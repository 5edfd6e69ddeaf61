"""Core configuration and errors."""

from .config import (
    CompactionConfig,
    SummarizationDebugFlags,
    TemplateKind,
    get_debug_flags,
    reset_debug_flags,
    set_debug_flags,
)
from .errors import (
    AlreadySummarizedError,
    CompactionCancelledError,
    CompactionError,
    ModelError,
    NothingToSummarizeError,
    RenderError,
    RoundNotFoundError,
)

__all__ = [
    "AlreadySummarizedError",
    "CompactionCancelledError",
    "CompactionConfig",
    "CompactionError",
    "ModelError",
    "NothingToSummarizeError",
    "RenderError",
    "RoundNotFoundError",
    "SummarizationDebugFlags",
    "TemplateKind",
    "get_debug_flags",
    "reset_debug_flags",
    "set_debug_flags",
]
