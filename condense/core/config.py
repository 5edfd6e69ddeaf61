"""Compaction configuration and the process-wide summarization debug flags.

``CompactionConfig`` is passed explicitly to every compaction attempt. The debug
flags are a single process-lifetime holder meant for interactive or
administrative overrides; when an attempt is started without an explicit config,
one is derived from the flags at that moment, so a change is picked up by the
very next attempt.
"""

import logging
import os
import threading
from enum import Enum

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).lower() == "true"


class TemplateKind(str, Enum):
    """Which summarization instructions the renderer should use."""

    FULL = "full"
    SIMPLE = "simple"


class SummarizationDebugFlags(BaseModel):
    """Runtime-settable toggles for summarization requests."""

    model_config = ConfigDict(validate_assignment=True)

    # Send tool schemas (with tool_choice="none") alongside the summarization request
    inject_tools: bool = False
    verbose_logging: bool = False

    @classmethod
    def from_env(cls) -> "SummarizationDebugFlags":
        return cls(
            inject_tools=_env_flag("CONDENSE_INJECT_TOOLS"),
            verbose_logging=_env_flag("CONDENSE_VERBOSE_LOGGING"),
        )


_debug_flags = SummarizationDebugFlags.from_env()
_debug_flags_lock = threading.Lock()


def get_debug_flags() -> SummarizationDebugFlags:
    """Return a snapshot of the current debug flags."""
    with _debug_flags_lock:
        return _debug_flags.model_copy()


def set_debug_flags(**changes: bool) -> SummarizationDebugFlags:
    """Update one or more debug flags and return the new snapshot.

    Raises:
        ValueError: If a flag name is unknown or a value fails validation
    """
    unknown = set(changes) - set(SummarizationDebugFlags.model_fields)
    if unknown:
        raise ValueError(f"Unknown debug flag(s): {', '.join(sorted(unknown))}")

    with _debug_flags_lock:
        for name, value in changes.items():
            setattr(_debug_flags, name, value)
        snapshot = _debug_flags.model_copy()

    logger.info("Summarization debug flags updated: %s", snapshot.model_dump())
    return snapshot


def reset_debug_flags() -> SummarizationDebugFlags:
    """Restore the flags to their environment-derived defaults."""
    global _debug_flags
    with _debug_flags_lock:
        _debug_flags = SummarizationDebugFlags.from_env()
        return _debug_flags.model_copy()


class CompactionConfig(BaseModel):
    """Per-attempt configuration for the summarization orchestrator."""

    model_config = ConfigDict(frozen=True)

    inject_tools: bool = False
    verbose_logging: bool = False
    # Unsummarized rounds kept verbatim after the boundary (at least one always is)
    keep_recent_rounds: int = Field(default=2, ge=1)
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    template_kind: TemplateKind = TemplateKind.FULL

    @classmethod
    def from_debug_flags(
        cls, flags: SummarizationDebugFlags | None = None, **overrides
    ) -> "CompactionConfig":
        """Build a config from the given (or current) debug flags."""
        if flags is None:
            flags = get_debug_flags()
        values = {
            "inject_tools": flags.inject_tools,
            "verbose_logging": flags.verbose_logging,
        }
        values.update(overrides)
        return cls(**values)
