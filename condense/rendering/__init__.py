"""Prompt rendering for summarization requests."""

from .prompts import (
    FULL_SUMMARY_PROMPT,
    SIMPLE_SUMMARY_PROMPT,
    SUMMARY_ASSISTANT_ACK,
    SUMMARY_USER_PREFIX,
)
from .renderer import DefaultPromptRenderer, PromptRenderer, RenderedPrompt
from .tokens import (
    estimate_content_tokens,
    estimate_message_tokens,
    estimate_messages_tokens,
    estimate_tokens,
    estimate_tool_call_tokens,
    estimate_tools_tokens,
)

__all__ = [
    "DefaultPromptRenderer",
    "FULL_SUMMARY_PROMPT",
    "PromptRenderer",
    "RenderedPrompt",
    "SIMPLE_SUMMARY_PROMPT",
    "SUMMARY_ASSISTANT_ACK",
    "SUMMARY_USER_PREFIX",
    "estimate_content_tokens",
    "estimate_message_tokens",
    "estimate_messages_tokens",
    "estimate_tokens",
    "estimate_tool_call_tokens",
    "estimate_tools_tokens",
]
