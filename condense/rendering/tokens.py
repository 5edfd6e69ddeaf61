"""Size estimates for summarization requests.

Everything is measured with a ~4 characters per token heuristic. Besides message
text this counts what also travels in the request body: structured content
parts, tool calls carried on assistant messages, and injected tool schemas.
"""

import json
import math
from typing import Any

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Estimate token count for a string."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def _estimate_json_tokens(value: Any) -> int:
    try:
        return estimate_tokens(json.dumps(value, sort_keys=True))
    except (TypeError, ValueError):
        return 0


def estimate_content_tokens(content: Any) -> int:
    """Estimate the ``content`` field of a message.

    Text parts of a structured content list count by their text only; any other
    part (images, files) counts by its serialized form.
    """
    if content is None:
        return 0
    if isinstance(content, str):
        return estimate_tokens(content)
    if isinstance(content, list):
        total = 0
        for part in content:
            if isinstance(part, dict) and part.get("type") == "text":
                total += estimate_tokens(str(part.get("text") or ""))
            elif isinstance(part, str):
                total += estimate_tokens(part)
            else:
                total += _estimate_json_tokens(part)
        return total
    return _estimate_json_tokens(content)


def estimate_tool_call_tokens(tool_call: dict[str, Any]) -> int:
    """Estimate one chat-completions tool call: function name plus raw arguments."""
    function = tool_call.get("function") or {}
    arguments = function.get("arguments") or ""
    if not isinstance(arguments, str):
        return estimate_tokens(function.get("name") or "") + _estimate_json_tokens(arguments)
    return estimate_tokens((function.get("name") or "") + arguments)


def estimate_message_tokens(message: dict[str, Any]) -> int:
    """Estimate token count for a single chat message."""
    total = estimate_content_tokens(message.get("content"))
    if message.get("name"):
        total += estimate_tokens(message["name"])
    for tool_call in message.get("tool_calls") or []:
        total += estimate_tool_call_tokens(tool_call)
    return total


def estimate_messages_tokens(messages: list[dict[str, Any]]) -> int:
    """Estimate total token count for a list of chat messages."""
    return sum(estimate_message_tokens(message) for message in messages)


def estimate_tools_tokens(tools: list[dict[str, Any]] | None) -> int:
    """Estimate the function schemas attached to a request."""
    if not tools:
        return 0
    return sum(_estimate_json_tokens(tool) for tool in tools)
