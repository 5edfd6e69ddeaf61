"""Prompt rendering for summarization requests.

A renderer turns a virtual prompt context into role-tagged chat messages plus a
token count. ``DefaultPromptRenderer`` renders plain-text messages so that any
chat-completion endpoint accepts them.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from ..core.config import TemplateKind
from ..core.errors import RenderError
from .prompts import SUMMARY_ASSISTANT_ACK, SUMMARY_USER_PREFIX, SYSTEM_PROMPT, TEMPLATES
from .tokens import estimate_messages_tokens

if TYPE_CHECKING:
    from ..compaction.virtual_context import RoundView, VirtualPromptContext
    from ..llm.endpoints.base import EndpointInfo

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOOL_RESULT_LENGTH = 10_000


class RenderedPrompt(BaseModel):
    """Messages ready to send, with their estimated size."""

    messages: list[dict[str, Any]]
    token_count: int


class PromptRenderer(ABC):
    """Renders a virtual prompt context for a specific endpoint."""

    @abstractmethod
    async def render(
        self,
        endpoint: EndpointInfo,
        template_kind: TemplateKind,
        virtual_context: VirtualPromptContext,
    ) -> RenderedPrompt:
        """
        Render the summarization prompt.

        Raises:
            RenderError: If the prompt cannot be assembled
        """
        pass


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + f"... [truncated {len(text) - limit} chars]"


class DefaultPromptRenderer(PromptRenderer):
    """Plain-text renderer for the summarization prompt.

    Layout: system prompt, the prior summary pair (if any), one user message per
    historic turn followed by one assistant message per round, then the
    summarization instructions. Rounds after the boundary are not rendered.
    """

    def __init__(
        self,
        max_tool_result_length: int = DEFAULT_MAX_TOOL_RESULT_LENGTH,
        templates: dict[TemplateKind, str] | None = None,
        enforce_prompt_limit: bool = True,
    ):
        self.max_tool_result_length = max_tool_result_length
        self.templates = {**TEMPLATES, **(templates or {})}
        self.enforce_prompt_limit = enforce_prompt_limit

    def format_tool_calls(self, round_: RoundView) -> str:
        lines = []
        for call in round_.tool_calls:
            arguments = call.arguments
            try:
                arguments = json.dumps(json.loads(arguments), sort_keys=True)
            except (TypeError, ValueError):
                # Not JSON, keep the raw text
                pass
            lines.append(f"- {call.name}({_truncate(arguments, self.max_tool_result_length)})")
        return "\n".join(lines)

    def format_round(self, round_: RoundView, render_tool_calls: bool) -> str:
        parts = []
        if round_.response:
            parts.append(_truncate(round_.response, self.max_tool_result_length))
        if render_tool_calls and round_.tool_calls:
            parts.append("Tool calls:\n" + self.format_tool_calls(round_))
        return "\n\n".join(parts) or "(no response)"

    def _render_instructions(
        self, template_kind: TemplateKind, virtual_context: VirtualPromptContext
    ) -> str:
        template = self.templates.get(template_kind)
        if template is None:
            raise RenderError(f"No template registered for '{template_kind.value}'")
        try:
            return template.format(query=virtual_context.query)
        except (KeyError, IndexError, ValueError) as e:
            raise RenderError(f"Invalid '{template_kind.value}' template: {e}") from e

    async def render(
        self,
        endpoint: EndpointInfo,
        template_kind: TemplateKind,
        virtual_context: VirtualPromptContext,
    ) -> RenderedPrompt:
        # A missing tools descriptor means tool-call rounds are not rendered
        render_tool_calls = virtual_context.tools is not None

        messages: list[dict[str, Any]] = [{"role": "system", "content": SYSTEM_PROMPT}]
        if virtual_context.prior_summary:
            messages.append(
                {"role": "user", "content": SUMMARY_USER_PREFIX + virtual_context.prior_summary}
            )
            messages.append({"role": "assistant", "content": SUMMARY_ASSISTANT_ACK})

        for turn in virtual_context.historic:
            messages.append({"role": "user", "content": turn.request})
            for round_index, round_ in enumerate(turn.rounds):
                try:
                    content = self.format_round(round_, render_tool_calls)
                except (TypeError, ValueError, KeyError) as e:
                    raise RenderError(
                        str(e), turn_index=turn.turn_index, round_index=round_index
                    ) from e
                messages.append({"role": "assistant", "content": content})

        messages.append(
            {"role": "user", "content": self._render_instructions(template_kind, virtual_context)}
        )

        token_count = estimate_messages_tokens(messages)
        limit = endpoint.max_prompt_tokens
        if self.enforce_prompt_limit and limit is not None and token_count > limit:
            raise RenderError(
                f"Rendered prompt needs ~{token_count} tokens, endpoint {endpoint.model} "
                f"allows {limit}"
            )

        logger.debug(
            "Rendered summarization prompt: %d messages, ~%d tokens", len(messages), token_count
        )
        return RenderedPrompt(messages=messages, token_count=token_count)
