"""Summarization orchestrator.

One attempt is a straight pipeline:

1. select the boundary round
2. build the virtual context around it
3. render the summarization prompt
4. call the model once, with deterministic sampling
5. validate the text and return a SummarizationResult

Nothing here writes to the conversation; committing the result is the caller's
job (see ``summary_cache.commit_summary``).
"""

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable
from typing import Any, TypeVar

from ..core.config import CompactionConfig
from ..core.errors import (
    CompactionCancelledError,
    ModelError,
    NothingToSummarizeError,
    RenderError,
)
from ..features.tracing import get_tracer, mark_span_error
from ..llm.endpoints.base import ChatEndpoint, ChatResponse, RequestOptions, ResponseStatus
from ..rendering.renderer import PromptRenderer, RenderedPrompt
from ..rendering.tokens import estimate_tools_tokens
from ..tools.registry import ToolRegistry, to_function_schemas
from ..types.types import Conversation, ToolInfo
from .split import select_split_point
from .summary_cache import CommitResult, commit_summary
from .types import SummarizationResult
from .virtual_context import (
    PromptContext,
    VirtualPromptContext,
    build_prompt_context,
    build_virtual_context,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HistorySummarizer:
    """Runs one compaction attempt over a prompt context."""

    def __init__(
        self,
        renderer: PromptRenderer,
        endpoint: ChatEndpoint,
        tool_registry: ToolRegistry | None = None,
        config: CompactionConfig | None = None,
        cancel_event: asyncio.Event | None = None,
    ):
        """
        Args:
            renderer: Prompt renderer used for step 3
            endpoint: Chat endpoint used for the single model call
            tool_registry: Optional source of tool schemas for tool injection
            config: Attempt configuration (defaults to CompactionConfig())
            cancel_event: Optional external cancellation signal
        """
        self.renderer = renderer
        self.endpoint = endpoint
        self.tool_registry = tool_registry
        self.config = config or CompactionConfig()
        self.cancel_event = cancel_event

    def _log_step(self, message: str, *args: Any) -> None:
        level = logging.INFO if self.config.verbose_logging else logging.DEBUG
        logger.log(level, message, *args)

    def _check_cancelled(self, step: str) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            logger.info("Compaction cancelled before step '%s'", step)
            raise CompactionCancelledError(step)

    async def _await_cancellable(self, step: str, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the cancel event fires first."""
        if self.cancel_event is None:
            return await awaitable

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self.cancel_event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Compaction cancelled during step '%s'", step)
        raise CompactionCancelledError(step)

    def _available_tools(self, virtual_context: VirtualPromptContext) -> list[ToolInfo]:
        if self.tool_registry is not None:
            return self.tool_registry.tools
        if virtual_context.tools is None:
            return []
        return list(virtual_context.tools.available_tools)

    def build_request_options(self, virtual_context: VirtualPromptContext) -> RequestOptions:
        """Request options for the summarization call.

        Tool schemas are attached only when tool injection is on, and then the
        model is told not to call any of them.
        """
        options = RequestOptions(temperature=self.config.temperature, stream=False)
        if self.config.inject_tools:
            tools = self._available_tools(virtual_context)
            if tools:
                options.tools = to_function_schemas(tools)
                options.tool_choice = "none"
        return options

    async def _render(self, virtual_context: VirtualPromptContext) -> RenderedPrompt:
        try:
            return await self.renderer.render(
                self.endpoint.info, self.config.template_kind, virtual_context
            )
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(str(e)) from e

    async def _invoke(
        self, rendered: RenderedPrompt, options: RequestOptions
    ) -> ChatResponse:
        try:
            return await self._await_cancellable(
                "invoke_model", self.endpoint.invoke(rendered.messages, options)
            )
        except CompactionCancelledError:
            raise
        except Exception as e:
            raise ModelError(ResponseStatus.ERROR, str(e)) from e

    async def summarize(self, prompt_context: PromptContext) -> SummarizationResult:
        """
        Run one compaction attempt.

        Raises:
            NothingToSummarizeError: If fewer than two rounds are pending
            RenderError: If the prompt could not be rendered
            ModelError: If the model call failed or was filtered
            CompactionCancelledError: If the cancel event fired
        """
        tracer = get_tracer()
        with tracer.start_as_current_span(
            "compaction.attempt",
            attributes={
                "compaction.model": self.endpoint.info.model,
                "compaction.inject_tools": self.config.inject_tools,
                "compaction.keep_recent_rounds": self.config.keep_recent_rounds,
            },
        ) as span:
            try:
                result = await self._summarize(prompt_context, span)
            except Exception as e:
                mark_span_error(span, e)
                raise
            span.set_attribute("compaction.status", "completed")
            return result

    async def _summarize(self, prompt_context: PromptContext, span: Any) -> SummarizationResult:
        stopwatch = time.perf_counter()

        self._check_cancelled("select_boundary")
        boundary_round_id = select_split_point(
            prompt_context.all_rounds(), self.config.keep_recent_rounds
        )
        span.set_attribute("compaction.boundary_round_id", boundary_round_id)
        self._log_step("Selected summarization boundary at round %s", boundary_round_id)

        self._check_cancelled("build_virtual_context")
        virtual_context = build_virtual_context(prompt_context, boundary_round_id)
        self._log_step(
            "Virtual context: %d historic rounds, %d current rounds, prior summary: %s",
            len(virtual_context.historic_rounds()),
            len(virtual_context.current_rounds()),
            "yes" if virtual_context.prior_summary else "no",
        )

        self._check_cancelled("render_prompt")
        rendered = await self._render(virtual_context)
        span.set_attribute("compaction.token_count", rendered.token_count)
        self._log_step(
            "Rendered %d messages (~%d tokens)", len(rendered.messages), rendered.token_count
        )

        self._check_cancelled("invoke_model")
        options = self.build_request_options(virtual_context)
        tools_tokens = estimate_tools_tokens(options.tools)
        span.set_attribute("compaction.tools_token_count", tools_tokens)
        self._log_step(
            "Requesting summary from %s (temperature=%s, tools=%d ~%d tokens, tool_choice=%s)",
            self.endpoint.info.model,
            options.temperature,
            len(options.tools or []),
            tools_tokens,
            options.tool_choice,
        )
        response = await self._invoke(rendered, options)

        if response.status != ResponseStatus.SUCCESS:
            logger.warning(
                "Summarization request for round %s returned %s: %s",
                boundary_round_id,
                response.status.value,
                response.reason,
            )
            raise ModelError(response.status, response.reason)

        summary_text = response.text or ""
        elapsed_ms = (time.perf_counter() - stopwatch) * 1000
        span.set_attribute("compaction.empty_summary", summary_text == "")
        if not summary_text:
            logger.warning(
                "Summarization for round %s returned an empty summary "
                "(model=%s, tools injected=%s)",
                boundary_round_id,
                response.model or self.endpoint.info.model,
                options.tools is not None,
            )
        else:
            self._log_step(
                "Summary for round %s: %d chars in %.0fms",
                boundary_round_id,
                len(summary_text),
                elapsed_ms,
            )

        return SummarizationResult(
            boundary_round_id=boundary_round_id,
            summary_text=summary_text,
            model=response.model or self.endpoint.info.model,
            usage=response.usage,
            token_count=rendered.token_count,
            elapsed_ms=elapsed_ms,
        )


async def attempt_compaction(
    conversation: Conversation,
    renderer: PromptRenderer,
    endpoint: ChatEndpoint,
    *,
    tool_registry: ToolRegistry | None = None,
    config: CompactionConfig | None = None,
    cancel_event: asyncio.Event | None = None,
) -> SummarizationResult:
    """
    Summarize the compactable span of a conversation without committing it.

    When ``config`` is omitted it is derived from the debug flags as they are right
    now, so flag changes apply to the next attempt.

    Raises:
        NothingToSummarizeError: If the conversation has no turns or fewer than two
            rounds are pending
    """
    if not conversation.turns:
        raise NothingToSummarizeError(0)
    if config is None:
        config = CompactionConfig.from_debug_flags()
    available_tools = tool_registry.tools if tool_registry is not None else []
    prompt_context = build_prompt_context(conversation, available_tools)
    summarizer = HistorySummarizer(
        renderer,
        endpoint,
        tool_registry=tool_registry,
        config=config,
        cancel_event=cancel_event,
    )
    return await summarizer.summarize(prompt_context)


async def compact_conversation(
    conversation: Conversation,
    renderer: PromptRenderer,
    endpoint: ChatEndpoint,
    *,
    tool_registry: ToolRegistry | None = None,
    config: CompactionConfig | None = None,
    cancel_event: asyncio.Event | None = None,
    exclusive: bool = False,
) -> tuple[SummarizationResult, CommitResult | None]:
    """Attempt compaction and commit the summary onto its boundary round.

    An empty summary is returned but not committed (the commit result is None).
    """
    result = await attempt_compaction(
        conversation,
        renderer,
        endpoint,
        tool_registry=tool_registry,
        config=config,
        cancel_event=cancel_event,
    )
    if result.is_empty:
        return result, None
    return result, commit_summary(conversation, result, exclusive=exclusive)
