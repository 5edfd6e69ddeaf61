"""OpenAI chat-completions endpoint."""

import logging
import os
from typing import Any

from ...types.types import Usage
from .base import ChatEndpoint, ChatResponse, EndpointInfo, RequestOptions, register_endpoint

logger = logging.getLogger(__name__)


@register_endpoint("openai")
class OpenAIChatEndpoint(ChatEndpoint):
    """Chat endpoint backed by the OpenAI Chat Completions API."""

    def __init__(
        self,
        model: str = "gpt-4.1",
        api_key: str | None = None,
        base_url: str | None = None,
        family: str | None = None,
        max_prompt_tokens: int | None = None,
    ):
        """
        Initialize the OpenAI endpoint.

        Args:
            model: Model identifier (e.g., "gpt-4.1")
            api_key: OpenAI API key. If not provided, uses OPENAI_API_KEY env var.
            base_url: Optional base URL for OpenAI-compatible servers.
                     Defaults to OPENAI_BASE_URL or OpenAI's URL.
            family: Optional model family, reported to the prompt renderer
            max_prompt_tokens: Optional prompt token limit, reported to the prompt renderer
        """
        # Import OpenAI SDK only when this endpoint is used (lazy loading)
        try:
            from openai import AsyncOpenAI
        except ImportError:
            raise ImportError(
                "OpenAI SDK not installed. Install it with: pip install condense[openai]"
            ) from None

        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "OpenAI API key not provided. Set OPENAI_API_KEY environment variable "
                "or pass api_key parameter."
            )

        self.base_url = base_url or os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
        self.info = EndpointInfo(
            model=model, family=family or model, max_prompt_tokens=max_prompt_tokens
        )
        self.client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)

    def _build_request(
        self, messages: list[dict[str, Any]], options: RequestOptions
    ) -> dict[str, Any]:
        request: dict[str, Any] = {
            "model": self.info.model,
            "messages": messages,
            "stream": options.stream,
        }
        if options.temperature is not None:
            request["temperature"] = options.temperature
        if options.tools:
            request["tools"] = options.tools
            if options.tool_choice:
                request["tool_choice"] = options.tool_choice
        if options.stream:
            request["stream_options"] = {"include_usage": True}
        return request

    async def invoke(
        self,
        messages: list[dict[str, Any]],
        options: RequestOptions,
    ) -> ChatResponse:
        """
        Send one chat-completion request and classify the outcome.

        ``finish_reason == "content_filter"`` is reported as FILTERED and SDK
        errors as ERROR; nothing is retried here.
        """
        from openai import APIError

        request = self._build_request(messages, options)
        try:
            if options.stream:
                return await self._invoke_streaming(request)
            response = await self.client.chat.completions.create(**request)
        except APIError as e:
            logger.warning("OpenAI request for %s failed: %s", self.info.model, e)
            return ChatResponse.error(str(e), model=self.info.model)

        if not response.choices:
            return ChatResponse.error("Response contained no choices", model=response.model)

        choice = response.choices[0]
        usage = None
        if response.usage is not None:
            usage = Usage(
                input_tokens=response.usage.prompt_tokens or 0,
                output_tokens=response.usage.completion_tokens or 0,
                total_tokens=response.usage.total_tokens or 0,
            )

        if choice.finish_reason == "content_filter":
            return ChatResponse.filtered(
                "Response was filtered by the content filter", usage=usage, model=response.model
            )

        return ChatResponse.success(
            choice.message.content or "", usage=usage, model=response.model
        )

    async def _invoke_streaming(self, request: dict[str, Any]) -> ChatResponse:
        text_parts: list[str] = []
        finish_reason = None
        usage = None
        model = self.info.model

        stream = await self.client.chat.completions.create(**request)
        async for chunk in stream:
            model = chunk.model or model
            if chunk.usage is not None:
                usage = Usage(
                    input_tokens=chunk.usage.prompt_tokens or 0,
                    output_tokens=chunk.usage.completion_tokens or 0,
                    total_tokens=chunk.usage.total_tokens or 0,
                )
            if not chunk.choices:
                continue
            choice = chunk.choices[0]
            if choice.delta and choice.delta.content:
                text_parts.append(choice.delta.content)
            if choice.finish_reason:
                finish_reason = choice.finish_reason

        if finish_reason == "content_filter":
            return ChatResponse.filtered(
                "Response was filtered by the content filter", usage=usage, model=model
            )
        return ChatResponse.success("".join(text_parts), usage=usage, model=model)
