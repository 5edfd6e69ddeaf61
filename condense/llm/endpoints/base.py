"""Base class and registry for chat-completion endpoints."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from pydantic import BaseModel

from ...types.types import Usage

# Endpoint registry - endpoint classes register themselves here
_ENDPOINT_REGISTRY: dict[str, type["ChatEndpoint"]] = {}


def register_endpoint(name: str):
    """
    Decorator to register a chat endpoint class.

    Usage:
        @register_endpoint("openai")
        class OpenAIChatEndpoint(ChatEndpoint):
            ...

    Args:
        name: Endpoint name (e.g., "openai")

    Returns:
        Decorator function
    """

    def decorator(cls: type["ChatEndpoint"]) -> type["ChatEndpoint"]:
        _ENDPOINT_REGISTRY[name.lower()] = cls
        return cls

    return decorator


class ResponseStatus(str, Enum):
    """Classification of a chat-completion response."""

    SUCCESS = "success"
    FILTERED = "filtered"
    ERROR = "error"


class EndpointInfo(BaseModel):
    """Static description of the model behind an endpoint."""

    model: str
    family: str | None = None
    max_prompt_tokens: int | None = None


class RequestOptions(BaseModel):
    """Options sent with a chat-completion request."""

    temperature: float | None = None
    stream: bool = False
    tool_choice: str | None = None
    tools: list[dict[str, Any]] | None = None


class ChatResponse(BaseModel):
    """Result of a chat-completion request."""

    status: ResponseStatus
    text: str = ""
    usage: Usage | None = None
    reason: str | None = None
    model: str | None = None

    @classmethod
    def success(cls, text: str, **kwargs) -> "ChatResponse":
        return cls(status=ResponseStatus.SUCCESS, text=text, **kwargs)

    @classmethod
    def filtered(cls, reason: str | None = None, **kwargs) -> "ChatResponse":
        return cls(status=ResponseStatus.FILTERED, reason=reason, **kwargs)

    @classmethod
    def error(cls, reason: str | None = None, **kwargs) -> "ChatResponse":
        return cls(status=ResponseStatus.ERROR, reason=reason, **kwargs)


class ChatEndpoint(ABC):
    """Base class for chat-completion endpoints."""

    info: EndpointInfo

    @abstractmethod
    async def invoke(
        self,
        messages: list[dict[str, Any]],
        options: RequestOptions,
    ) -> ChatResponse:
        """
        Make a single chat-completion request.

        Retries and streaming are the endpoint's own concern; callers issue one
        request and get one classified response back.

        Args:
            messages: List of message dicts with 'role' and 'content' keys
            options: Sampling and tool options for the request

        Returns:
            ChatResponse with status, text and usage
        """
        pass


def get_endpoint(endpoint_name: str, **kwargs) -> ChatEndpoint:
    """
    Get a chat endpoint instance by name from the registry.

    Endpoint modules are imported when first requested so that their SDKs stay
    optional.

    Args:
        endpoint_name: Name of the endpoint ("openai")
        **kwargs: Endpoint-specific initialization parameters

    Returns:
        ChatEndpoint instance

    Raises:
        ValueError: If the endpoint is not found or not supported
        ImportError: If the endpoint's SDK is not installed
    """
    endpoint_name_lower = endpoint_name.lower()

    endpoint_class = _ENDPOINT_REGISTRY.get(endpoint_name_lower)
    if endpoint_class:
        return endpoint_class(**kwargs)

    endpoint_modules = {
        "openai": ".openai",
    }

    if endpoint_name_lower not in endpoint_modules:
        available = ", ".join(sorted(endpoint_modules.keys()))
        raise ValueError(
            f"Unknown chat endpoint: {endpoint_name}. "
            f"Supported endpoints: {available}. "
            f"To use an endpoint, install it with: pip install condense[{endpoint_name_lower}]"
        )

    # Importing the module triggers its @register_endpoint decorator
    try:
        if endpoint_name_lower == "openai":
            from . import openai  # noqa: F401
    except ImportError as e:
        raise ImportError(
            f"Failed to import {endpoint_name} endpoint. "
            f"Install the required SDK with: pip install condense[{endpoint_name_lower}]"
        ) from e

    endpoint_class = _ENDPOINT_REGISTRY.get(endpoint_name_lower)
    if not endpoint_class:
        raise ValueError(
            f"Endpoint {endpoint_name} was imported but not registered. "
            f"This is likely a bug in the endpoint implementation."
        )

    return endpoint_class(**kwargs)
