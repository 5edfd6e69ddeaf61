"""LLM endpoint abstractions."""

from .endpoints import (
    ChatEndpoint,
    ChatResponse,
    EndpointInfo,
    RequestOptions,
    ResponseStatus,
    get_endpoint,
    register_endpoint,
)

__all__ = [
    "ChatEndpoint",
    "ChatResponse",
    "EndpointInfo",
    "RequestOptions",
    "ResponseStatus",
    "get_endpoint",
    "register_endpoint",
]
