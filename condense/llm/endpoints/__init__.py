"""Chat endpoint implementations."""

from .base import (
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
