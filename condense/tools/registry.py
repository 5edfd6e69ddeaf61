"""Tool registry used to describe tools to the summarization request.

Tools are only described, never invoked, while summarizing.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Any

from ..types.types import ToolInfo


class ToolRegistry(ABC):
    """Source of the currently invocable tools."""

    @property
    @abstractmethod
    def tools(self) -> list[ToolInfo]:
        pass


class StaticToolRegistry(ToolRegistry):
    """Registry over a fixed list of tools."""

    def __init__(self, tools: Iterable[ToolInfo | dict[str, Any]] | None = None):
        self._tools: dict[str, ToolInfo] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: ToolInfo | dict[str, Any]) -> ToolInfo:
        """Add or replace a tool, keyed by name."""
        if isinstance(tool, dict):
            tool = ToolInfo.model_validate(tool)
        self._tools[tool.name] = tool
        return tool

    def unregister(self, name: str) -> None:
        self._tools.pop(name, None)

    @property
    def tools(self) -> list[ToolInfo]:
        return list(self._tools.values())


def to_function_schemas(tools: Sequence[ToolInfo]) -> list[dict[str, Any]]:
    """Convert tools to OpenAI function-tool schemas."""
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
            },
        }
        for tool in tools
    ]
