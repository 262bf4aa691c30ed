"""Names imported by generated ``*_pb2_tools.py`` modules.

Generated modules only depend on this file; the agent runtime that registers
the returned Tool objects is up to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, NewType

ToolName = NewType("ToolName", str)


class ToolError(Exception):
    """Base exception raised by generated tool code."""


class MissingInputError(ToolError, ValueError):
    """Raised by a dispatch function when a required input is absent or empty."""


class ToolDefinitionError(ToolError, TypeError):
    """Raised when an implementation cannot back a tool."""


@dataclass(frozen=True)
class Tool:
    """A named, schema-described operation ready to register with an agent."""

    name: ToolName
    description: str
    input_schema: dict[str, Any]
    input_type: str
    fn: Callable[[Any], Any]

    def __call__(self, request: Any) -> Any:
        return self.fn(request)


def is_empty_input(request: Any) -> bool:
    """True for None, an empty mapping, or a protobuf message with no fields set."""
    if request is None:
        return True
    if isinstance(request, Mapping):
        return not request
    list_fields = getattr(request, "ListFields", None)
    if callable(list_fields):
        return not list_fields()
    return False


def require_method(impl: Any, method_name: str, tool_name: str) -> None:
    if not callable(getattr(impl, method_name, None)):
        raise ToolDefinitionError(
            f"{type(impl).__name__} does not implement {method_name} required by tool {tool_name!r}"
        )
