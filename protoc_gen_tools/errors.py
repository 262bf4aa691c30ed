"""Generator-time exceptions.

Every failure raised while building a run derives from ToolGenError, so the
plugin can turn it into a CodeGeneratorResponse error with no files written.
"""

from __future__ import annotations


class ToolGenError(Exception):
    """Base exception for protoc-gen-tools generation failures."""


class OptionsError(ToolGenError):
    """Raised when the plugin parameter string cannot be parsed."""


class AnnotationError(ToolGenError):
    """Raised when tool or field annotations are malformed or conflicting."""


class NamingConflictError(AnnotationError):
    """Raised when two operations claim the same tool name or identifier."""

    def __init__(self, name: str, first: str, second: str, kind: str = "tool name") -> None:
        self.name = name
        self.first = first
        self.second = second
        super().__init__(f"{kind} {name!r} declared by {second} conflicts with {first}")


class SchemaError(ToolGenError):
    """Raised when a field shape cannot be mapped to a schema description."""


__all__ = [
    "ToolGenError",
    "OptionsError",
    "AnnotationError",
    "NamingConflictError",
    "SchemaError",
]
