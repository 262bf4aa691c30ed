"""Typed records passed between the extractor, schema builder and emitter."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from .errors import NamingConflictError

# FieldSpecification.kind values
FIELD_SCALAR = "scalar"
FIELD_MESSAGE = "message"
FIELD_REPEATED = "repeated"
FIELD_MAP = "map"

# SchemaNode.type values that are not scalars
TYPE_OBJECT = "object"
TYPE_ARRAY = "array"


@dataclass(frozen=True)
class ToolAnnotation:
    """Decoded ``(tools.v1.tool)`` method option."""

    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class FieldAnnotation:
    """Decoded ``(tools.v1.field)`` field option."""

    description: str = ""
    required: bool = False
    example: str = ""


@dataclass(frozen=True)
class FieldSpecification:
    """One field of a message, classified for schema rendering.

    ``type_ref`` is a JSON scalar type ("string", "integer", ...) or a fully
    qualified message name starting with a dot. For repeated fields it names
    the element type, for map fields the value type.
    """

    name: str
    kind: str
    type_ref: str
    description: str = ""
    example: str = ""
    required: bool = False
    annotated: bool = False

    @property
    def is_message_ref(self) -> bool:
        return self.type_ref.startswith(".")


@dataclass(frozen=True)
class SchemaNode:
    """Recursive description of the shape of a value."""

    type: str
    description: str = ""
    example: str = ""
    properties: dict[str, SchemaNode] | None = None
    items: SchemaNode | None = None
    required: tuple[str, ...] | None = None

    @classmethod
    def scalar(cls, type_: str, description: str = "", example: str = "") -> SchemaNode:
        return cls(type=type_, description=description, example=example)

    @classmethod
    def object(
        cls,
        properties: dict[str, SchemaNode] | None = None,
        required: tuple[str, ...] | list[str] = (),
        description: str = "",
        example: str = "",
    ) -> SchemaNode:
        return cls(
            type=TYPE_OBJECT,
            description=description,
            example=example,
            properties=dict(properties or {}),
            required=tuple(required),
        )

    @classmethod
    def array(cls, items: SchemaNode, description: str = "", example: str = "") -> SchemaNode:
        return cls(type=TYPE_ARRAY, description=description, example=example, items=items)

    @property
    def is_object(self) -> bool:
        return self.type == TYPE_OBJECT

    @property
    def is_array(self) -> bool:
        return self.type == TYPE_ARRAY

    def described(self, description: str = "", example: str = "") -> SchemaNode:
        """Return a copy carrying the given description/example where non-empty."""
        return replace(
            self,
            description=description or self.description,
            example=example or self.example,
        )

    def to_dict(self) -> dict[str, Any]:
        """Render as a plain nested dict, omitting empty attributes."""
        out: dict[str, Any] = {"type": self.type}
        if self.description:
            out["description"] = self.description
        if self.example:
            out["example"] = self.example
        if self.is_object:
            out["properties"] = {
                name: node.to_dict() for name, node in (self.properties or {}).items()
            }
        if self.is_array and self.items is not None:
            out["items"] = self.items.to_dict()
        if self.is_object and self.required:
            out["required"] = list(self.required)
        return out


@dataclass(frozen=True)
class ToolSpecification:
    tool_name: str
    description: str
    service_name: str
    method_name: str
    full_method_name: str
    input_type: str
    constant_name: str
    fields: tuple[FieldSpecification, ...] = ()
    schema: SchemaNode | None = None

    @property
    def input_required(self) -> bool:
        """True when any annotated input field is marked required."""
        return any(f.required for f in self.fields)


@dataclass
class GenerationContext:
    """Run-scoped bookkeeping of tool names already claimed.

    Owners are human-readable labels ("pkg.Service.Method (file.proto)") used
    in conflict messages.
    """

    claimed: dict[str, str] = field(default_factory=dict)

    def claim(self, name: str, owner: str) -> None:
        if name in self.claimed:
            raise NamingConflictError(name, self.claimed[name], owner)
        self.claimed[name] = owner
