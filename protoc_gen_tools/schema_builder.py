"""Convert protobuf message types into nested schema descriptions.

Handles:
- scalar fields (description/example only when non-empty)
- repeated fields -> array wrapping the element schema
- map fields -> object wrapping the value message's own schema
- message fields -> recursive object schema
- required sets from field annotations only
- self-referential messages, cut off by an explicit active expansion path
"""

from __future__ import annotations

import logging
from dataclasses import replace

from .extractor import describe_field
from .loader import TypeIndex, resolve_type
from .models import (
    FIELD_MAP,
    FIELD_REPEATED,
    TYPE_OBJECT,
    FieldSpecification,
    SchemaNode,
    ToolSpecification,
)

logger = logging.getLogger(__name__)


def terminal_node() -> SchemaNode:
    """Node substituted for a message type re-entered on its own expansion path."""
    return SchemaNode.object()


def _type_node(type_ref: str, index: TypeIndex, active: frozenset[str]) -> SchemaNode:
    if type_ref == TYPE_OBJECT:
        return SchemaNode.object()
    if not type_ref.startswith("."):
        return SchemaNode.scalar(type_ref)
    if type_ref in active:
        logger.debug("Truncating recursive reference to %s", type_ref.lstrip("."))
        return terminal_node()
    return build_schema(type_ref, index, active)


def _field_node(spec: FieldSpecification, index: TypeIndex, active: frozenset[str]) -> SchemaNode:
    if spec.kind == FIELD_REPEATED:
        items = _type_node(spec.type_ref, index, active)
        return SchemaNode.array(items, spec.description, spec.example)

    if spec.kind == FIELD_MAP:
        value = _type_node(spec.type_ref, index, active)
        if value.is_object:
            return SchemaNode.object(
                value.properties, value.required or (), spec.description, spec.example
            )
        return SchemaNode.object(description=spec.description, example=spec.example)

    return _type_node(spec.type_ref, index, active).described(spec.description, spec.example)


def build_schema(
    type_name: str,
    index: TypeIndex,
    active: frozenset[str] = frozenset(),
) -> SchemaNode:
    """Build the object schema for a fully qualified message type.

    ``active`` holds the message types currently being expanded above this
    one; a type found there is rendered as terminal_node() instead of
    recursing.
    """
    message = resolve_type(index, type_name)
    active = active | {type_name}
    owner = type_name.lstrip(".")

    properties: dict[str, SchemaNode] = {}
    required: list[str] = []
    for field in message.field:
        spec = describe_field(field, index, owner)
        properties[spec.name] = _field_node(spec, index, active)
        if spec.required:
            required.append(spec.name)

    return SchemaNode.object(properties, required)


def attach_schemas(tools: list[ToolSpecification], index: TypeIndex) -> list[ToolSpecification]:
    """Return copies of ``tools`` with their input schema attached."""
    return [replace(tool, schema=build_schema(tool.input_type, index)) for tool in tools]
