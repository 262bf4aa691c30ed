"""Discover tool-eligible RPC methods and build their ToolSpecifications.

A method is a tool only when it carries the ``(tools.v1.tool)`` option;
everything else in the file is invisible to the generated output.
"""

from __future__ import annotations

import logging

from google.protobuf import descriptor_pb2

from .annotations import decode_field_annotation, decode_tool_annotation
from .errors import AnnotationError, NamingConflictError, SchemaError
from .loader import TypeIndex, qualified_name, resolve_type
from .models import (
    FIELD_MAP,
    FIELD_MESSAGE,
    FIELD_REPEATED,
    FIELD_SCALAR,
    FieldAnnotation,
    FieldSpecification,
    GenerationContext,
    ToolSpecification,
)
from .naming import build_constant_name, build_tool_name, is_valid_tool_name
from .options import PluginOptions

logger = logging.getLogger(__name__)

_F = descriptor_pb2.FieldDescriptorProto

_SCALAR_TYPES: dict[int, str] = {
    _F.TYPE_DOUBLE: "number",
    _F.TYPE_FLOAT: "number",
    _F.TYPE_INT64: "integer",
    _F.TYPE_UINT64: "integer",
    _F.TYPE_INT32: "integer",
    _F.TYPE_FIXED64: "integer",
    _F.TYPE_FIXED32: "integer",
    _F.TYPE_UINT32: "integer",
    _F.TYPE_SFIXED32: "integer",
    _F.TYPE_SFIXED64: "integer",
    _F.TYPE_SINT32: "integer",
    _F.TYPE_SINT64: "integer",
    _F.TYPE_BOOL: "boolean",
    _F.TYPE_STRING: "string",
    _F.TYPE_BYTES: "string",
    _F.TYPE_ENUM: "string",
}

# Map keys must render as JSON object keys
_MAP_KEY_TYPES = frozenset(
    t for t, json_type in _SCALAR_TYPES.items()
    if json_type in ("integer", "boolean") or t == _F.TYPE_STRING
)

# Well-known types rendered by their JSON mapping instead of their structure
_WELL_KNOWN_TYPES: dict[str, str] = {
    ".google.protobuf.Timestamp": "string",
    ".google.protobuf.Duration": "string",
    ".google.protobuf.FieldMask": "string",
    ".google.protobuf.DoubleValue": "number",
    ".google.protobuf.FloatValue": "number",
    ".google.protobuf.Int64Value": "integer",
    ".google.protobuf.UInt64Value": "integer",
    ".google.protobuf.Int32Value": "integer",
    ".google.protobuf.UInt32Value": "integer",
    ".google.protobuf.BoolValue": "boolean",
    ".google.protobuf.StringValue": "string",
    ".google.protobuf.BytesValue": "string",
    ".google.protobuf.Struct": "object",
    ".google.protobuf.Empty": "object",
}


def _element_type(field: descriptor_pb2.FieldDescriptorProto, owner: str) -> str:
    """Type reference for a single (non-repeated) value of the field."""
    if field.type == _F.TYPE_MESSAGE:
        return _WELL_KNOWN_TYPES.get(field.type_name, field.type_name)
    if field.type in _SCALAR_TYPES:
        return _SCALAR_TYPES[field.type]
    raise SchemaError(
        f"field {owner}.{field.name} has unsupported type "
        f"{_F.Type.Name(field.type)}"
    )


def _map_entry(
    field: descriptor_pb2.FieldDescriptorProto, index: TypeIndex
) -> descriptor_pb2.DescriptorProto | None:
    if field.label != _F.LABEL_REPEATED or field.type != _F.TYPE_MESSAGE:
        return None
    if field.type_name in _WELL_KNOWN_TYPES:
        return None
    entry = resolve_type(index, field.type_name)
    return entry if entry.options.map_entry else None


def describe_field(
    field: descriptor_pb2.FieldDescriptorProto,
    index: TypeIndex,
    owner: str = "",
) -> FieldSpecification:
    """Classify one field and attach its decoded annotation.

    ``owner`` is the containing message's full name, used in error messages.
    """
    annotation = decode_field_annotation(field.options)
    meta = annotation or FieldAnnotation()

    entry = _map_entry(field, index)
    if entry is not None:
        by_number = {f.number: f for f in entry.field}
        key, value = by_number.get(1), by_number.get(2)
        if key is None or value is None:
            raise SchemaError(f"map field {owner}.{field.name} has a malformed entry type")
        if key.type not in _MAP_KEY_TYPES:
            raise SchemaError(
                f"map field {owner}.{field.name} has unsupported key type "
                f"{_F.Type.Name(key.type)}"
            )
        kind = FIELD_MAP
        type_ref = _element_type(value, f"{owner}.{field.name}")
    elif field.label == _F.LABEL_REPEATED:
        kind = FIELD_REPEATED
        type_ref = _element_type(field, owner)
    else:
        type_ref = _element_type(field, owner)
        kind = FIELD_MESSAGE if type_ref.startswith(".") else FIELD_SCALAR

    return FieldSpecification(
        name=field.name,
        kind=kind,
        type_ref=type_ref,
        description=meta.description,
        example=meta.example,
        required=meta.required,
        annotated=annotation is not None,
    )


def _owner_label(file: descriptor_pb2.FileDescriptorProto, service: str, method: str) -> str:
    return f"{qualified_name(file, service, method)} ({file.name})"


def extract_tools(
    file: descriptor_pb2.FileDescriptorProto,
    index: TypeIndex,
    context: GenerationContext,
    options: PluginOptions | None = None,
) -> list[ToolSpecification]:
    """Return the file's tool specifications in declaration order."""
    options = options or PluginOptions()
    tools: list[ToolSpecification] = []
    constants: dict[str, str] = {}

    for service in file.service:
        for method in service.method:
            owner = _owner_label(file, service.name, method.name)
            annotation = decode_tool_annotation(method.options)
            if annotation is None:
                logger.debug("Skipping %s: no tool annotation", owner)
                continue

            if method.client_streaming or method.server_streaming:
                raise AnnotationError(f"{owner} is a streaming method and cannot be a tool")

            tool_name = annotation.name or build_tool_name(service.name, method.name)
            if not is_valid_tool_name(tool_name):
                raise AnnotationError(
                    f"{owner} declares invalid tool name {tool_name!r} "
                    "(expected 1-64 characters of [A-Za-z0-9_-])"
                )
            if options.require_descriptions and not annotation.description:
                raise AnnotationError(f"{owner} declares tool {tool_name!r} without a description")

            constant_name = build_constant_name(service.name, method.name)
            if constant_name in constants:
                raise NamingConflictError(
                    constant_name, constants[constant_name], owner, kind="identifier"
                )

            input_message = resolve_type(index, method.input_type)
            input_owner = method.input_type.lstrip(".")
            fields = []
            for field in input_message.field:
                spec = describe_field(field, index, input_owner)
                if not spec.annotated:
                    continue
                if options.require_descriptions and spec.required and not spec.description:
                    raise AnnotationError(
                        f"required field {input_owner}.{field.name} has no description"
                    )
                fields.append(spec)

            context.claim(tool_name, owner)
            constants[constant_name] = owner

            tools.append(ToolSpecification(
                tool_name=tool_name,
                description=annotation.description,
                service_name=service.name,
                method_name=method.name,
                full_method_name=qualified_name(file, service.name, method.name),
                input_type=method.input_type,
                constant_name=constant_name,
                fields=tuple(fields),
            ))

    return tools
