"""Decode the ``tools.v1`` custom options into typed annotation records.

The option messages are declared in a private descriptor pool rather than in a
generated ``_pb2`` module. Options arriving from protoc are parsed against the
default pool, where the extensions are unknown fields; re-parsing the
serialized options with an "envelope" message that declares the extension
numbers as ordinary fields recovers them without touching the default pool.

Mirrors proto/tools/v1/tool_metadata.proto.
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

from .models import FieldAnnotation, ToolAnnotation

PROTO_PACKAGE = "tools.v1"
PROTO_FILE = "tools/v1/tool_metadata.proto"

# Extension numbers on google.protobuf.MethodOptions / FieldOptions
TOOL_EXTENSION_NUMBER = 51234
FIELD_EXTENSION_NUMBER = 51235

_F = descriptor_pb2.FieldDescriptorProto


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file = descriptor_pb2.FileDescriptorProto(
        name=PROTO_FILE, package=PROTO_PACKAGE, syntax="proto3"
    )

    tool = file.message_type.add(name="ToolMetadata")
    tool.field.add(name="name", number=1, type=_F.TYPE_STRING, label=_F.LABEL_OPTIONAL)
    tool.field.add(name="description", number=2, type=_F.TYPE_STRING, label=_F.LABEL_OPTIONAL)

    meta = file.message_type.add(name="FieldMetadata")
    meta.field.add(name="description", number=1, type=_F.TYPE_STRING, label=_F.LABEL_OPTIONAL)
    meta.field.add(name="required", number=2, type=_F.TYPE_BOOL, label=_F.LABEL_OPTIONAL)
    meta.field.add(name="example", number=3, type=_F.TYPE_STRING, label=_F.LABEL_OPTIONAL)

    method_env = file.message_type.add(name="MethodOptionsEnvelope")
    method_env.field.add(
        name="tool",
        number=TOOL_EXTENSION_NUMBER,
        type=_F.TYPE_MESSAGE,
        type_name=f".{PROTO_PACKAGE}.ToolMetadata",
        label=_F.LABEL_OPTIONAL,
    )

    field_env = file.message_type.add(name="FieldOptionsEnvelope")
    field_env.field.add(
        name="field",
        number=FIELD_EXTENSION_NUMBER,
        type=_F.TYPE_MESSAGE,
        type_name=f".{PROTO_PACKAGE}.FieldMetadata",
        label=_F.LABEL_OPTIONAL,
    )
    return file


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name: str):
    return message_factory.GetMessageClass(
        _POOL.FindMessageTypeByName(f"{PROTO_PACKAGE}.{name}")
    )


ToolMetadata = _message_class("ToolMetadata")
FieldMetadata = _message_class("FieldMetadata")
_MethodOptionsEnvelope = _message_class("MethodOptionsEnvelope")
_FieldOptionsEnvelope = _message_class("FieldOptionsEnvelope")


def decode_tool_annotation(options: descriptor_pb2.MethodOptions) -> ToolAnnotation | None:
    """Return the method's tool annotation, or None when it carries none."""
    envelope = _MethodOptionsEnvelope.FromString(options.SerializeToString())
    if not envelope.HasField("tool"):
        return None
    return ToolAnnotation(name=envelope.tool.name, description=envelope.tool.description)


def decode_field_annotation(options: descriptor_pb2.FieldOptions) -> FieldAnnotation | None:
    """Return the field's annotation, or None when it carries none."""
    envelope = _FieldOptionsEnvelope.FromString(options.SerializeToString())
    if not envelope.HasField("field"):
        return None
    meta = envelope.field
    return FieldAnnotation(
        description=meta.description, required=meta.required, example=meta.example
    )


def method_options(name: str = "", description: str = "") -> descriptor_pb2.MethodOptions:
    """Build MethodOptions carrying a tool annotation, as protoc would send them."""
    envelope = _MethodOptionsEnvelope()
    envelope.tool.SetInParent()
    envelope.tool.name = name
    envelope.tool.description = description
    return descriptor_pb2.MethodOptions.FromString(envelope.SerializeToString())


def field_options(
    description: str = "", required: bool = False, example: str = ""
) -> descriptor_pb2.FieldOptions:
    """Build FieldOptions carrying a field annotation, as protoc would send them."""
    envelope = _FieldOptionsEnvelope()
    envelope.field.SetInParent()
    envelope.field.description = description
    envelope.field.required = required
    envelope.field.example = example
    return descriptor_pb2.FieldOptions.FromString(envelope.SerializeToString())
