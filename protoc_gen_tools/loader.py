"""Load a CodeGeneratorRequest and index its message types.

protoc sends every transitive dependency of the files to generate in
``proto_file``, in topological order, so the index built here is complete
before any schema is rendered.
"""

from __future__ import annotations

import sys
from typing import BinaryIO, Iterable, Iterator

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from .errors import SchemaError

TypeIndex = dict[str, descriptor_pb2.DescriptorProto]


def load_request(stream: BinaryIO | None = None) -> plugin_pb2.CodeGeneratorRequest:
    """Read a serialized CodeGeneratorRequest (stdin by default)."""
    data = (stream or sys.stdin.buffer).read()
    return plugin_pb2.CodeGeneratorRequest.FromString(data)


def get_files_to_generate(
    request: plugin_pb2.CodeGeneratorRequest,
) -> list[descriptor_pb2.FileDescriptorProto]:
    """Return the FileDescriptorProtos named in file_to_generate, in request order."""
    by_name = {f.name: f for f in request.proto_file}
    files = []
    for name in request.file_to_generate:
        if name not in by_name:
            raise SchemaError(f"file to generate {name!r} missing from proto_file")
        files.append(by_name[name])
    return files


def _walk_messages(
    prefix: str, messages: Iterable[descriptor_pb2.DescriptorProto]
) -> Iterator[tuple[str, descriptor_pb2.DescriptorProto]]:
    for message in messages:
        full_name = f"{prefix}.{message.name}"
        yield full_name, message
        yield from _walk_messages(full_name, message.nested_type)


def build_type_index(files: Iterable[descriptor_pb2.FileDescriptorProto]) -> TypeIndex:
    """Map fully qualified message names (".pkg.Msg") to their descriptors."""
    index: TypeIndex = {}
    for file in files:
        prefix = f".{file.package}" if file.package else ""
        for full_name, message in _walk_messages(prefix, file.message_type):
            index[full_name] = message
    return index


def resolve_type(index: TypeIndex, type_name: str) -> descriptor_pb2.DescriptorProto:
    """Resolve a fully qualified type name against the index."""
    try:
        return index[type_name]
    except KeyError:
        raise SchemaError(f"unresolved message type {type_name!r}") from None


def qualified_name(file: descriptor_pb2.FileDescriptorProto, *parts: str) -> str:
    """Join a file's package with element names, without a leading dot."""
    return ".".join(p for p in (file.package, *parts) if p)
