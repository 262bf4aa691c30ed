"""Shared fixtures: descriptor sets equivalent to the protos under tests/proto.

protoc is not needed to run the suite; the FileDescriptorProtos it would send
are built directly with descriptor_pb2, with annotation options encoded the
same way protoc encodes them.
"""

from __future__ import annotations

from typing import Any

import pytest
from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from protoc_gen_tools.annotations import PROTO_FILE, field_options, method_options

F = descriptor_pb2.FieldDescriptorProto


# ---------------------------------------------------------------------------
# Descriptor construction helpers
# ---------------------------------------------------------------------------

class ProtoFactory:
    """Small builder for FileDescriptorProtos used across the suite."""

    @staticmethod
    def file(name: str, package: str = "") -> descriptor_pb2.FileDescriptorProto:
        file = descriptor_pb2.FileDescriptorProto(name=name, package=package, syntax="proto3")
        file.dependency.append(PROTO_FILE)
        return file

    @staticmethod
    def message(parent: Any, name: str) -> descriptor_pb2.DescriptorProto:
        """Add a message to a file (message_type) or a message (nested_type)."""
        if isinstance(parent, descriptor_pb2.FileDescriptorProto):
            return parent.message_type.add(name=name)
        return parent.nested_type.add(name=name)

    @staticmethod
    def field(
        message: descriptor_pb2.DescriptorProto,
        name: str,
        number: int,
        type_: int = F.TYPE_STRING,
        *,
        type_name: str = "",
        repeated: bool = False,
        **annotation: Any,
    ) -> descriptor_pb2.FieldDescriptorProto:
        """Add a field; keyword arguments become its (tools.v1.field) option."""
        field = message.field.add(
            name=name,
            number=number,
            type=type_,
            label=F.LABEL_REPEATED if repeated else F.LABEL_OPTIONAL,
        )
        if type_name:
            field.type_name = type_name
        if annotation:
            field.options.CopyFrom(field_options(**annotation))
        return field

    @classmethod
    def map_field(
        cls,
        message: descriptor_pb2.DescriptorProto,
        full_message_name: str,
        name: str,
        number: int,
        value_type: int,
        *,
        value_type_name: str = "",
        key_type: int = F.TYPE_STRING,
        **annotation: Any,
    ) -> descriptor_pb2.FieldDescriptorProto:
        """Add a map field and its synthesized map-entry nested type."""
        entry_name = "".join(part.capitalize() for part in name.split("_")) + "Entry"
        entry = message.nested_type.add(name=entry_name)
        entry.options.map_entry = True
        cls.field(entry, "key", 1, key_type)
        cls.field(entry, "value", 2, value_type, type_name=value_type_name)
        return cls.field(
            message, name, number, F.TYPE_MESSAGE,
            type_name=f"{full_message_name}.{entry_name}",
            repeated=True,
            **annotation,
        )

    @staticmethod
    def service(file: descriptor_pb2.FileDescriptorProto, name: str) -> descriptor_pb2.ServiceDescriptorProto:
        return file.service.add(name=name)

    @staticmethod
    def method(
        service: descriptor_pb2.ServiceDescriptorProto,
        name: str,
        input_type: str,
        output_type: str,
        *,
        tool: dict[str, str] | None = None,
        client_streaming: bool = False,
        server_streaming: bool = False,
    ) -> descriptor_pb2.MethodDescriptorProto:
        """Add a method; ``tool`` becomes its (tools.v1.tool) option."""
        method = service.method.add(
            name=name,
            input_type=input_type,
            output_type=output_type,
            client_streaming=client_streaming,
            server_streaming=server_streaming,
        )
        if tool is not None:
            method.options.CopyFrom(method_options(**tool))
        return method

    @staticmethod
    def request(
        *files: descriptor_pb2.FileDescriptorProto,
        parameter: str = "",
        generate: list[str] | None = None,
    ) -> plugin_pb2.CodeGeneratorRequest:
        request = plugin_pb2.CodeGeneratorRequest(parameter=parameter)
        request.proto_file.extend(files)
        request.file_to_generate.extend(
            generate if generate is not None else [f.name for f in files]
        )
        return request


def build_catalog_file() -> descriptor_pb2.FileDescriptorProto:
    """tests/proto/catalog.proto"""
    p = ProtoFactory
    file = p.file("catalog.proto", "tool.catalog.v1")

    req = p.message(file, "GetWeatherRequest")
    p.field(req, "city", 1, description="City and optional units", required=True)
    p.field(req, "units", 2, description="Unit system for temperatures", example="metric")
    resp = p.message(file, "GetWeatherResponse")
    p.field(resp, "temperature", 1, F.TYPE_DOUBLE)
    undocumented = p.message(file, "UndocumentedRequest")
    p.field(undocumented, "secret", 1)
    p.message(file, "UndocumentedResponse")

    service = p.service(file, "ToolCatalog")
    p.method(
        service, "GetWeather",
        ".tool.catalog.v1.GetWeatherRequest", ".tool.catalog.v1.GetWeatherResponse",
        tool={"name": "get_weather", "description": "Look up the current weather for a city."},
    )
    p.method(
        service, "Undocumented",
        ".tool.catalog.v1.UndocumentedRequest", ".tool.catalog.v1.UndocumentedResponse",
    )
    return file


def build_invoice_file() -> descriptor_pb2.FileDescriptorProto:
    """tests/proto/invoice/v1/invoice.proto"""
    p = ProtoFactory
    file = p.file("invoice/v1/invoice.proto", "invoice.v1")

    req = p.message(file, "CreateInvoiceRequest")
    p.field(
        req, "invoice", 1, F.TYPE_MESSAGE, type_name=".invoice.v1.Invoice",
        description="info to create invoice", required=True,
    )
    resp = p.message(file, "CreateInvoiceResponse")
    p.field(resp, "invoice_id", 1)

    invoice = p.message(file, "Invoice")
    p.field(
        invoice, "customer_id", 1,
        description="Customer the invoice is billed to", required=True,
    )
    p.field(
        invoice, "line_items", 2, F.TYPE_MESSAGE,
        type_name=".invoice.v1.LineItem", repeated=True,
    )
    p.map_field(
        invoice, ".invoice.v1.Invoice", "tags", 3,
        F.TYPE_MESSAGE, value_type_name=".invoice.v1.TagValues",
    )

    line_item = p.message(file, "LineItem")
    p.field(line_item, "line_item_id", 1)
    p.field(line_item, "description", 2)

    tag_values = p.message(file, "TagValues")
    p.field(tag_values, "tag", 1, repeated=True)

    service = p.service(file, "InvoiceService")
    p.method(
        service, "CreateInvoice",
        ".invoice.v1.CreateInvoiceRequest", ".invoice.v1.CreateInvoiceResponse",
        tool={"name": "create_invoice", "description": "Create a new invoice for a customer."},
    )
    return file


def build_tree_file() -> descriptor_pb2.FileDescriptorProto:
    """A self-referential message: TreeNode { label, children[], parent }."""
    p = ProtoFactory
    file = p.file("tree.proto", "tree.v1")

    node = p.message(file, "TreeNode")
    p.field(node, "label", 1, description="Node label", required=True)
    p.field(node, "children", 2, F.TYPE_MESSAGE, type_name=".tree.v1.TreeNode", repeated=True)
    p.field(
        node, "parent", 3, F.TYPE_MESSAGE, type_name=".tree.v1.TreeNode",
        description="Parent node",
    )

    req = p.message(file, "WalkRequest")
    p.field(req, "root", 1, F.TYPE_MESSAGE, type_name=".tree.v1.TreeNode", required=True,
            description="Tree to walk")
    p.message(file, "WalkResponse")

    service = p.service(file, "TreeService")
    p.method(
        service, "Walk", ".tree.v1.WalkRequest", ".tree.v1.WalkResponse",
        tool={"description": "Walk a tree."},
    )
    return file


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def protos() -> type[ProtoFactory]:
    return ProtoFactory


@pytest.fixture
def catalog_file() -> descriptor_pb2.FileDescriptorProto:
    return build_catalog_file()


@pytest.fixture
def invoice_file() -> descriptor_pb2.FileDescriptorProto:
    return build_invoice_file()


@pytest.fixture
def tree_file() -> descriptor_pb2.FileDescriptorProto:
    return build_tree_file()


@pytest.fixture
def example_request() -> plugin_pb2.CodeGeneratorRequest:
    """Both example files in one run, as protoc would send them."""
    return ProtoFactory.request(build_catalog_file(), build_invoice_file())
