"""Derive tool names and Python identifiers from service/method names.

Pattern:
  - tool name (when not declared) -> {service}_{method} in snake case
  - name constant                 -> {SERVICE}_{METHOD}_TOOL
  - input schema constant         -> {SERVICE}_{METHOD}_INPUT_SCHEMA
  - dispatch function             -> call_{service}_{method}
  - tool constructor              -> define_{service}_{method}_tool
  - per-file aggregator           -> define_{file stem}_tools

Examples:
  ToolCatalog.GetWeather        -> tool_catalog_get_weather
                                   TOOL_CATALOG_GET_WEATHER_TOOL
                                   call_tool_catalog_get_weather
  InvoiceService.CreateInvoice  -> invoice_service_create_invoice
  invoice/v1/invoice.proto      -> invoice/v1/invoice_pb2_tools.py
                                   define_invoice_tools
"""

from __future__ import annotations

import keyword
import re

DEFAULT_SUFFIX = "_pb2_tools.py"

# Tool names accepted by agent runtimes / model providers
_TOOL_NAME_RE = re.compile(r"[A-Za-z0-9_-]{1,64}")


def _camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()


def _sanitize_segment(segment: str) -> str:
    """Sanitize a name segment for use in a Python identifier."""
    name = _camel_to_snake(segment)
    name = re.sub(r"[.\-]", "_", name)
    name = re.sub(r"[^a-z0-9_]", "", name)
    name = re.sub(r"_+", "_", name)
    return name.strip("_")


def _identifier(*segments: str) -> str:
    name = "_".join(s for s in (_sanitize_segment(seg) for seg in segments) if s)
    if not name or name[0].isdigit() or keyword.iskeyword(name):
        name = f"_{name}"
    return name


def build_tool_name(service: str, method: str) -> str:
    """Derive a tool name from service and method names."""
    return _identifier(service, method)


def is_valid_tool_name(name: str) -> bool:
    return bool(_TOOL_NAME_RE.fullmatch(name))


def build_constant_name(service: str, method: str) -> str:
    return _identifier(service, method, "tool").upper()


def build_schema_constant_name(service: str, method: str) -> str:
    return _identifier(service, method, "input_schema").upper()


def build_dispatch_name(service: str, method: str) -> str:
    return _identifier("call", service, method)


def build_define_name(service: str, method: str) -> str:
    return _identifier("define", service, method, "tool")


def _file_stem(proto_name: str) -> str:
    base = proto_name.rsplit("/", 1)[-1]
    return base[: -len(".proto")] if base.endswith(".proto") else base


def build_aggregator_name(proto_name: str) -> str:
    return _identifier("define", _file_stem(proto_name), "tools")


def output_file_name(proto_name: str, suffix: str = DEFAULT_SUFFIX) -> str:
    """Replace the .proto extension with the output suffix, keeping directories."""
    if proto_name.endswith(".proto"):
        proto_name = proto_name[: -len(".proto")]
    return proto_name + suffix
