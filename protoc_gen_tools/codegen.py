"""Render ToolSpecifications into a generated Python module.

Output is a pure function of the input: no timestamps, no versions, and
ordering follows declaration order throughout, so regenerating from an
unchanged request reproduces byte-identical text.
"""

from __future__ import annotations

import json
import keyword
from pathlib import Path
from typing import Any

import jinja2
from google.protobuf import descriptor_pb2

from .errors import SchemaError
from .models import ToolSpecification
from .naming import (
    build_aggregator_name,
    build_define_name,
    build_dispatch_name,
    build_schema_constant_name,
)
from .options import PluginOptions

TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "tools.py.j2"

_INDENT = "    "


def render_string(value: str) -> str:
    """Render a str as a double-quoted Python literal."""
    return json.dumps(value, ensure_ascii=False)


def render_literal(value: Any, level: int = 0) -> str:
    """Render nested dicts/lists of str, bool, int and None as Python source.

    Dicts put one key per line, indented ``level`` steps deeper than the line
    the literal starts on; lists are rendered inline.
    """
    if isinstance(value, dict):
        if not value:
            return "{}"
        pad = _INDENT * (level + 1)
        lines = [
            f"{pad}{render_string(str(key))}: {render_literal(item, level + 1)},"
            for key, item in value.items()
        ]
        return "{\n" + "\n".join(lines) + "\n" + _INDENT * level + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_literal(item, level) for item in value) + "]"
    if isinstance(value, str):
        return render_string(value)
    if value is None or isinstance(value, (bool, int)):
        return repr(value)
    raise TypeError(f"cannot render {type(value).__name__} as a literal")


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["pystr"] = render_string
    env.filters["pyliteral"] = render_literal
    return env


def _method_accessor(method_name: str) -> str:
    # Keywords such as "import" are valid proto method names but not attribute syntax.
    if method_name.isidentifier() and not keyword.iskeyword(method_name):
        return f"impl.{method_name}"
    return f"getattr(impl, {render_string(method_name)})"


def _tool_context(tool: ToolSpecification) -> dict[str, Any]:
    if tool.schema is None:
        raise SchemaError(f"no schema attached to {tool.full_method_name}")
    return {
        "tool_name": tool.tool_name,
        "description": tool.description,
        "method_name": tool.method_name,
        "method_accessor": _method_accessor(tool.method_name),
        "input_type": tool.input_type.lstrip("."),
        "input_required": tool.input_required,
        "missing_input_message": f"{tool.tool_name} requires input",
        "constant_name": tool.constant_name,
        "schema_name": build_schema_constant_name(tool.service_name, tool.method_name),
        "schema": tool.schema.to_dict(),
        "dispatch_name": build_dispatch_name(tool.service_name, tool.method_name),
        "define_name": build_define_name(tool.service_name, tool.method_name),
    }


def build_file_context(
    file: descriptor_pb2.FileDescriptorProto,
    tools: list[ToolSpecification],
    options: PluginOptions,
) -> dict[str, Any]:
    """Build the template context for one output module."""
    return {
        "source": file.name,
        "runtime_module": options.runtime_module,
        "aggregator_name": build_aggregator_name(file.name),
        "tools": [_tool_context(tool) for tool in tools],
        "tool_count": len(tools),
    }


def render_file(
    file: descriptor_pb2.FileDescriptorProto,
    tools: list[ToolSpecification],
    options: PluginOptions | None = None,
) -> str:
    """Render the generated module text for one proto file."""
    context = build_file_context(file, tools, options or PluginOptions())
    template = _environment().get_template(TEMPLATE_NAME)
    return template.render(**context)
