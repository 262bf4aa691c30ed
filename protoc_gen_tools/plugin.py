"""Turn a CodeGeneratorRequest into a CodeGeneratorResponse.

Every output file is rendered before any is added to the response; a
ToolGenError anywhere in the run produces a response carrying only the error.
"""

from __future__ import annotations

import logging

from google.protobuf.compiler import plugin_pb2

from .codegen import render_file
from .errors import ToolGenError
from .extractor import extract_tools
from .loader import build_type_index, get_files_to_generate
from .models import GenerationContext
from .naming import output_file_name
from .options import NAME_SCOPE_FILE, PluginOptions, parse_parameter
from .schema_builder import attach_schemas

logger = logging.getLogger(__name__)


def build_files(
    request: plugin_pb2.CodeGeneratorRequest,
    options: PluginOptions,
) -> list[tuple[str, str]]:
    """Return (output name, content) pairs for every eligible file."""
    index = build_type_index(request.proto_file)
    context = GenerationContext()
    outputs: list[tuple[str, str]] = []

    for file in get_files_to_generate(request):
        if not file.service:
            logger.debug("Skipping %s: no services", file.name)
            continue
        if options.name_scope == NAME_SCOPE_FILE:
            context = GenerationContext()

        tools = extract_tools(file, index, context, options)
        tools = attach_schemas(tools, index)
        name = output_file_name(file.name, options.suffix)
        outputs.append((name, render_file(file, tools, options)))
        logger.info("Generated %s (%d tools)", name, len(tools))

    return outputs


def generate(
    request: plugin_pb2.CodeGeneratorRequest,
    options: PluginOptions | None = None,
) -> plugin_pb2.CodeGeneratorResponse:
    """Run the generator; options default to those parsed from request.parameter."""
    response = plugin_pb2.CodeGeneratorResponse()
    response.supported_features = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL

    try:
        if options is None:
            options = parse_parameter(request.parameter)
        outputs = build_files(request, options)
    except ToolGenError as exc:
        logger.error("Generation failed: %s", exc)
        response.error = str(exc)
        return response

    for name, content in outputs:
        response.file.add(name=name, content=content)
    return response
