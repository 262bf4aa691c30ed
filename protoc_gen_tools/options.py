"""Plugin configuration.

protoc passes ``--tools_opt`` values (buf: ``opt:``) as a single comma
separated parameter string, e.g. ``name_scope=file,require_descriptions=true``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .errors import OptionsError
from .naming import DEFAULT_SUFFIX

LOG_LEVEL_ENV = "PROTOC_GEN_TOOLS_LOG_LEVEL"
DEFAULT_RUNTIME_MODULE = "protoc_gen_tools.runtime"

NAME_SCOPE_RUN = "run"
NAME_SCOPE_FILE = "file"

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


@dataclass(frozen=True)
class PluginOptions:
    suffix: str = DEFAULT_SUFFIX
    name_scope: str = NAME_SCOPE_RUN
    require_descriptions: bool = False
    runtime_module: str = DEFAULT_RUNTIME_MODULE


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise OptionsError(f"option {key!r} expects a boolean, got {value!r}")


def parse_parameter(parameter: str) -> PluginOptions:
    """Parse the protoc plugin parameter string into PluginOptions."""
    values: dict[str, object] = {}
    for item in parameter.split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, value = item.partition("=")
        key = key.strip()
        value = value.strip()
        if not sep:
            raise OptionsError(f"option {key!r} is missing a value (expected key=value)")

        if key == "suffix":
            if not value.endswith(".py"):
                raise OptionsError(f"suffix must end with '.py', got {value!r}")
            values["suffix"] = value
        elif key == "name_scope":
            if value not in (NAME_SCOPE_RUN, NAME_SCOPE_FILE):
                raise OptionsError(
                    f"name_scope must be {NAME_SCOPE_RUN!r} or {NAME_SCOPE_FILE!r}, got {value!r}"
                )
            values["name_scope"] = value
        elif key == "require_descriptions":
            values["require_descriptions"] = _parse_bool(key, value)
        elif key == "runtime_module":
            if not all(part.isidentifier() for part in value.split(".")):
                raise OptionsError(f"runtime_module is not a module path: {value!r}")
            values["runtime_module"] = value
        else:
            raise OptionsError(f"unknown option {key!r}")
    return PluginOptions(**values)  # type: ignore[arg-type]


def get_log_level() -> int:
    """Log level from PROTOC_GEN_TOOLS_LOG_LEVEL (name or number), default WARNING."""
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip()
    if not raw:
        return logging.WARNING
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else logging.WARNING
