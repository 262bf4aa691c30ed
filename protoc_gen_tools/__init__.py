"""protoc plugin that generates agent tool bindings from annotated protobuf services."""

from .errors import AnnotationError, NamingConflictError, OptionsError, SchemaError, ToolGenError
from .plugin import generate

__version__ = "0.1.0"

__all__ = [
    "generate",
    "ToolGenError",
    "OptionsError",
    "AnnotationError",
    "NamingConflictError",
    "SchemaError",
]
