"""Template functions and the callback boundary the renderer calls into."""

from reqtmpl.functions.base import (
    FunctionArg,
    FunctionDescriptor,
    TemplateCallback,
    TemplateFunction,
)
from reqtmpl.functions.registry import FunctionRegistry, default_registry

__all__ = [
    "FunctionArg",
    "FunctionDescriptor",
    "TemplateCallback",
    "TemplateFunction",
    "FunctionRegistry",
    "default_registry",
]
