"""Reqtmpl - template rendering for request definitions"""

from reqtmpl._version import __version__
from reqtmpl.ast import Parser, Tokens, parse_template
from reqtmpl.escape import escape_template, unescape_template
from reqtmpl.exceptions import (
    DecodeError,
    FunctionExecutionError,
    FunctionNotFoundError,
    MissingContextError,
    MissingVariableError,
    ParseError,
    RenderError,
    RenderStackExceededError,
    TemplateError,
)
from reqtmpl.format_xml import format_xml
from reqtmpl.functions import (
    FunctionDescriptor,
    FunctionRegistry,
    TemplateCallback,
    TemplateFunction,
    default_registry,
)
from reqtmpl.models import (
    Environment,
    EnvironmentVariable,
    GrpcRequest,
    HttpRequest,
    HttpRequestHeader,
    HttpUrlParameter,
    WebsocketRequest,
)
from reqtmpl.placeholders import apply_path_placeholders
from reqtmpl.render import (
    ErrorBehavior,
    RenderOptions,
    RenderPurpose,
    WindowContext,
    make_vars_table,
    parse_and_render,
    render,
    render_grpc_request,
    render_http_request,
    render_json_value,
    render_json_value_raw,
    render_template,
    render_websocket_request,
    transform_args,
)

__all__ = [
    "__version__",
    # parsing
    "Parser",
    "Tokens",
    "parse_template",
    "escape_template",
    "unescape_template",
    "format_xml",
    # rendering
    "ErrorBehavior",
    "RenderOptions",
    "RenderPurpose",
    "WindowContext",
    "make_vars_table",
    "parse_and_render",
    "render",
    "render_json_value",
    "render_json_value_raw",
    "render_template",
    "render_http_request",
    "render_grpc_request",
    "render_websocket_request",
    "transform_args",
    "apply_path_placeholders",
    # functions
    "FunctionDescriptor",
    "FunctionRegistry",
    "TemplateCallback",
    "TemplateFunction",
    "default_registry",
    # models
    "Environment",
    "EnvironmentVariable",
    "GrpcRequest",
    "HttpRequest",
    "HttpRequestHeader",
    "HttpUrlParameter",
    "WebsocketRequest",
    # errors
    "TemplateError",
    "ParseError",
    "RenderError",
    "MissingVariableError",
    "FunctionNotFoundError",
    "FunctionExecutionError",
    "DecodeError",
    "MissingContextError",
    "RenderStackExceededError",
]
