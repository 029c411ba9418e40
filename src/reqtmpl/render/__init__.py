"""Rendering of parsed templates."""

from reqtmpl.render.renderer import (
    parse_and_render,
    render,
    render_json_value_raw,
    transform_args,
)
from reqtmpl.render.request import (
    render_grpc_request,
    render_http_request,
    render_json_value,
    render_template,
    render_websocket_request,
)
from reqtmpl.render.resolver import make_vars_table
from reqtmpl.render.spec import ErrorBehavior, RenderOptions, RenderPurpose, WindowContext

__all__ = [
    "parse_and_render",
    "render",
    "render_json_value_raw",
    "transform_args",
    "render_grpc_request",
    "render_http_request",
    "render_json_value",
    "render_template",
    "render_websocket_request",
    "make_vars_table",
    "ErrorBehavior",
    "RenderOptions",
    "RenderPurpose",
    "WindowContext",
]
