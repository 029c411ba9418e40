"""Render whole request objects.

Each entry point builds the variable table once, renders every templated
field of the request and returns a new request of the same type. The first
field that fails aborts the whole request; no partially rendered request
is ever returned.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from reqtmpl.models import (
    Environment,
    GrpcRequest,
    HttpRequest,
    HttpRequestHeader,
    HttpUrlParameter,
    WebsocketRequest,
)
from reqtmpl.placeholders import apply_path_placeholders
from reqtmpl.render.renderer import JsonValue, parse_and_render, render_json_value_raw
from reqtmpl.render.resolver import make_vars_table
from reqtmpl.render.spec import RenderOptions, WindowContext

if TYPE_CHECKING:
    from reqtmpl.functions.base import TemplateCallback


async def render_template(
    template: str,
    environment_chain: Sequence[Environment],
    cb: TemplateCallback,
    options: Optional[RenderOptions] = None,
    context: Optional[WindowContext] = None,
) -> str:
    variables = make_vars_table(environment_chain)
    return await parse_and_render(template, variables, cb, options, context)


async def render_json_value(
    value: JsonValue,
    environment_chain: Sequence[Environment],
    cb: TemplateCallback,
    options: Optional[RenderOptions] = None,
    context: Optional[WindowContext] = None,
) -> JsonValue:
    variables = make_vars_table(environment_chain)
    return await render_json_value_raw(value, variables, cb, options, context)


async def _render_pairs(pairs, variables, cb, options, context) -> List[Any]:
    """Render name and value of header-like entries, keeping their type."""
    rendered = []
    for p in pairs:
        rendered.append(
            p.model_copy(
                update={
                    "name": await parse_and_render(p.name, variables, cb, options, context),
                    "value": await parse_and_render(p.value, variables, cb, options, context),
                }
            )
        )
    return rendered


async def _render_map(
    values: Mapping[str, Any], variables, cb, options, context
) -> Dict[str, Any]:
    rendered: Dict[str, Any] = {}
    for key, value in values.items():
        rendered[key] = await render_json_value_raw(value, variables, cb, options, context)
    return rendered


async def render_http_request(
    r: HttpRequest,
    environment_chain: Sequence[Environment],
    cb: TemplateCallback,
    options: Optional[RenderOptions] = None,
    context: Optional[WindowContext] = None,
) -> HttpRequest:
    """Render url, url parameters, headers, body and authentication.

    Path placeholders are applied to the rendered URL afterwards.
    """
    variables = make_vars_table(environment_chain)

    url_parameters: List[HttpUrlParameter] = await _render_pairs(
        r.url_parameters, variables, cb, options, context
    )
    headers: List[HttpRequestHeader] = await _render_pairs(
        r.headers, variables, cb, options, context
    )
    body = await _render_map(r.body, variables, cb, options, context)
    authentication = await _render_map(r.authentication, variables, cb, options, context)
    url = await parse_and_render(r.url, variables, cb, options, context)

    url, url_parameters = apply_path_placeholders(url, url_parameters)

    return r.model_copy(
        update={
            "url": url,
            "url_parameters": url_parameters,
            "headers": headers,
            "body": body,
            "authentication": authentication,
        }
    )


async def render_grpc_request(
    r: GrpcRequest,
    environment_chain: Sequence[Environment],
    cb: TemplateCallback,
    options: Optional[RenderOptions] = None,
    context: Optional[WindowContext] = None,
) -> GrpcRequest:
    """Render url, metadata, authentication and message."""
    variables = make_vars_table(environment_chain)

    metadata = await _render_pairs(r.metadata, variables, cb, options, context)
    authentication = await _render_map(r.authentication, variables, cb, options, context)
    url = await parse_and_render(r.url, variables, cb, options, context)
    message = await parse_and_render(r.message, variables, cb, options, context)

    return r.model_copy(
        update={
            "url": url,
            "metadata": metadata,
            "authentication": authentication,
            "message": message,
        }
    )


async def render_websocket_request(
    r: WebsocketRequest,
    environment_chain: Sequence[Environment],
    cb: TemplateCallback,
    options: Optional[RenderOptions] = None,
    context: Optional[WindowContext] = None,
) -> WebsocketRequest:
    """Render url, headers, authentication and message."""
    variables = make_vars_table(environment_chain)

    headers = await _render_pairs(r.headers, variables, cb, options, context)
    authentication = await _render_map(r.authentication, variables, cb, options, context)
    url = await parse_and_render(r.url, variables, cb, options, context)
    message = await parse_and_render(r.message, variables, cb, options, context)

    return r.model_copy(
        update={
            "url": url,
            "headers": headers,
            "authentication": authentication,
            "message": message,
        }
    )
