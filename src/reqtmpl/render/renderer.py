"""Renderer - turns parsed tokens into output text.

Tags are evaluated strictly left to right, one at a time. A function call
is awaited to completion before the next token is looked at, so side
effects of functions (prompts, credential lookups) happen in source order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from reqtmpl.ast.parser import parse_template
from reqtmpl.ast.spec import (
    ArgVal,
    BoolVal,
    FnArg,
    FnVal,
    NullVal,
    RawToken,
    StrVal,
    TagToken,
    Token,
    Tokens,
    VarVal,
)
from reqtmpl.exceptions import (
    FunctionExecutionError,
    MissingVariableError,
    RenderError,
    RenderStackExceededError,
)
from reqtmpl.render.spec import ErrorBehavior, RenderOptions, WindowContext

if TYPE_CHECKING:
    from reqtmpl.functions.base import ArgValue, TemplateCallback

log = logging.getLogger(__name__)

MAX_DEPTH = 50

JsonValue = Any


async def render(
    tokens: Tokens,
    variables: Mapping[str, str],
    cb: TemplateCallback,
    options: Optional[RenderOptions] = None,
    context: Optional[WindowContext] = None,
) -> str:
    """Render `tokens` to text.

    Args:
        tokens: Parsed template.
        variables: Resolved variable table.
        cb: Callback used to execute function tags.
        options: Error policy for this pass.
        context: Window context passed through to functions.

    Raises:
        RenderError: Under `ErrorBehavior.THROW`, on the first tag that
            cannot be rendered.
    """
    return await _Render(variables, cb, options, context).tokens(tokens, 0)


async def parse_and_render(
    template: str,
    variables: Mapping[str, str],
    cb: TemplateCallback,
    options: Optional[RenderOptions] = None,
    context: Optional[WindowContext] = None,
) -> str:
    """Parse `template` and render it in one step."""
    return await _Render(variables, cb, options, context).template(template, 0)


async def render_json_value_raw(
    value: JsonValue,
    variables: Mapping[str, str],
    cb: TemplateCallback,
    options: Optional[RenderOptions] = None,
    context: Optional[WindowContext] = None,
) -> JsonValue:
    """Render every string leaf of a JSON-like value.

    Objects and arrays are rebuilt with rendered children. Object keys,
    numbers, booleans and null are returned unchanged.

    Raises:
        TypeError: If the value contains something that is not JSON.
    """
    return await _Render(variables, cb, options, context).json(value)


async def transform_args(
    tokens: Tokens,
    cb: TemplateCallback,
    context: Optional[WindowContext] = None,
) -> Tokens:
    """Pass every string literal function argument through the callback.

    Used before a template is stored, e.g. to encrypt a plaintext secret.
    Tags whose arguments change lose their original span and serialize
    canonically; everything else is returned as is.
    """
    context = context or WindowContext()
    out: List[Token] = []

    for token in tokens:
        if isinstance(token, TagToken) and isinstance(token.val, FnVal):
            fn = token.val
            args: List[FnArg] = []
            for arg in fn.args:
                if isinstance(arg.value, StrVal):
                    text = await cb.transform_arg(fn.name, arg.name, arg.value.text, context)
                    arg = FnArg(name=arg.name, value=StrVal(text))
                args.append(arg)
            token = token.with_val(FnVal(name=fn.name, args=args))
        out.append(token)

    return Tokens(out)


class _Render:
    """State for a single render pass. Holds only borrowed, read-only data."""

    def __init__(
        self,
        variables: Mapping[str, str],
        cb: TemplateCallback,
        options: Optional[RenderOptions],
        context: Optional[WindowContext],
    ):
        self.variables = variables
        self.cb = cb
        self.options = options or RenderOptions()
        self.context = context or WindowContext()

    @property
    def silent(self) -> bool:
        return self.options.error_behavior == ErrorBehavior.SILENT

    async def template(self, template: str, depth: int) -> str:
        if depth > MAX_DEPTH:
            raise RenderStackExceededError(depth)
        return await self.tokens(parse_template(template), depth)

    async def tokens(self, tokens: Tokens, depth: int) -> str:
        parts: List[str] = []
        for token in tokens:
            if isinstance(token, RawToken):
                parts.append(token.text)
            elif isinstance(token.val, VarVal):
                parts.append(await self.variable(token.val.name, depth))
            else:
                parts.append(await self.call(token.val, depth))
        return "".join(parts)

    async def variable(self, name: str, depth: int) -> str:
        if name not in self.variables:
            if self.silent:
                log.debug("Variable %s not found, rendering empty", name)
                return ""
            raise MissingVariableError(name)
        # variable values may contain tags of their own
        return await self.template(self.variables[name], depth + 1)

    async def argument(self, value: ArgVal, depth: int) -> ArgValue:
        if isinstance(value, StrVal):
            return value.text
        if isinstance(value, BoolVal):
            return value.value
        if isinstance(value, NullVal):
            return None
        return await self.variable(value.name, depth)

    async def call(self, fn: FnVal, depth: int) -> str:
        args: Dict[str, ArgValue] = {}
        for arg in fn.args:
            args[arg.name] = await self.argument(arg.value, depth)

        try:
            result = await self.cb.execute(fn.name, args, self.context)
        except RenderStackExceededError:
            raise
        except Exception as e:
            error = e if isinstance(e, RenderError) else FunctionExecutionError(fn.name, e)
            if self.silent:
                log.warning("Template function %s failed, rendering empty: %s", fn.name, error)
                return ""
            if error is e:
                raise
            raise error from e

        return result if result is not None else ""

    async def json(self, value: JsonValue) -> JsonValue:
        if isinstance(value, str):
            return await self.template(value, 0)
        if isinstance(value, dict):
            return {k: await self.json(v) for k, v in value.items()}
        if isinstance(value, list):
            return [await self.json(v) for v in value]
        if value is None or isinstance(value, (bool, int, float)):
            return value
        raise TypeError(f"Cannot render value of type {type(value).__name__}")
