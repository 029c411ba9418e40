"""Reqtmpl Exceptions

Errors raised while parsing and rendering templates.
"""

from __future__ import annotations


class TemplateError(Exception):
    """Base exception for all template errors."""

    pass


class ParseError(TemplateError):
    """Raised when template source is malformed or a tag is unterminated."""

    def __init__(self, message: str, position: int | None = None):
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class RenderError(TemplateError):
    """Raised when a parsed template cannot be rendered."""

    pass


class MissingVariableError(RenderError):
    """Raised when a tag references a variable that is not defined."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Variable not found: {name}")


class FunctionNotFoundError(RenderError):
    """Raised when a tag calls a function that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Template function not found: {name}")


class FunctionExecutionError(RenderError):
    """Raised when a template function fails for a reason of its own."""

    def __init__(self, name: str, cause: BaseException | str):
        self.name = name
        self.cause = cause
        super().__init__(f"Failed to render {name}(): {cause}")


class DecodeError(RenderError):
    """Raised when a decoded payload is not valid UTF-8."""

    pass


class MissingContextError(RenderError):
    """Raised when a function needs window context that was not supplied."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} missing from window context")


class RenderStackExceededError(RenderError):
    """Raised when nested variable rendering recurses too deeply."""

    def __init__(self, depth: int):
        self.depth = depth
        super().__init__(
            f"Render stack exceeded at depth {depth}; "
            "a variable probably references itself"
        )
