"""Template function boundary.

The renderer never runs a function itself. It calls a `TemplateCallback`,
which may hop threads, processes or the network before answering. Built-in
functions are `TemplateFunction` strategy objects that a
`FunctionRegistry` dispatches to by name.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from reqtmpl.render.spec import WindowContext

ArgValue = Union[str, bool, None]
FunctionArgs = Dict[str, ArgValue]


class FunctionArg(BaseModel):
    """Declarative schema for one argument, used to build input forms."""

    type: str = "text"
    name: str
    label: str | None = None
    description: str | None = None
    placeholder: str | None = None
    default_value: str | None = None
    optional: bool = False
    multi_line: bool = False
    password: bool = False


class FunctionDescriptor(BaseModel):
    """Name, aliases and argument schema of a template function."""

    name: str
    description: str | None = None
    aliases: List[str] = Field(default_factory=list)
    args: List[FunctionArg] = Field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [self.name, *self.aliases]


class TemplateCallback(ABC):
    """Capabilities a render pass calls into.

    Implementations may be invoked from several render passes at once and
    must guard any shared resources themselves.
    """

    @abstractmethod
    def describe(self) -> List[FunctionDescriptor]:
        """List the known functions with their argument schemas."""
        ...

    @abstractmethod
    async def execute(
        self, name: str, args: FunctionArgs, context: WindowContext
    ) -> str:
        """Run function `name` with resolved arguments.

        Raises:
            FunctionNotFoundError: If no function is called `name`.
            RenderError: If the function fails.
        """
        ...

    @abstractmethod
    async def transform_arg(
        self, name: str, arg_name: str, value: str, context: WindowContext
    ) -> str:
        """Rewrite a literal argument before it is stored."""
        ...


class TemplateFunction(ABC):
    """A single named template function."""

    @property
    @abstractmethod
    def descriptor(self) -> FunctionDescriptor:
        ...

    @property
    def name(self) -> str:
        return self.descriptor.name

    @abstractmethod
    async def run(self, args: FunctionArgs, context: WindowContext) -> str:
        """Produce the function's output for the given arguments."""
        ...

    async def transform_arg(
        self, arg_name: str, value: str, context: WindowContext
    ) -> str:
        """Rewrite a stored argument. Most functions leave it alone."""
        return value


def string_arg(args: FunctionArgs, name: str) -> Optional[str]:
    """Return argument `name` if it is a string, otherwise None."""
    value = args.get(name)
    return value if isinstance(value, str) else None
