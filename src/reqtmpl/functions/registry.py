"""Function registry.

Built-in functions:
- secure: decrypt a value stored encrypted against the workspace key
- keychain (alias keyring): read a password from the OS credential store
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from reqtmpl.exceptions import FunctionNotFoundError
from reqtmpl.functions.base import (
    FunctionArgs,
    FunctionDescriptor,
    TemplateCallback,
    TemplateFunction,
)
from reqtmpl.render.spec import WindowContext

log = logging.getLogger(__name__)


class FunctionRegistry(TemplateCallback):
    """A `TemplateCallback` that dispatches to registered functions.

    Functions are registered once, at startup, under their name and every
    alias. Lookups afterwards are read-only, so a registry can serve
    concurrent render passes.
    """

    def __init__(self, functions: Iterable[TemplateFunction] = ()):
        self._functions: Dict[str, TemplateFunction] = {}
        self._order: List[TemplateFunction] = []
        for fn in functions:
            self.register(fn)

    def register(self, fn: TemplateFunction) -> None:
        """Register `fn` under its name and aliases.

        Raises:
            ValueError: If one of the names is already taken.
        """
        names = fn.descriptor.names
        for name in names:
            if name in self._functions:
                raise ValueError(f"Template function already registered: {name}")
        for name in names:
            self._functions[name] = fn
        self._order.append(fn)
        log.debug("Registered template function %s", ", ".join(names))

    def get(self, name: str) -> TemplateFunction:
        if name in self._functions:
            return self._functions[name]
        raise FunctionNotFoundError(name)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def describe(self) -> List[FunctionDescriptor]:
        return [fn.descriptor for fn in self._order]

    async def execute(
        self, name: str, args: FunctionArgs, context: WindowContext
    ) -> str:
        fn = self.get(name)
        log.debug("Calling template function %s with args %s", name, sorted(args))
        return await fn.run(args, context)

    async def transform_arg(
        self, name: str, arg_name: str, value: str, context: WindowContext
    ) -> str:
        fn = self._functions.get(name)
        if fn is None:
            return value
        return await fn.transform_arg(arg_name, value, context)


def default_registry(
    encryptor: Optional[Any] = None, keyring_backend: Optional[Any] = None
) -> FunctionRegistry:
    """Create a registry with the built-in functions.

    Args:
        encryptor: An `Encryptor`. The ``secure`` function is only
            registered when one is given.
        keyring_backend: Object with a ``get_password(service, account)``
            method. Defaults to the `keyring` module.
    """
    from reqtmpl.functions.keychain import KeychainFunction
    from reqtmpl.functions.secure import SecureFunction

    registry = FunctionRegistry()
    if encryptor is not None:
        registry.register(SecureFunction(encryptor))
    registry.register(KeychainFunction(backend=keyring_backend))
    return registry
