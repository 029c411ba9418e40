"""keychain - read a password from the OS keychain or keyring."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import keyring
from keyring.errors import KeyringError

from reqtmpl.exceptions import FunctionExecutionError
from reqtmpl.functions.base import (
    FunctionArg,
    FunctionArgs,
    FunctionDescriptor,
    TemplateFunction,
    string_arg,
)
from reqtmpl.render.spec import WindowContext

log = logging.getLogger(__name__)

KEYCHAIN_DESCRIPTOR = FunctionDescriptor(
    name="keychain",
    description="Get a password from the OS keychain or keyring",
    aliases=["keyring"],
    args=[
        FunctionArg(
            name="service",
            label="Service",
            description="App or URL for the password",
        ),
        FunctionArg(
            name="account",
            label="Account",
            description="Username or email address",
        ),
    ],
)


class KeychainFunction(TemplateFunction):
    """Look up ``service``/``account`` in the OS credential store.

    A missing entry or an unusable service/account pair renders as an empty
    string. Any other credential store failure is a render error.
    """

    def __init__(self, backend: Optional[Any] = None):
        self.backend = backend if backend is not None else keyring

    @property
    def descriptor(self) -> FunctionDescriptor:
        return KEYCHAIN_DESCRIPTOR

    async def run(self, args: FunctionArgs, context: WindowContext) -> str:
        service = string_arg(args, "service") or ""
        account = string_arg(args, "account") or ""
        log.debug("Getting password for service %s and account %s", service, account)

        if not service or not account:
            log.debug("Invalid keychain entry '%s' and '%s'", service, account)
            return ""

        try:
            password = await asyncio.to_thread(
                self.backend.get_password, service, account
            )
        except KeyringError as e:
            raise FunctionExecutionError(self.name, e) from e

        if password is None:
            log.info("No password found for '%s' and '%s'", service, account)
            return ""
        return password
