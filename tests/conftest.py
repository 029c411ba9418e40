"""Shared fixtures and fakes."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import pytest

from reqtmpl.functions import FunctionDescriptor, FunctionRegistry, TemplateFunction
from reqtmpl.functions.base import FunctionArg, FunctionArgs
from reqtmpl.functions.keychain import KeychainFunction
from reqtmpl.functions.secure import Encryptor, SecureFunction
from reqtmpl.models import Environment, EnvironmentVariable
from reqtmpl.render.spec import WindowContext


class FakeEncryptor(Encryptor):
    """Reversible, workspace-bound stand-in for real encryption."""

    def __init__(self):
        self.encrypt_calls = 0

    async def encrypt(self, workspace_id: str, data: bytes) -> bytes:
        self.encrypt_calls += 1
        return workspace_id.encode() + b":" + data[::-1]

    async def decrypt(self, workspace_id: str, data: bytes) -> bytes:
        prefix = workspace_id.encode() + b":"
        if not data.startswith(prefix):
            raise ValueError("wrong workspace key")
        return data[len(prefix) :][::-1]


class FakeKeyring:
    """Stand-in for the keyring module."""

    def __init__(self, passwords: Optional[Dict[Tuple[str, str], str]] = None, error=None):
        self.passwords = passwords or {}
        self.error = error

    def get_password(self, service: str, account: str) -> Optional[str]:
        if self.error is not None:
            raise self.error
        return self.passwords.get((service, account))


class EchoFunction(TemplateFunction):
    """Returns its arguments and records every call in order."""

    def __init__(self, calls: List[str]):
        self.calls = calls

    @property
    def descriptor(self) -> FunctionDescriptor:
        return FunctionDescriptor(
            name="echo",
            aliases=["say"],
            args=[FunctionArg(name="value"), FunctionArg(name="suffix", optional=True)],
        )

    async def run(self, args: FunctionArgs, context: WindowContext) -> str:
        self.calls.append(str(args.get("value")))
        return f"{args.get('value')}{args.get('suffix') or ''}"


class FailingFunction(TemplateFunction):
    @property
    def descriptor(self) -> FunctionDescriptor:
        return FunctionDescriptor(name="fail")

    async def run(self, args: FunctionArgs, context: WindowContext) -> str:
        raise RuntimeError("boom")


class ContextFunction(TemplateFunction):
    @property
    def descriptor(self) -> FunctionDescriptor:
        return FunctionDescriptor(name="ctx")

    async def run(self, args: FunctionArgs, context: WindowContext) -> str:
        return f"{context.workspace_id}/{context.purpose.value}"


def make_env(name: str, **variables: str) -> Environment:
    return Environment(
        name=name,
        variables=[EnvironmentVariable(name=k, value=v) for k, v in variables.items()],
    )


@pytest.fixture
def encryptor() -> FakeEncryptor:
    return FakeEncryptor()


@pytest.fixture
def calls() -> List[str]:
    return []


@pytest.fixture
def registry(encryptor, calls) -> FunctionRegistry:
    return FunctionRegistry(
        [
            EchoFunction(calls),
            FailingFunction(),
            ContextFunction(),
            SecureFunction(encryptor),
            KeychainFunction(backend=FakeKeyring({("github", "me"): "s3cret"})),
        ]
    )


@pytest.fixture
def context() -> WindowContext:
    return WindowContext(label="main", workspace_id="wk_1")


@pytest.fixture(autouse=True)
def reset_reqtmpl_logger():
    """Undo CLI logging setup so caplog sees records in every test."""
    yield
    logger = logging.getLogger("reqtmpl")
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
