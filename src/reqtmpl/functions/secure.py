"""secure - values stored encrypted against a workspace key.

The stored argument is ``YENC_`` followed by base64 ciphertext. Plaintext
typed by a user is encrypted by `SecureFunction.transform_arg` when the
template is saved, and decrypted again at render time.
"""

from __future__ import annotations

import base64
import binascii
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from reqtmpl.ast import FnArg, FnVal, RawToken, StrVal, TagToken, Token, Tokens
from reqtmpl.ast.parser import parse_template
from reqtmpl.exceptions import (
    DecodeError,
    FunctionExecutionError,
    MissingContextError,
    RenderError,
)
from reqtmpl.functions.base import (
    FunctionArg,
    FunctionArgs,
    FunctionDescriptor,
    TemplateCallback,
    TemplateFunction,
)
from reqtmpl.render.renderer import transform_args
from reqtmpl.render.spec import RenderPurpose, WindowContext

log = logging.getLogger(__name__)

ENCRYPTED_PREFIX = "YENC_"
SECURE_FUNCTION = "secure"

SECURE_DESCRIPTOR = FunctionDescriptor(
    name=SECURE_FUNCTION,
    description="Securely store encrypted text",
    args=[
        FunctionArg(name="value", label="Value", multi_line=True, password=True),
    ],
)


class Encryptor(ABC):
    """Encrypts and decrypts bytes with a workspace-scoped key.

    Key storage and caching belong to the implementation, which must be
    safe to call from concurrent render passes.
    """

    @abstractmethod
    async def encrypt(self, workspace_id: str, data: bytes) -> bytes:
        ...

    @abstractmethod
    async def decrypt(self, workspace_id: str, data: bytes) -> bytes:
        ...


def _workspace_id(context: WindowContext) -> str:
    if not context.workspace_id:
        raise MissingContextError("workspace_id")
    return context.workspace_id


class SecureFunction(TemplateFunction):
    def __init__(self, encryptor: Encryptor):
        self.encryptor = encryptor

    @property
    def descriptor(self) -> FunctionDescriptor:
        return SECURE_DESCRIPTOR

    async def run(self, args: FunctionArgs, context: WindowContext) -> str:
        workspace_id = _workspace_id(context)

        value = args.get("value")
        if not isinstance(value, str):
            return ""

        if not value.startswith(ENCRYPTED_PREFIX):
            raise RenderError("Could not decrypt non-encrypted value")

        try:
            ciphertext = base64.b64decode(value[len(ENCRYPTED_PREFIX) :], validate=True)
        except binascii.Error as e:
            raise FunctionExecutionError(self.name, e) from e

        try:
            plaintext = await self.encryptor.decrypt(workspace_id, ciphertext)
        except RenderError:
            raise
        except Exception as e:
            raise FunctionExecutionError(self.name, e) from e

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Decrypted value is not valid UTF-8: {e}") from e

    async def transform_arg(
        self, arg_name: str, value: str, context: WindowContext
    ) -> str:
        if arg_name != "value":
            return value

        workspace_id = _workspace_id(context)
        if value == "":
            return ""
        if value.startswith(ENCRYPTED_PREFIX):
            # already encrypted
            return value

        try:
            ciphertext = await self.encryptor.encrypt(workspace_id, value.encode("utf-8"))
        except RenderError:
            raise
        except Exception as e:
            raise FunctionExecutionError(self.name, e) from e
        return ENCRYPTED_PREFIX + base64.b64encode(ciphertext).decode("ascii")


async def decrypt_secure_template(
    template: str, function: SecureFunction, context: WindowContext
) -> str:
    """Replace every ``secure(...)`` tag in `template` with its plaintext."""
    parsed = parse_template(template)
    tokens: List[Token] = []

    for token in parsed:
        if isinstance(token, TagToken) and isinstance(token.val, FnVal):
            if token.val.name == SECURE_FUNCTION:
                args = {
                    a.name: a.value.text
                    for a in token.val.args
                    if isinstance(a.value, StrVal)
                }
                tokens.append(RawToken(await function.run(args, context)))
                continue
        tokens.append(token)

    return Tokens(tokens).to_string()


async def encrypt_secure_template(
    template: str,
    function: SecureFunction,
    context: WindowContext,
    callback: Optional[TemplateCallback] = None,
) -> str:
    """Turn a whole template into a single encrypted ``secure(...)`` tag.

    Existing ``secure`` tags are decrypted first so their contents are not
    encrypted twice.
    """
    decrypted = await decrypt_secure_template(template, function, context)
    tokens = Tokens(
        [
            TagToken(
                val=FnVal(
                    name=SECURE_FUNCTION,
                    args=[FnArg(name="value", value=StrVal(decrypted))],
                )
            )
        ]
    )

    if callback is None:
        from reqtmpl.functions.registry import FunctionRegistry

        callback = FunctionRegistry([function])

    preview = context.model_copy(update={"purpose": RenderPurpose.PREVIEW})
    transformed = await transform_args(tokens, callback, preview)
    return transformed.to_string()
