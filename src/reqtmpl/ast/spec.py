"""Token and value model produced by the parser and consumed by the renderer."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union

from reqtmpl.escape import TAG_CLOSE, TAG_OPEN, escape_template


def quote_string(text: str) -> str:
    """Quote a string literal the way canonical serialization writes it."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass(frozen=True)
class StrVal:
    """A quoted string literal (function arguments only)."""

    text: str

    def to_source(self) -> str:
        return quote_string(self.text)


@dataclass(frozen=True)
class BoolVal:
    """A ``true``/``false`` literal (function arguments only)."""

    value: bool

    def to_source(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class NullVal:
    """A ``null`` literal (function arguments only)."""

    def to_source(self) -> str:
        return "null"


@dataclass(frozen=True)
class VarVal:
    """A reference to a variable by name."""

    name: str

    def to_source(self) -> str:
        return self.name


@dataclass(frozen=True)
class FnArg:
    """A named function argument. Its value is never another call."""

    name: str
    value: Union[StrVal, VarVal, BoolVal, NullVal]

    def to_source(self) -> str:
        return f"{self.name}: {self.value.to_source()}"


@dataclass(frozen=True)
class FnVal:
    """A call to a template function with named arguments."""

    name: str
    args: List[FnArg] = field(default_factory=list)

    def to_source(self) -> str:
        args = ", ".join(a.to_source() for a in self.args)
        return f"{self.name}({args})"


ArgVal = Union[StrVal, VarVal, BoolVal, NullVal]
Val = Union[VarVal, FnVal]


@dataclass(frozen=True)
class RawToken:
    """Literal output text.

    ``text`` holds the unescaped text, i.e. what the renderer emits.
    """

    text: str

    def to_source(self) -> str:
        return escape_template(self.text)


@dataclass(frozen=True)
class TagToken:
    """An interpolation site.

    ``raw`` is the exact source span the tag was parsed from. It is dropped
    whenever the value is rewritten so the tag serializes canonically.
    """

    val: Val
    raw: Optional[str] = None

    def to_source(self) -> str:
        if self.raw is not None:
            return self.raw
        return f"{TAG_OPEN} {self.val.to_source()} {TAG_CLOSE}"

    def with_val(self, val: Val) -> "TagToken":
        if val == self.val:
            return self
        return replace(self, val=val, raw=None)


Token = Union[RawToken, TagToken]


@dataclass
class Tokens:
    """An ordered sequence of tokens.

    Serializing an unmodified sequence reproduces the parsed source
    byte for byte.
    """

    tokens: List[Token] = field(default_factory=list)

    def __iter__(self):
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def to_string(self) -> str:
        return "".join(t.to_source() for t in self.tokens)

    def __str__(self) -> str:
        return self.to_string()


def val_to_dict(val: Union[Val, ArgVal]) -> Dict[str, Any]:
    """JSON-friendly form of a value, as printed by ``reqtmpl parse``."""
    if isinstance(val, VarVal):
        return {"type": "var", "name": val.name}
    if isinstance(val, StrVal):
        return {"type": "str", "text": val.text}
    if isinstance(val, BoolVal):
        return {"type": "bool", "value": val.value}
    if isinstance(val, NullVal):
        return {"type": "null"}
    return {
        "type": "fn",
        "name": val.name,
        "args": [{"name": a.name, "value": val_to_dict(a.value)} for a in val.args],
    }


def token_to_dict(token: Token) -> Dict[str, Any]:
    if isinstance(token, RawToken):
        return {"type": "raw", "text": token.text}
    return {"type": "tag", "source": token.to_source(), "val": val_to_dict(token.val)}
