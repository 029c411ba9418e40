"""Template token model and parser."""

from reqtmpl.ast.parser import Parser, parse_template
from reqtmpl.ast.spec import (
    BoolVal,
    FnArg,
    FnVal,
    NullVal,
    RawToken,
    StrVal,
    TagToken,
    Token,
    Tokens,
    Val,
    VarVal,
)

__all__ = [
    "Parser",
    "parse_template",
    "BoolVal",
    "FnArg",
    "FnVal",
    "NullVal",
    "RawToken",
    "StrVal",
    "TagToken",
    "Token",
    "Tokens",
    "Val",
    "VarVal",
]
