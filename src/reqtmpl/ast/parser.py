"""Template parser.

Splits template source into raw text and ``${[ ... ]}`` tags. A tag holds
either a variable reference or a function call with named arguments::

    Hello ${[ name ]}!
    ${[ secure(value: "YENC_...") ]}
    ${[ keychain(service = "github", account = user) ]}
"""

from __future__ import annotations

import re
from typing import Dict, List

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
    Val,
    VarVal,
)
from reqtmpl.escape import (
    TAG_CLOSE,
    TAG_OPEN,
    count_backslashes_before,
    unescape_template,
)
from reqtmpl.exceptions import ParseError

IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_.\-]*")

QUOTES = "\"'"
ARG_SEPARATORS = ":="
STRING_ESCAPES: Dict[str, str] = {"n": "\n", "t": "\t", "r": "\r"}
KEYWORDS: Dict[str, ArgVal] = {
    "true": BoolVal(True),
    "false": BoolVal(False),
    "null": NullVal(),
}


class Parser:
    """Parses one template string into `Tokens`."""

    def __init__(self, source: str):
        self.source = source

    def parse(self) -> Tokens:
        """Parse the whole source.

        Raises:
            ParseError: If a tag is unterminated or its content is malformed.
        """
        src = self.source
        tokens: List[Token] = []
        raw_start = 0
        i = 0

        while i < len(src):
            if src.startswith(TAG_OPEN, i) and count_backslashes_before(src, i) % 2 == 0:
                if i > raw_start:
                    tokens.append(RawToken(unescape_template(src[raw_start:i])))
                end = self._find_tag_end(i)
                inner_start = i + len(TAG_OPEN)
                inner = src[inner_start : end - len(TAG_CLOSE)]
                val = _TagParser(inner, inner_start).parse()
                tokens.append(TagToken(val=val, raw=src[i:end]))
                i = raw_start = end
                continue
            i += 1

        if raw_start < len(src):
            tokens.append(RawToken(unescape_template(src[raw_start:])))

        return Tokens(tokens)

    def _find_tag_end(self, start: int) -> int:
        """Return the index just past the ``]}`` closing the tag at `start`.

        Closing markers inside quoted strings do not end the tag.
        """
        src = self.source
        quote = None
        j = start + len(TAG_OPEN)
        while j < len(src):
            c = src[j]
            if quote is not None:
                if c == "\\":
                    j += 2
                    continue
                if c == quote:
                    quote = None
            elif c in QUOTES:
                quote = c
            elif src.startswith(TAG_CLOSE, j):
                return j + len(TAG_CLOSE)
            j += 1
        raise ParseError("Unterminated template tag", start)


class _TagParser:
    """Recursive-descent parser for the content between the delimiters."""

    def __init__(self, text: str, offset: int):
        self.text = text
        self.offset = offset
        self.pos = 0

    def error(self, message: str) -> ParseError:
        return ParseError(message, self.offset + self.pos)

    def parse(self) -> Val:
        self.skip_ws()
        if self.at_end():
            raise self.error("Empty template tag")

        name = self.identifier()
        self.skip_ws()

        val: Val
        if self.peek() == "(":
            val = FnVal(name=name, args=self.arguments())
        else:
            val = VarVal(name=name)

        self.skip_ws()
        if not self.at_end():
            raise self.error(f"Unexpected character {self.peek()!r} in template tag")
        return val

    def arguments(self) -> List[FnArg]:
        self.pos += 1  # (
        args: List[FnArg] = []
        seen = set()

        while True:
            self.skip_ws()
            if self.at_end():
                raise self.error("Unbalanced parentheses in function call")
            if self.peek() == ")":
                self.pos += 1
                return args

            if self.peek() in QUOTES:
                raise self.error("Function arguments must be named")
            arg_name = self.identifier()
            if arg_name in seen:
                raise self.error(f"Duplicate argument {arg_name!r}")
            seen.add(arg_name)

            self.skip_ws()
            if self.at_end() or self.peek() not in ARG_SEPARATORS:
                raise self.error(f"Expected ':' or '=' after argument {arg_name!r}")
            self.pos += 1
            self.skip_ws()

            args.append(FnArg(name=arg_name, value=self.argument_value()))

            self.skip_ws()
            if self.at_end():
                raise self.error("Unbalanced parentheses in function call")
            c = self.peek()
            if c == ",":
                self.pos += 1
            elif c != ")":
                raise self.error(f"Expected ',' or ')' but found {c!r}")

    def argument_value(self) -> ArgVal:
        if self.at_end():
            raise self.error("Missing argument value")
        if self.peek() in QUOTES:
            return StrVal(self.string())

        name = self.identifier()
        if self.peek() == "(":
            raise self.error("Nested function calls are not supported")
        if name in KEYWORDS:
            return KEYWORDS[name]
        return VarVal(name=name)

    def string(self) -> str:
        quote = self.text[self.pos]
        start = self.pos
        self.pos += 1
        out: List[str] = []
        while not self.at_end():
            c = self.text[self.pos]
            if c == "\\" and self.pos + 1 < len(self.text):
                nxt = self.text[self.pos + 1]
                out.append(STRING_ESCAPES.get(nxt, nxt))
                self.pos += 2
                continue
            if c == quote:
                self.pos += 1
                return "".join(out)
            out.append(c)
            self.pos += 1
        self.pos = start
        raise self.error("Unterminated string literal")

    def identifier(self) -> str:
        match = IDENTIFIER.match(self.text, self.pos)
        if match is None:
            found = self.peek() if not self.at_end() else "end of tag"
            raise self.error(f"Expected identifier but found {found!r}")
        self.pos = match.end()
        return match.group(0)

    def skip_ws(self) -> None:
        while not self.at_end() and self.text[self.pos].isspace():
            self.pos += 1

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def at_end(self) -> bool:
        return self.pos >= len(self.text)


def parse_template(source: str) -> Tokens:
    """Parse template source into tokens."""
    return Parser(source).parse()
