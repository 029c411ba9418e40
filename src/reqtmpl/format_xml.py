"""XML pretty-printer that leaves template tags alone.

Bodies are often XML with ``${[ ... ]}`` tags mixed in, which a real XML
parser would reject. This formatter only tokenizes markup: every token is
emitted verbatim on its own indented line, with one exception. An open tag
directly followed by a single line of text and its matching close tag stays
on one line::

    <root>
      <foo>this might be a string</foo>
    </root>
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from reqtmpl.escape import TAG_CLOSE, TAG_OPEN


class XmlKind(Enum):
    OPEN = "open"
    CLOSE = "close"
    SELF_CLOSE = "self_close"
    COMMENT = "comment"
    CDATA = "cdata"
    PROC_INST = "proc_inst"
    DOCTYPE = "doctype"
    TEXT = "text"
    TEMPLATE = "template"


@dataclass(frozen=True)
class XmlToken:
    kind: XmlKind
    raw: str
    name: str = ""


# (opening marker, closing marker, kind), checked in order
_DELIMITED = [
    ("<!--", "-->", XmlKind.COMMENT),
    ("<![CDATA[", "]]>", XmlKind.CDATA),
    ("<?", "?>", XmlKind.PROC_INST),
]


def _scan_until(source: str, start: int, end_marker: str) -> int:
    """Index just past `end_marker`, or the end of input if it never appears."""
    found = source.find(end_marker, start)
    if found == -1:
        return len(source)
    return found + len(end_marker)


def _scan_tag(source: str, i: int) -> int:
    """Index just past the ``>`` ending the tag at `i`, skipping quoted values."""
    quote = None
    while i < len(source):
        c = source[i]
        i += 1
        if quote is not None:
            if c == quote:
                quote = None
        elif c in "\"'":
            quote = c
        elif c == ">":
            break
    return i


def _tag_name(raw: str, skip: int) -> str:
    s = raw[skip:]
    for idx, c in enumerate(s):
        if c.isspace() or c in ">/":
            return s[:idx]
    return s


def tokenize_xml(source: str) -> List[XmlToken]:
    """Split `source` into markup, text and template tokens."""
    tokens: List[XmlToken] = []
    i = 0

    while i < len(source):
        if source.startswith(TAG_OPEN, i):
            end = _scan_until(source, i + len(TAG_OPEN), TAG_CLOSE)
            tokens.append(XmlToken(XmlKind.TEMPLATE, source[i:end]))
            i = end
            continue

        if source[i] == "<":
            for opener, closer, kind in _DELIMITED:
                if source.startswith(opener, i):
                    end = _scan_until(source, i + len(opener), closer)
                    tokens.append(XmlToken(kind, source[i:end]))
                    i = end
                    break
            else:
                if source.startswith("<!", i):
                    end = _scan_until(source, i + 2, ">")
                    tokens.append(XmlToken(XmlKind.DOCTYPE, source[i:end]))
                elif source.startswith("</", i):
                    end = _scan_tag(source, i + 2)
                    raw = source[i:end]
                    tokens.append(XmlToken(XmlKind.CLOSE, raw, _tag_name(raw, 2)))
                else:
                    end = _scan_tag(source, i + 1)
                    raw = source[i:end]
                    if len(raw) >= 2 and raw[-2] == "/":
                        tokens.append(XmlToken(XmlKind.SELF_CLOSE, raw))
                    else:
                        tokens.append(XmlToken(XmlKind.OPEN, raw, _tag_name(raw, 1)))
                i = end
            continue

        start = i
        while i < len(source) and source[i] != "<" and not source.startswith(TAG_OPEN, i):
            i += 1
        tokens.append(XmlToken(XmlKind.TEXT, source[start:i]))

    return tokens


def _inline_text(tokens: List[XmlToken], i: int) -> str | None:
    """Trimmed text if tokens[i:i+3] is open/text/close of the same element."""
    if i + 2 >= len(tokens):
        return None
    opening, text, closing = tokens[i], tokens[i + 1], tokens[i + 2]
    if text.kind != XmlKind.TEXT or closing.kind != XmlKind.CLOSE:
        return None
    trimmed = text.raw.strip()
    if not trimmed or "\n" in trimmed or opening.name != closing.name:
        return None
    return trimmed


def format_xml(source: str, indent: str = "  ") -> str:
    """Pretty-print XML-like `source` using `indent` per nesting level."""
    tokens = tokenize_xml(source)
    lines: List[str] = []
    depth = 0
    i = 0

    while i < len(tokens):
        tok = tokens[i]

        if tok.kind == XmlKind.OPEN:
            text = _inline_text(tokens, i)
            if text is not None:
                lines.append(indent * depth + tok.raw + text + tokens[i + 2].raw)
                i += 3
                continue
            lines.append(indent * depth + tok.raw)
            depth += 1
        elif tok.kind == XmlKind.CLOSE:
            depth = max(depth - 1, 0)
            lines.append(indent * depth + tok.raw)
        elif tok.kind == XmlKind.TEXT:
            if tok.raw.strip():
                lines.append(indent * depth + tok.raw.strip())
        else:
            lines.append(indent * depth + tok.raw)
        i += 1

    return "\n".join(lines)
