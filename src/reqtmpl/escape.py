"""Escaping of literal template delimiters.

A ``${[`` that should survive as text is written ``\\${[``. Whether an
occurrence is escaped depends on the parity of the backslash run in front
of it: an odd run means the last backslash escapes the delimiter, an even
run (including none) means every backslash is itself escaped.
"""

from __future__ import annotations

TAG_OPEN = "${["
TAG_CLOSE = "]}"


def count_backslashes_before(text: str, index: int) -> int:
    count = 0
    while index > 0 and text[index - 1] == "\\":
        count += 1
        index -= 1
    return count


def escape_template(text: str) -> str:
    """Escape every unescaped ``${[`` in ``text``.

    Already escaped occurrences are left alone, so the function is
    idempotent on its own output.

    Example:
        >>> escape_template("${[foo]}")
        '\\\\${[foo]}'
    """
    out: list[str] = []
    for i, char in enumerate(text):
        if text.startswith(TAG_OPEN, i) and count_backslashes_before(text, i) % 2 == 0:
            out.append("\\")
        out.append(char)
    return "".join(out)


def unescape_template(text: str) -> str:
    """Remove the escaping backslash from every escaped ``${[``.

    A backslash that is itself escaped (odd run before it) is kept.
    """
    out: list[str] = []
    i = 0
    while i < len(text):
        if (
            text.startswith("\\" + TAG_OPEN, i)
            and count_backslashes_before(text, i) % 2 == 0
        ):
            # drop the escaping backslash
            i += 1
            continue
        out.append(text[i])
        i += 1
    return "".join(out)
