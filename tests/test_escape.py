"""Tests for delimiter escaping."""

import pytest

from reqtmpl.escape import escape_template, unescape_template


@pytest.mark.parametrize(
    "text, expected",
    [
        (r"${[foo]}", r"\${[foo]}"),
        (r"\${[bar]}", r"\${[bar]}"),
        (r"\\${[bar]}", r"\\\${[bar]}"),
        (r"text ${[var]} more", r"text \${[var]} more"),
        (r"already \${[escaped]}", r"already \${[escaped]}"),
        (r"${[one]} and ${[two]}", r"\${[one]} and \${[two]}"),
        (r"mixed \${[esc]} and ${[unesc]}", r"mixed \${[esc]} and \${[unesc]}"),
        ("no tags here", "no tags here"),
        ("${ [not a tag", "${ [not a tag"),
    ],
)
def test_escape(text, expected):
    assert escape_template(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        (r"\${[foo]}", r"${[foo]}"),
        (r"text \${[var]} more", r"text ${[var]} more"),
        (r"\${[one]} and \${[two]}", r"${[one]} and ${[two]}"),
        (r"\\\${[bar]}", r"\\${[bar]}"),
        (r"${[foo]}", r"${[foo]}"),
        (r"\\${[foo]}", r"\\${[foo]}"),
    ],
)
def test_unescape(text, expected):
    assert unescape_template(text) == expected


def test_escape_is_idempotent():
    once = escape_template("a ${[b]} \\${[c]} \\\\${[d]}")
    assert escape_template(once) == once


@pytest.mark.parametrize(
    "text",
    [
        "${[foo]}",
        "plain",
        "a ${[b]} c ${[d]}",
        r"trailing backslash \ ${[x]}",
        "",
    ],
)
def test_unescape_reverses_escape(text):
    assert unescape_template(escape_template(text)) == text
