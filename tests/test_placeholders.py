"""Tests for path placeholders."""

import pytest

from reqtmpl.models import HttpUrlParameter
from reqtmpl.placeholders import apply_path_placeholders, replace_path_placeholder


def param(name, value="", enabled=True):
    return HttpUrlParameter(name=name, value=value, enabled=enabled)


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://example.com/:foo", "https://example.com/xxx"),
        ("https://example.com/:foo/bar", "https://example.com/xxx/bar"),
        ("https://example.com/:foo?q=1", "https://example.com/xxx?q=1"),
        ("https://example.com/:foo#frag", "https://example.com/xxx#frag"),
        ("https://example.com/:foo/:foo", "https://example.com/xxx/xxx"),
        ("https://example.com/:foobar", "https://example.com/:foobar"),
        ("https://example.com/x:foo", "https://example.com/x:foo"),
        ("https://example.com?:foo", "https://example.com?:foo"),
    ],
)
def test_replace_path_placeholder(url, expected):
    assert replace_path_placeholder(param(":foo", "xxx"), url) == expected


def test_replace_path_placeholder_quotes_value():
    url = replace_path_placeholder(param(":id", "a b/c"), "https://x.com/:id")
    assert url == "https://x.com/a%20b%2Fc"


def test_replace_path_placeholder_ignores_disabled_and_plain():
    url = "https://x.com/:id"
    assert replace_path_placeholder(param(":id", "1", enabled=False), url) == url
    assert replace_path_placeholder(param("id", "1"), url) == url


def test_apply_path_placeholders():
    params = [
        param(":id", "42"),
        param("q", "search"),
        param(":unused", "x"),
        param("off", "1", enabled=False),
        param("", "nameless"),
    ]
    url, remaining = apply_path_placeholders("https://x.com/users/:id", params)
    assert url == "https://x.com/users/42"
    assert [p.name for p in remaining] == ["q", ":unused"]


def test_apply_path_placeholders_no_parameters():
    assert apply_path_placeholders("https://x.com", []) == ("https://x.com", [])


def test_repeated_placeholder_segments_are_all_replaced():
    params = [param(":org", "acme")]
    url, remaining = apply_path_placeholders("https://x.com/:org/:org/:org?x=1", params)
    assert url == "https://x.com/acme/acme/acme?x=1"
    assert remaining == []
