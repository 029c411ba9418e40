"""CLI tests using typer's test runner."""

import json

import pytest
import yaml
from typer.testing import CliRunner

from reqtmpl._version import __version__
from reqtmpl.main import typer_app

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("REQTMPL_CONFIG", raising=False)
    monkeypatch.delenv("REQTMPL_DEBUG", raising=False)
    return tmp_path


@pytest.fixture
def env_file(workdir):
    path = workdir / "envs.yaml"
    path.write_text(
        yaml.safe_dump(
            [
                {"name": "folder", "variables": [{"name": "user", "value": "7"}]},
                {
                    "name": "base",
                    "variables": [
                        {"name": "host", "value": "api.example.com"},
                        {"name": "user", "value": "1"},
                    ],
                },
            ]
        )
    )
    return path


def test_version():
    result = runner.invoke(typer_app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_render(env_file):
    result = runner.invoke(typer_app, ["render", "${[ host ]}/${[ user ]}", "-e", str(env_file)])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "api.example.com/7"


def test_render_uses_config_environments(workdir):
    (workdir / "reqtmpl.yaml").write_text(
        yaml.safe_dump(
            {"environments": [{"name": "base", "variables": [{"name": "a", "value": "b"}]}]}
        )
    )
    result = runner.invoke(typer_app, ["render", "a=${[ a ]}"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "a=b"


def test_render_missing_variable_fails(workdir):
    result = runner.invoke(typer_app, ["render", "${[ nope ]}"])
    assert result.exit_code == 1
    assert "Variable not found: nope" in result.output


def test_render_silent(workdir):
    result = runner.invoke(typer_app, ["render", "x${[ nope ]}y", "--silent"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "xy"


def test_render_parse_error(workdir):
    result = runner.invoke(typer_app, ["render", "${[ oops"])
    assert result.exit_code == 1
    assert "Unterminated template tag" in result.output


def test_render_request(workdir, env_file):
    request = workdir / "request.yaml"
    request.write_text(
        yaml.safe_dump(
            {
                "method": "GET",
                "url": "https://${[ host ]}/users/:id",
                "urlParameters": [{"name": ":id", "value": "${[ user ]}"}],
                "headers": [{"name": "X-User", "value": "${[ user ]}"}],
            }
        )
    )
    result = runner.invoke(typer_app, ["render-request", str(request), "-e", str(env_file)])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["url"] == "https://api.example.com/users/7"
    assert data["urlParameters"] == []
    assert data["headers"][0]["value"] == "7"


def test_render_request_websocket(workdir, env_file):
    request = workdir / "ws.yaml"
    request.write_text(yaml.safe_dump({"url": "wss://${[ host ]}", "message": "${[ user ]}"}))
    result = runner.invoke(
        typer_app, ["render-request", str(request), "--kind", "websocket", "-e", str(env_file)]
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert (data["url"], data["message"]) == ("wss://api.example.com", "7")


def test_render_request_unknown_kind(workdir, env_file):
    request = workdir / "request.yaml"
    request.write_text("url: x\n")
    result = runner.invoke(typer_app, ["render-request", str(request), "-k", "soap"])
    assert result.exit_code == 1
    assert "Unknown request kind" in result.output


def test_render_request_missing_file(workdir):
    result = runner.invoke(typer_app, ["render-request", "missing.yaml"])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_parse():
    result = runner.invoke(typer_app, ["parse", 'a ${[ f(x: "1") ]}'])
    assert result.exit_code == 0, result.output
    tokens = json.loads(result.output)
    assert tokens[0] == {"type": "raw", "text": "a "}
    assert tokens[1]["val"] == {
        "type": "fn",
        "name": "f",
        "args": [{"name": "x", "value": {"type": "str", "text": "1"}}],
    }


def test_escape_and_unescape():
    escaped = runner.invoke(typer_app, ["escape", "${[ x ]}"])
    assert escaped.output.strip() == r"\${[ x ]}"
    unescaped = runner.invoke(typer_app, ["unescape", r"\${[ x ]}"])
    assert unescaped.output.strip() == "${[ x ]}"


def test_format_xml_file(workdir):
    (workdir / "body.xml").write_text("<a><b>t</b></a>")
    result = runner.invoke(typer_app, ["format-xml", "body.xml", "--indent", "4"])
    assert result.exit_code == 0, result.output
    assert result.output == "<a>\n    <b>t</b>\n</a>\n"


def test_format_xml_stdin_uses_config_indent(workdir):
    (workdir / "reqtmpl.yaml").write_text("xml_indent: 1\n")
    result = runner.invoke(typer_app, ["format-xml", "-"], input="<a><b/></a>")
    assert result.exit_code == 0, result.output
    assert result.output == "<a>\n <b/>\n</a>\n"


def test_functions_lists_builtins():
    result = runner.invoke(typer_app, ["functions"])
    assert result.exit_code == 0, result.output
    assert "keychain" in result.output
    assert "keyring" in result.output


def test_render_request_body_with_unquoted_date(workdir, env_file):
    request = workdir / "request.yaml"
    request.write_text(
        "url: https://${[ host ]}\n"
        "body:\n"
        "  created: 2024-01-01\n"
        "  user: ${[ user ]}\n"
    )
    result = runner.invoke(typer_app, ["render-request", str(request), "-e", str(env_file)])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["body"] == {"created": "2024-01-01", "user": "7"}
