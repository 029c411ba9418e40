"""Reqtmpl CLI Main Entry Point

Render request templates from the command line.

Usage:
    reqtmpl render 'Bearer ${[ token ]}' -e envs.yaml
    reqtmpl render-request request.yaml --kind http -e envs.yaml
    reqtmpl parse '${[ keychain(service: "gh", account: user) ]}'
    reqtmpl escape '${[ not a tag ]}'
    reqtmpl format-xml body.xml --indent 4
    reqtmpl functions
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from reqtmpl._version import __version__
from reqtmpl.ast import parse_template
from reqtmpl.ast.spec import token_to_dict
from reqtmpl.commands.utils import console, handle_error, setup_logging
from reqtmpl.config import (
    ReqtmplConfig,
    default_config_path,
    load_environment_chain,
    load_request,
)
from reqtmpl.escape import escape_template, unescape_template
from reqtmpl.format_xml import format_xml
from reqtmpl.functions import default_registry
from reqtmpl.models import Environment, GrpcRequest, HttpRequest
from reqtmpl.render import (
    ErrorBehavior,
    RenderOptions,
    render_grpc_request,
    render_http_request,
    render_template,
    render_websocket_request,
)

typer_app = typer.Typer(no_args_is_help=True, help="Render request templates.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"reqtmpl {__version__}")
        raise typer.Exit()


@typer_app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Render ${[ ... ]} templates in request definitions."""


def _load(
    config_path: Optional[Path], env_file: Optional[Path], silent: bool
) -> tuple[ReqtmplConfig, List[Environment], RenderOptions]:
    config = ReqtmplConfig.load(config_path or default_config_path())
    chain = load_environment_chain(env_file) if env_file else config.environments
    options = config.render_options()
    if silent:
        options = RenderOptions(error_behavior=ErrorBehavior.SILENT)
    return config, chain, options


ConfigOption = typer.Option(None, "-c", "--config", help="Path to reqtmpl.yaml.")
EnvOption = typer.Option(
    None, "-e", "--env", help="YAML file with the environment chain, most specific first."
)
SilentOption = typer.Option(
    False, "--silent", help="Render missing variables and failed functions as empty text."
)
VerboseOption = typer.Option(False, "-v", "--verbose", help="Verbose logging.")


@typer_app.command()
def render(
    template: str = typer.Argument(..., help="Template text to render."),
    config_path: Optional[Path] = ConfigOption,
    env_file: Optional[Path] = EnvOption,
    silent: bool = SilentOption,
    verbose: bool = VerboseOption,
) -> None:
    """Render a template string against an environment chain."""
    setup_logging(verbose)
    try:
        config, chain, options = _load(config_path, env_file, silent)
        result = asyncio.run(
            render_template(
                template, chain, default_registry(), options, config.window_context()
            )
        )
    except Exception as e:
        handle_error(e)
    typer.echo(result)


@typer_app.command("render-request")
def render_request(
    file: Path = typer.Argument(..., help="Request YAML file."),
    kind: str = typer.Option("http", "-k", "--kind", help="http, grpc or websocket."),
    config_path: Optional[Path] = ConfigOption,
    env_file: Optional[Path] = EnvOption,
    silent: bool = SilentOption,
    verbose: bool = VerboseOption,
) -> None:
    """Render every templated field of a request and print it as JSON."""
    setup_logging(verbose)
    try:
        config, chain, options = _load(config_path, env_file, silent)
        request = load_request(file, kind)
        cb = default_registry()
        context = config.window_context()
        if isinstance(request, HttpRequest):
            coro = render_http_request(request, chain, cb, options, context)
        elif isinstance(request, GrpcRequest):
            coro = render_grpc_request(request, chain, cb, options, context)
        else:
            coro = render_websocket_request(request, chain, cb, options, context)
        rendered = asyncio.run(coro)
    except Exception as e:
        handle_error(e)
    typer.echo(rendered.model_dump_json(indent=2, by_alias=True))


@typer_app.command()
def parse(template: str = typer.Argument(..., help="Template text to parse.")) -> None:
    """Print the tokens of a template as JSON."""
    try:
        tokens = parse_template(template)
    except Exception as e:
        handle_error(e)
    typer.echo(json.dumps([token_to_dict(t) for t in tokens], indent=2))


@typer_app.command()
def escape(text: str = typer.Argument(...)) -> None:
    """Escape every ${[ so it renders literally."""
    typer.echo(escape_template(text))


@typer_app.command()
def unescape(text: str = typer.Argument(...)) -> None:
    """Remove escaping backslashes from escaped ${[."""
    typer.echo(unescape_template(text))


@typer_app.command("format-xml")
def format_xml_command(
    file: Path = typer.Argument(..., help="XML file ('-' for stdin)."),
    indent: Optional[int] = typer.Option(None, "--indent", help="Spaces per level."),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Pretty-print an XML body without touching template tags."""
    try:
        config = ReqtmplConfig.load(config_path or default_config_path())
        source = typer.get_text_stream("stdin").read() if str(file) == "-" else file.read_text()
    except Exception as e:
        handle_error(e)
    width = indent if indent is not None else config.xml_indent
    typer.echo(format_xml(source, " " * width))


@typer_app.command()
def functions() -> None:
    """List the available template functions."""
    table = Table(title="Template functions")
    table.add_column("Name")
    table.add_column("Aliases")
    table.add_column("Arguments")
    table.add_column("Description")
    for d in default_registry().describe():
        table.add_row(
            d.name,
            ", ".join(d.aliases),
            ", ".join(a.name for a in d.args),
            d.description or "",
        )
    console.print(table)


def app() -> None:
    """Entry point for the CLI."""
    typer_app()


if __name__ == "__main__":
    app()
