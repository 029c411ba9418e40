"""Configuration parsing for reqtmpl.yaml and request/environment files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from reqtmpl.models import Environment, GrpcRequest, HttpRequest, WebsocketRequest
from reqtmpl.render.spec import ErrorBehavior, RenderOptions, WindowContext

CONFIG_ENV_VAR = "REQTMPL_CONFIG"
DEFAULT_CONFIG_FILE = "reqtmpl.yaml"

REQUEST_KINDS: dict[str, type[BaseModel]] = {
    "http": HttpRequest,
    "grpc": GrpcRequest,
    "websocket": WebsocketRequest,
}


class ReqtmplConfig(BaseModel):
    """Full reqtmpl.yaml configuration"""

    error_behavior: ErrorBehavior = ErrorBehavior.THROW
    xml_indent: int = Field(default=2, ge=0)
    workspace_id: str | None = None
    # most specific first
    environments: list[Environment] = Field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "ReqtmplConfig":
        """Load config from yaml file, or defaults if it does not exist"""
        if not path.exists():
            return cls()

        return cls.model_validate(_read_yaml(path) or {})

    def render_options(self) -> RenderOptions:
        return RenderOptions(error_behavior=self.error_behavior)

    def window_context(self) -> WindowContext:
        return WindowContext(workspace_id=self.workspace_id)


def default_config_path() -> Path:
    """Config path from $REQTMPL_CONFIG, falling back to ./reqtmpl.yaml"""
    return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE))


def load_environment_chain(path: Path) -> list[Environment]:
    """Load an environment chain (most specific first) from YAML.

    The file holds either a list of environments or a mapping with an
    ``environments`` key.
    """
    data = _read_yaml(path)
    if isinstance(data, dict):
        data = data.get("environments") or []
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of environments in {path}")
    return [Environment.model_validate(e) for e in data]


def load_request(path: Path, kind: str = "http") -> BaseModel:
    """Load a request of the given kind (http, grpc, websocket) from YAML."""
    if kind not in REQUEST_KINDS:
        raise ValueError(
            f"Unknown request kind: {kind} (expected one of {', '.join(REQUEST_KINDS)})"
        )
    data = _read_yaml(path)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {path}")
    return REQUEST_KINDS[kind].model_validate(data)


def _read_yaml(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path) as f:
        return yaml.safe_load(f)
