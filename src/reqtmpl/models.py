"""Request and environment models.

These are the shapes the renderer reads templates from. Storage of these
objects lives elsewhere; the models only describe them. Field names accept
both snake_case and the camelCase used by exported workspace data.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class _Model(BaseModel):
    model_config = {"populate_by_name": True, "alias_generator": to_camel}


def _json_normalize(value: Any) -> Any:
    """Coerce values YAML may produce (dates, timestamps) to JSON types."""
    if value is None:
        return value
    return json.loads(json.dumps(value, default=str))


class _Request(_Model):
    """Base for request models with JSON ``authentication`` (and ``body``)."""

    @field_validator("body", "authentication", mode="before", check_fields=False)
    @classmethod
    def normalize_json(cls, value: Any) -> Any:
        return _json_normalize(value)


class EnvironmentVariable(_Model):
    """A single variable definition in an environment."""

    name: str
    value: str = ""
    enabled: bool = True
    id: str | None = None


class Environment(_Model):
    """A named set of variables.

    Environments form a chain ordered from most specific (folder) to most
    general (workspace base).
    """

    name: str = ""
    variables: list[EnvironmentVariable] = Field(default_factory=list)
    id: str | None = None
    workspace_id: str | None = None
    parent_model: str | None = None
    parent_id: str | None = None


class HttpRequestHeader(_Model):
    """A header (or gRPC metadata entry) name/value pair."""

    name: str = ""
    value: str = ""
    enabled: bool = True
    id: str | None = None


class HttpUrlParameter(_Model):
    """A URL query parameter or ``:name`` path placeholder."""

    name: str = ""
    value: str = ""
    enabled: bool = True
    id: str | None = None


class HttpRequest(_Request):
    id: str | None = None
    workspace_id: str | None = None
    folder_id: str | None = None
    name: str = ""
    method: str = "GET"
    url: str = ""
    url_parameters: list[HttpUrlParameter] = Field(default_factory=list)
    headers: list[HttpRequestHeader] = Field(default_factory=list)
    body_type: str | None = None
    body: dict[str, Any] = Field(default_factory=dict)
    authentication_type: str | None = None
    authentication: dict[str, Any] = Field(default_factory=dict)


class GrpcRequest(_Request):
    id: str | None = None
    workspace_id: str | None = None
    folder_id: str | None = None
    name: str = ""
    url: str = ""
    service: str | None = None
    method: str | None = None
    message: str = ""
    metadata: list[HttpRequestHeader] = Field(default_factory=list)
    authentication_type: str | None = None
    authentication: dict[str, Any] = Field(default_factory=dict)


class WebsocketRequest(_Request):
    id: str | None = None
    workspace_id: str | None = None
    folder_id: str | None = None
    name: str = ""
    url: str = ""
    message: str = ""
    headers: list[HttpRequestHeader] = Field(default_factory=list)
    authentication_type: str | None = None
    authentication: dict[str, Any] = Field(default_factory=dict)
