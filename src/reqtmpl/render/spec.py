"""Render pass configuration and context."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorBehavior(str, Enum):
    """What a render pass does with a missing variable or failed function."""

    THROW = "throw"
    SILENT = "silent"


class RenderPurpose(str, Enum):
    """Why a template is being rendered."""

    SEND = "send"
    PREVIEW = "preview"


class RenderOptions(BaseModel):
    """Options for one render pass."""

    model_config = {"frozen": True}

    error_behavior: ErrorBehavior = ErrorBehavior.THROW


class WindowContext(BaseModel):
    """Ambient context handed to template functions.

    Functions that need a workspace (e.g. ``secure``) read `workspace_id`
    from here and fail when it is absent.
    """

    model_config = {"frozen": True}

    label: str | None = None
    workspace_id: str | None = None
    environment_id: str | None = None
    purpose: RenderPurpose = RenderPurpose.SEND
