"""CLI commands"""

from .utils import console, handle_error, setup_logging

__all__ = ["console", "handle_error", "setup_logging"]
