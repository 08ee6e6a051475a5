"""Logging micro API for uiforge."""

from .lib import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
