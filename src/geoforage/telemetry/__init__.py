"""Logging boundary."""

from .logging import LOGGER_NAME, configure_logging

__all__ = ["LOGGER_NAME", "configure_logging"]
