"""Utility modules for Mailbox Kit."""

from .config import Settings, settings
from .logger import get_logger, setup_logging

__all__ = [
    "Settings",
    "settings",
    "get_logger",
    "setup_logging",
]
