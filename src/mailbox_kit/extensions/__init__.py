"""Hosted extension support."""

from .session_manager import (
    BrowserSession,
    ContentExtensions,
    HostedExtensionProvider,
    HostedExtensionSessionManager,
    SessionProtocol,
)

__all__ = [
    "BrowserSession",
    "ContentExtensions",
    "HostedExtensionProvider",
    "HostedExtensionSessionManager",
    "SessionProtocol",
]
