"""
Mailbox Kit - glue layers of a desktop email client

Gmail API and Atom feed sync helpers, spellcheck dictionary loading and
per-partition protocol registration for hosted extensions.
"""

__version__ = "0.1.0"
__description__ = "Gmail sync, Atom feed and spellcheck helpers for a desktop mail client"

from .core.google_http import GoogleHTTP
from .core.fetch_service import FetchService
from .extensions.session_manager import HostedExtensionSessionManager
from .spellcheck.dictionary_load import DictionaryLoad

__all__ = [
    "GoogleHTTP",
    "FetchService",
    "HostedExtensionSessionManager",
    "DictionaryLoad",
]
