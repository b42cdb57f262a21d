"""Core mailbox sync functionality."""

from .atom_feed import (
    AtomFeed,
    AtomMessage,
    fetch_gmail_atom_messages,
    fetch_gmail_atom_unread_count,
    fetch_gmail_basic_html,
)
from .errors import (
    AtomParseError,
    DuplicateWatchError,
    InvalidStatusError,
    MailboxKitError,
    MissingAuthenticationError,
    UnknownDictionaryError,
)
from .fetch_service import FetchService
from .google_auth import generate_auth, upgrade_auth_code_to_permanent
from .google_http import GoogleHTTP

__all__ = [
    "AtomFeed",
    "AtomMessage",
    "AtomParseError",
    "DuplicateWatchError",
    "FetchService",
    "GoogleHTTP",
    "InvalidStatusError",
    "MailboxKitError",
    "MissingAuthenticationError",
    "UnknownDictionaryError",
    "fetch_gmail_atom_messages",
    "fetch_gmail_atom_unread_count",
    "fetch_gmail_basic_html",
    "generate_auth",
    "upgrade_auth_code_to_permanent",
]
