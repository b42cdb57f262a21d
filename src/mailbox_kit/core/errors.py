"""Errors raised by the mailbox sync and spellcheck layers.

Transport failures (``httplib2``/``OSError``/``httpx.TransportError``) are never
wrapped; they reach the caller unchanged.
"""

from typing import Optional


class MailboxKitError(Exception):
    """Base class for all Mailbox Kit errors."""


class MissingAuthenticationError(MailboxKitError):
    """Raised when an authenticated call is made without credentials."""

    def __init__(self, message: str = "Mailbox missing authentication information") -> None:
        super().__init__(message)


class InvalidStatusError(MailboxKitError):
    """The remote API answered with something other than HTTP 200.

    Attributes:
        status: the HTTP status code returned.
        reason: the server supplied reason/message, if any.
    """

    def __init__(self, status: int, reason: Optional[str] = None) -> None:
        self.status = status
        self.reason = reason or ""
        super().__init__(f"Invalid HTTP status code {status}")


class DuplicateWatchError(InvalidStatusError):
    """Another push notification client already watches this account."""


class AtomParseError(MailboxKitError):
    """A required element of an Atom feed is missing or malformed."""


class UnknownDictionaryError(MailboxKitError):
    """No inbuilt or user installed dictionary exists for a language."""

    def __init__(self, message: str = "Unknown Dictionary") -> None:
        super().__init__(message)
