"""CLI command modules."""

from . import atom, auth, dictionaries, gmail

__all__ = ["atom", "auth", "dictionaries", "gmail"]
