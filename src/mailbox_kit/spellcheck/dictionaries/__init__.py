"""Bundled spellcheck dictionaries."""
