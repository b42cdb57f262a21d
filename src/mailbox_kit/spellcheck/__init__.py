"""Spellcheck dictionary support."""

from .dictionary_load import Dictionary, DictionaryLoad

__all__ = [
    "Dictionary",
    "DictionaryLoad",
]
