"""
Name normalization for contribution search.

A single normalizer is shared by record loading and query handling so that
index keys and query keys can never drift apart.
"""

import re
from typing import Final

_DISALLOWED: Final = re.compile(r"[^a-z0-9\s]")
_WHITESPACE: Final = re.compile(r"\s+")


def normalize_name(name: str | None) -> str:
    """
    Normalize a contributor name into its comparison key.

    - Lower-cases the name
    - Removes every character outside [a-z0-9] and whitespace
    - Collapses whitespace runs to a single space and trims the ends

    The function is total (None and "" yield "") and idempotent.

    Examples:
        >>> normalize_name("SMITH, JOHN A.")
        'smith john a'
        >>> normalize_name("  O'Brien-Jones  ")
        'obrienjones'
        >>> normalize_name(None)
        ''
    """
    if not name:
        return ""
    name = _DISALLOWED.sub("", str(name).lower())
    return _WHITESPACE.sub(" ", name).strip()


def tokenize(normalized: str) -> list[str]:
    """Split a normalized name into its space-separated tokens."""
    return normalized.split(" ") if normalized else []
