"""
Text-related helpers.
"""

from __future__ import annotations

import re

_WHITESPACE_PATTERN = re.compile(r"\s+")


def customer_slug(value: str) -> str:
    """
    Lower-case a customer name and join its words with hyphens.

    Only whitespace is rewritten; other characters pass through unchanged so the
    directory name stays recognisable ("Acme Corp" -> "acme-corp").
    """
    raw = (value or "").strip().lower()
    return _WHITESPACE_PATTERN.sub("-", raw)
