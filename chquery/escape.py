"""Escaping of string literals and identifiers for SQL text."""

from __future__ import annotations

import re

__all__ = ["escape", "string", "identifier"]

_SPECIAL = re.compile(r"[\\'`\t\n]")


def escape(src: str) -> str:
    """Put a backslash before every backslash, quote, backtick, tab and newline."""
    return _SPECIAL.sub(lambda match: "\\" + match.group(0), src)


def string(src: str) -> str:
    """Render ``src`` as a single-quoted SQL string literal."""
    return f"'{escape(src)}'"


def identifier(src: str) -> str:
    """Render ``src`` as a backtick-quoted SQL identifier."""
    return f"`{escape(src)}`"