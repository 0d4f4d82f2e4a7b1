"""Text folding for case- and diacritic-insensitive search."""

from __future__ import annotations

import unicodedata


def fold_text(value: str | None) -> str:
    """Lower-case *value* and strip combining marks (``"Café"`` → ``"cafe"``)."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def searchable_text(*parts: str | None) -> str:
    """Folded text the store matches free-text queries against."""
    return "\n".join(fold_text(p) for p in parts if p)
