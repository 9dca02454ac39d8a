"""Text normalisation used for win detection and exact-word comparisons."""

from __future__ import annotations

import unicodedata


def normalize(text: str) -> str:
    """Return *text* lowercased and without diacritics.

    ``normalize("Café") == normalize("CAFE") == "cafe"``. Arabic harakat are
    combining marks as well, so they are dropped the same way.
    """
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def contains_word(text: str, word: str) -> bool:
    """Whether normalized *text* contains normalized *word* as a substring."""
    return normalize(word) in normalize(text)
