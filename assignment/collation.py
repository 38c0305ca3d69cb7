"""Sortierschlüssel für Schülernamen innerhalb einer Klasse."""

import unicodedata

from config.schema import CollationPolicy
from models.pupil import Pupil


def _strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collate_name(name: str, policy: CollationPolicy) -> str:
    """Normalisiert einen Namen gemäß Sortierregel.

    DIN 5007-1 (Wörterbuch): "Ärger" → "arger", "Strauß" → "strauss".
    """
    if policy == CollationPolicy.ORDINAL:
        return name
    if policy == CollationPolicy.CASEFOLD:
        return name.casefold()
    return _strip_diacritics(name).casefold()


def pupil_sort_key(pupil: Pupil, policy: CollationPolicy) -> tuple[str, str, int]:
    """Totale Ordnung: normalisierter Name, Originalname, ID."""
    return collate_name(pupil.name, policy), pupil.name, pupil.id
