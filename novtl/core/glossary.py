"""
Glossary helpers: relevance filtering, term comparison and normalization of
the loosely structured payloads the assistant sends to `add_to_glossary`.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from novtl.models import GlossaryItem

# Field spellings accepted for each glossary field, in priority order
GLOSSARY_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "original": ("original", "Original", "term", "source", "OriginalTerm"),
    "translated": ("translated", "Translated", "translation", "target", "TargetTerm"),
}


class DuplicateGlossaryError(ValueError):
    """Raised when a manually entered term already exists in the glossary.

    Attributes:
        original: The rejected term
    """
    def __init__(self, original: str):
        super().__init__(
            f'"{original}" is already in the glossary. Remove it first if you want to change its translation.'
        )
        self.original = original


def normalize_term(term: str) -> str:
    """Comparison key for glossary originals: trimmed, case-insensitive."""
    return (term or "").strip().lower()


def filter_relevant_glossary(glossary: Sequence[GlossaryItem], text: str) -> List[GlossaryItem]:
    """
    Select the glossary entries that actually occur in a text.

    Only those entries are sent to the model, which keeps the prompt small and
    free of irrelevant constraints.

    Args:
        glossary: Full project glossary
        text: Input text

    Returns:
        Entries whose original is a case-insensitive substring of the text,
        in glossary order
    """
    haystack = text.lower()
    return [item for item in glossary if item.original and item.original.lower() in haystack]


def find_glossary_item(glossary: Sequence[GlossaryItem], original: str) -> Optional[GlossaryItem]:
    key = normalize_term(original)
    for item in glossary:
        if normalize_term(item.original) == key:
            return item
    return None


def search_glossary(glossary: Sequence[GlossaryItem], query: str) -> List[GlossaryItem]:
    """Entries whose original or translation contains the query (case-insensitive)."""
    needle = query.lower()
    return [
        item for item in glossary
        if needle in item.original.lower() or needle in item.translated.lower()
    ]


def _pick_field(entry: Dict[str, Any], field: str) -> str:
    for alias in GLOSSARY_FIELD_ALIASES[field]:
        value = entry.get(alias)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def extract_raw_entries(payload: Any) -> List[Any]:
    """
    Flatten an `add_to_glossary` payload into a list of raw entries.

    Accepted shapes: a list of entries, `{"items": [...]}`, or a single entry
    object. Anything else yields no entries.
    """
    if isinstance(payload, list):
        return list(payload)
    if isinstance(payload, dict):
        if "items" in payload:
            items = payload["items"]
            if isinstance(items, list):
                return list(items)
            if isinstance(items, dict):
                return [items]
            return []
        return [payload]
    return []


def normalize_glossary_entry(entry: Any) -> Optional[Dict[str, str]]:
    """
    Map one raw entry onto `{"original", "translated"}`.

    Returns:
        The normalized pair, or None when either field is missing
    """
    if not isinstance(entry, dict):
        return None
    original = _pick_field(entry, "original")
    translated = _pick_field(entry, "translated")
    if not original or not translated:
        return None
    return {"original": original, "translated": translated}
