"""
Saved translations: the save path from the editor and record management.
"""
import logging
from datetime import datetime
from typing import List, Optional

from novtl.models import SavedTranslation, new_id, utc_timestamp
from novtl.persistence import PersistenceError, PersistenceGateway

logger = logging.getLogger(__name__)

DEFAULT_CHAPTER_NAME = "Chapter {number}"
FALLBACK_RECORD_NAME = "Translation {short_id}"

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_A_Z = "a-z"
SORT_Z_A = "z-a"
SORT_ORDERS = (SORT_NEWEST, SORT_OLDEST, SORT_A_Z, SORT_Z_A)

COLLECTION_SEPARATOR = "-------------------"


def sort_translations(items: List[SavedTranslation], sort_order: str = SORT_NEWEST) -> List[SavedTranslation]:
    """
    Order saved translations.

    Raises:
        ValueError: For an unknown sort order
    """
    if sort_order == SORT_NEWEST:
        return sorted(items, key=lambda item: item.timestamp, reverse=True)
    if sort_order == SORT_OLDEST:
        return sorted(items, key=lambda item: item.timestamp)
    if sort_order == SORT_A_Z:
        return sorted(items, key=lambda item: item.name.lower())
    if sort_order == SORT_Z_A:
        return sorted(items, key=lambda item: item.name.lower(), reverse=True)
    raise ValueError(f"Unknown sort order: {sort_order}")


def format_saved_date(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).strftime("%d %B %Y %H:%M")
    except ValueError:
        return timestamp


def name_matches(saved_name: str, wanted: str) -> bool:
    """Bidirectional case-insensitive substring match on names."""
    saved = saved_name.strip().lower()
    query = wanted.strip().lower()
    if not saved or not query:
        return False
    return query in saved or saved in query


class TranslationLibrary:
    """Saved translations of all projects, stored through a PersistenceGateway"""

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def list_project(self, project_id: str, sort_order: str = SORT_NEWEST) -> List[SavedTranslation]:
        """Saved translations of a project, newest first unless another order is asked for."""
        records = await self.gateway.list_by_project(project_id)
        return sort_translations([SavedTranslation.from_record(record) for record in records], sort_order)

    async def search(self, project_id: str, query: str,
                     sort_order: str = SORT_NEWEST) -> List[SavedTranslation]:
        """
        Saved translations whose name or text contains the query, case-insensitively.

        A blank query returns the whole project.
        """
        items = await self.list_project(project_id, sort_order)
        needle = query.strip().lower()
        if not needle:
            return items
        return [item for item in items if needle in item.name.lower() or needle in item.text.lower()]

    async def export_collection(self, project_id: str, query: str = "",
                                sort_order: str = SORT_NEWEST) -> str:
        """
        Concatenate saved translations into one plain-text collection.

        Each entry is a `[name] - Saved: <date>` header, the text and a
        separator line. Returns an empty string when nothing matches.
        """
        items = await self.search(project_id, query, sort_order)
        return "\n".join(
            f"[{item.name}] - Saved: {format_saved_date(item.timestamp)}\n{item.text}\n{COLLECTION_SEPARATOR}\n"
            for item in items
        )

    async def save_translation(self, project_id: str, text: str) -> Optional[SavedTranslation]:
        """
        Save a finished translation under the next chapter name.

        Args:
            project_id: Owning project
            text: Translated text

        Returns:
            The saved record, or None when the text is blank

        Raises:
            PersistenceError: If the store rejects the write
        """
        if not text or not text.strip():
            return None

        try:
            existing = await self.gateway.list_by_project(project_id)
            number = len(existing) + 1
        except PersistenceError as e:
            logger.warning(f"Could not count saved translations, numbering from 1: {e}")
            number = 1

        item = SavedTranslation(
            id=new_id(),
            project_id=project_id,
            name=DEFAULT_CHAPTER_NAME.format(number=number),
            text=text,
            timestamp=utc_timestamp(),
        )
        await self.gateway.put(item.to_record())
        logger.info(f"Saved translation '{item.name}' ({len(text)} chars) to project {project_id}")
        return item

    async def rename(self, item: SavedTranslation, new_name: str) -> SavedTranslation:
        """Rename a record; a blank name falls back to a name derived from its id."""
        safe_name = new_name.strip() or FALLBACK_RECORD_NAME.format(short_id=item.id[:4])
        renamed = SavedTranslation(item.id, item.project_id, safe_name, item.text, item.timestamp)
        await self.gateway.put(renamed.to_record())
        return renamed

    async def update_text(self, item: SavedTranslation, text: str) -> SavedTranslation:
        updated = SavedTranslation(item.id, item.project_id, item.name, text, item.timestamp)
        await self.gateway.put(updated.to_record())
        return updated

    async def delete(self, record_id: str) -> None:
        await self.gateway.delete(record_id)

    async def clear_project(self, project_id: str) -> None:
        await self.gateway.clear_project(project_id)

    async def find_by_name(self, project_id: str, name: str) -> Optional[SavedTranslation]:
        """
        First saved translation of the project whose name matches.

        Matching is a case-insensitive substring test in both directions, so
        "chapter 3" finds "Chapter 3 - The Duel" and "the whole Chapter 3"
        finds "Chapter 3".
        """
        wanted = name.strip()
        if not wanted:
            return None
        for record in await self.gateway.list_by_project(project_id):
            if name_matches(record.get("name", ""), wanted):
                return SavedTranslation.from_record(record)
        return None
