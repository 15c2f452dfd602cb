"""
Applies assistant actions to the application state.

ActionReconciler is the only writer of glossary and chat state. Every
operation computes the new lists first and assigns them at the end, so an
action either lands completely or not at all.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from novtl.core.glossary import (
    DuplicateGlossaryError,
    extract_raw_entries,
    normalize_glossary_entry,
    normalize_term,
)
from novtl.core.library import TranslationLibrary
from novtl.models import ROLE_MODEL, AppState, ChatMessage, GlossaryItem, Project, new_id
from novtl.prompts import build_memory_injection
from .actions import (
    AddGlossary,
    AssistantAction,
    ClearChat,
    NoAction,
    ReadSavedTranslation,
    RemoveGlossary,
)

logger = logging.getLogger(__name__)


@dataclass
class ReconcileOutcome:
    """What an action changed

    Attributes:
        added: Glossary entries created
        duplicates: Originals rejected because they already exist
        invalid: Payload entries dropped for missing fields
        removed: Number of glossary entries deleted
        follow_up: Hidden memory-injection turn to send to the assistant next
    """
    added: List[GlossaryItem] = field(default_factory=list)
    duplicates: List[str] = field(default_factory=list)
    invalid: int = 0
    removed: int = 0
    follow_up: Optional[str] = None


class ActionReconciler:
    """Single writer of glossary and chat state"""

    def __init__(self, state: AppState, library: TranslationLibrary):
        self.state = state
        self.library = library

    async def apply(self, action: AssistantAction) -> ReconcileOutcome:
        """
        Apply one decoded action.

        Args:
            action: Action returned by the assistant orchestrator

        Returns:
            ReconcileOutcome describing the changes

        Raises:
            PersistenceError: If the saved-translation lookup fails
            TypeError: For an object outside the action set
        """
        if isinstance(action, AddGlossary):
            return self._add_glossary(action)
        if isinstance(action, RemoveGlossary):
            return self._remove_glossary(action)
        if isinstance(action, ClearChat):
            self.clear_chat(seed=action.message)
            return ReconcileOutcome()
        if isinstance(action, ReadSavedTranslation):
            return await self._read_saved_translation(action)
        if isinstance(action, NoAction):
            self._append_reply(action.message)
            return ReconcileOutcome()
        raise TypeError(f"Unhandled assistant action: {action!r}")

    # ------------------------------------------------------------------
    # Assistant actions
    # ------------------------------------------------------------------

    def _add_glossary(self, action: AddGlossary) -> ReconcileOutcome:
        project = self.state.active_project
        outcome = ReconcileOutcome()
        seen: Set[str] = {normalize_term(item.original) for item in project.glossary}

        for raw_entry in extract_raw_entries(action.raw_items):
            entry = normalize_glossary_entry(raw_entry)
            if entry is None:
                outcome.invalid += 1
                continue
            key = normalize_term(entry["original"])
            if key in seen:
                outcome.duplicates.append(entry["original"])
                continue
            seen.add(key)
            outcome.added.append(GlossaryItem(
                id=new_id(),
                original=entry["original"],
                translated=entry["translated"],
                source_language=project.source_language,
            ))

        if outcome.invalid:
            logger.info(f"Dropped {outcome.invalid} glossary entries with missing fields")

        self._commit(project, project.glossary + outcome.added,
                     action.message + self._add_summary(outcome))
        return outcome

    @staticmethod
    def _add_summary(outcome: ReconcileOutcome) -> str:
        summary = ""
        if outcome.added:
            summary += f"\n\n*(System: saved {len(outcome.added)} new item(s).)*"
        if outcome.duplicates:
            summary += (
                "\n\n**Warning:** the following items were NOT added because they are "
                "**already in** the glossary:\n"
                + "\n".join(f"- {original}" for original in outcome.duplicates)
                + "\n\n*Remove them from the glossary first if you want to change their "
                "translation, or ask me to remove them.*"
            )
        if not outcome.added and not outcome.duplicates:
            summary += "\n\n*(System: no valid glossary data was received.)*"
        return summary

    def _remove_glossary(self, action: RemoveGlossary) -> ReconcileOutcome:
        project = self.state.active_project
        to_remove = {normalize_term(original) for original in action.originals}
        remaining = [item for item in project.glossary if normalize_term(item.original) not in to_remove]
        removed = len(project.glossary) - len(remaining)

        self._commit(project, remaining,
                     action.message + f"\n\n*(System: removed {removed} item(s) from the glossary.)*")
        return ReconcileOutcome(removed=removed)

    async def _read_saved_translation(self, action: ReadSavedTranslation) -> ReconcileOutcome:
        project_id = self.state.active_project.id
        item = await self.library.find_by_name(project_id, action.name)

        self._append_reply(action.message)
        if item is None:
            self._append_reply(
                f'I looked for "{action.name}" in your saved translations but could not find it. '
                "Please check the name."
            )
            return ReconcileOutcome()

        logger.info(f"Loading saved translation '{item.name}' into the assistant's memory")
        return ReconcileOutcome(follow_up=build_memory_injection(item.name, item.text))

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def append_message(self, message: ChatMessage) -> None:
        self.state.chat = self.state.chat + [message]

    def _append_reply(self, text: str) -> None:
        self.append_message(ChatMessage(role=ROLE_MODEL, text=text))

    def clear_chat(self, seed: Optional[str] = None) -> None:
        """Replace the history with nothing, or with a single seed reply."""
        self.state.chat = [ChatMessage(role=ROLE_MODEL, text=seed)] if seed else []

    def _commit(self, project: Project, glossary: List[GlossaryItem], reply: str) -> None:
        new_chat = self.state.chat + [ChatMessage(role=ROLE_MODEL, text=reply)]
        project.glossary = glossary
        self.state.chat = new_chat

    # ------------------------------------------------------------------
    # Manual edits
    # ------------------------------------------------------------------

    def add_manual_item(self, original: str, translated: str) -> GlossaryItem:
        """
        Add a term typed by the user.

        Raises:
            ValueError: If either side is blank
            DuplicateGlossaryError: If the original already exists
        """
        original = original.strip()
        translated = translated.strip()
        if not original or not translated:
            raise ValueError("Both the original term and its translation are required")

        project = self.state.active_project
        if any(normalize_term(item.original) == normalize_term(original) for item in project.glossary):
            raise DuplicateGlossaryError(original)

        item = GlossaryItem(
            id=new_id(),
            original=original,
            translated=translated,
            source_language=project.source_language,
        )
        project.glossary = project.glossary + [item]
        return item

    def remove_items(self, item_ids: Iterable[str]) -> int:
        """Remove glossary entries by id; returns how many were removed."""
        ids = set(item_ids)
        project = self.state.active_project
        remaining = [item for item in project.glossary if item.id not in ids]
        removed = len(project.glossary) - len(remaining)
        project.glossary = remaining
        return removed

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def create_project(self, name: str) -> Project:
        """New project with the active project's settings and an empty glossary; it becomes active."""
        name = name.strip()
        if not name:
            raise ValueError("Project name is required")
        template = self.state.active_project
        project = Project(
            id=new_id(),
            name=name,
            source_language=template.source_language,
            target_language=template.target_language,
            translation_instruction=template.translation_instruction,
        )
        self.state.projects = self.state.projects + [project]
        self.state.active_project_id = project.id
        return project

    async def delete_project(self, project_id: str) -> None:
        """
        Delete a project with its glossary and saved translations.

        The saved translations are cleared first; if that fails the project
        is left untouched.

        Raises:
            ValueError: If it is the last project
            LookupError: If the project does not exist
            PersistenceError: If the saved translations cannot be cleared
        """
        if self.state.get_project(project_id) is None:
            raise LookupError(f"Unknown project {project_id}")
        if len(self.state.projects) <= 1:
            raise ValueError("At least one project must remain")

        await self.library.clear_project(project_id)

        remaining = [project for project in self.state.projects if project.id != project_id]
        self.state.projects = remaining
        if self.state.active_project_id == project_id:
            self.state.active_project_id = remaining[0].id
