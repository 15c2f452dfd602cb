"""
Data structures shared by the translation engine and the assistant.

Project state lives in an explicit AppState object that callers pass by
reference. The assistant reconciler is the only component that writes to the
glossary and chat history of that state.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from novtl.config import (
    ASSISTANT_GREETING,
    AUTO_DETECT_LANGUAGE,
    DEFAULT_MODELS,
    DEFAULT_PROJECT_ID,
    DEFAULT_PROJECT_NAME,
    DEFAULT_PROVIDER,
    DEFAULT_TARGET_LANGUAGE,
    DEFAULT_TRANSLATION_INSTRUCTION,
)

ROLE_USER = "user"
ROLE_MODEL = "model"


def new_id() -> str:
    """Generate a fresh unique identifier."""
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class GlossaryItem:
    """A fixed term translation enforced during translation"""
    id: str
    original: str
    translated: str
    source_language: str


@dataclass
class ChatMessage:
    """One turn of the assistant conversation.

    Hidden messages (memory injections) are kept in the history but never
    shown in the transcript nor replayed to the model as prior context.
    """
    role: str
    text: str
    hidden: bool = False


@dataclass
class Project:
    """A translation project owning its glossary"""
    id: str
    name: str
    source_language: str = AUTO_DETECT_LANGUAGE
    target_language: str = DEFAULT_TARGET_LANGUAGE
    translation_instruction: str = DEFAULT_TRANSLATION_INSTRUCTION
    glossary: List[GlossaryItem] = field(default_factory=list)


@dataclass(frozen=True)
class EditorContext:
    """Read-only snapshot of the editor panes, never persisted"""
    source_text: str = ""
    translated_text: str = ""


@dataclass
class SavedTranslation:
    """A translated text persisted in the record store"""
    id: str
    project_id: str
    name: str
    text: str
    timestamp: str

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "name": self.name,
            "text": self.text,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "SavedTranslation":
        return cls(
            id=record["id"],
            project_id=record["projectId"],
            name=record.get("name", ""),
            text=record.get("text", ""),
            timestamp=record.get("timestamp", ""),
        )


@dataclass
class TranslationSettings:
    """Effective settings for one translation call"""
    source_language: str = AUTO_DETECT_LANGUAGE
    target_language: str = DEFAULT_TARGET_LANGUAGE
    translation_instruction: str = DEFAULT_TRANSLATION_INSTRUCTION
    glossary: List[GlossaryItem] = field(default_factory=list)

    @classmethod
    def from_project(cls, project: Project, instruction: Optional[str] = None) -> "TranslationSettings":
        """
        Build settings from a project.

        Args:
            project: Active project
            instruction: Unsaved style instruction overriding the project's own

        Returns:
            TranslationSettings sharing the project's glossary entries
        """
        return cls(
            source_language=project.source_language,
            target_language=project.target_language,
            translation_instruction=instruction if instruction is not None else project.translation_instruction,
            glossary=list(project.glossary),
        )


@dataclass
class AppState:
    """Application settings: provider selection, chat history and projects"""
    active_provider: str = DEFAULT_PROVIDER
    api_keys: Dict[str, str] = field(default_factory=dict)
    selected_models: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_MODELS))
    chat: List[ChatMessage] = field(default_factory=list)
    active_project_id: str = DEFAULT_PROJECT_ID
    projects: List[Project] = field(default_factory=list)

    @classmethod
    def default(cls) -> "AppState":
        """Fresh state with the default project and the assistant greeting."""
        return cls(
            chat=[ChatMessage(role=ROLE_MODEL, text=ASSISTANT_GREETING)],
            active_project_id=DEFAULT_PROJECT_ID,
            projects=[Project(id=DEFAULT_PROJECT_ID, name=DEFAULT_PROJECT_NAME)],
        )

    @property
    def active_project(self) -> Project:
        for project in self.projects:
            if project.id == self.active_project_id:
                return project
        if not self.projects:
            raise LookupError("No project available")
        return self.projects[0]

    def get_project(self, project_id: str) -> Optional[Project]:
        for project in self.projects:
            if project.id == project_id:
                return project
        return None
