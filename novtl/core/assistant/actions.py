"""
Actions decoded from an assistant turn.

The set is closed: every action is one of the dataclasses below, and each
carries the message shown to the user.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple, Union


class ActionType(Enum):
    ADD_GLOSSARY = "ADD_GLOSSARY"
    REMOVE_GLOSSARY = "REMOVE_GLOSSARY"
    CLEAR_CHAT = "CLEAR_CHAT"
    READ_SAVED_TRANSLATION = "READ_SAVED_TRANSLATION"
    NONE = "NONE"


@dataclass(frozen=True)
class AddGlossary:
    """Save terms; `raw_items` is the tool arguments exactly as the model sent them"""
    raw_items: Any
    message: str
    type = ActionType.ADD_GLOSSARY


@dataclass(frozen=True)
class RemoveGlossary:
    """Delete the entries whose original matches one of `originals`"""
    originals: Tuple[str, ...]
    message: str
    type = ActionType.REMOVE_GLOSSARY


@dataclass(frozen=True)
class ClearChat:
    message: str
    type = ActionType.CLEAR_CHAT


@dataclass(frozen=True)
class ReadSavedTranslation:
    """Load a saved translation of the active project into the assistant's memory"""
    name: str
    message: str
    type = ActionType.READ_SAVED_TRANSLATION


@dataclass(frozen=True)
class NoAction:
    """Plain text reply"""
    message: str
    type = ActionType.NONE


AssistantAction = Union[AddGlossary, RemoveGlossary, ClearChat, ReadSavedTranslation, NoAction]
