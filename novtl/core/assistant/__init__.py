"""
Writing assistant: tool-call decoding and reconciliation.

Components:
    - actions: Closed set of decoded actions
    - tools: Tool declarations offered to the model
    - orchestrator: One conversational turn
    - reconciler: Applies actions to the application state
    - session: Full interaction loop driven by the UI
"""

from .actions import (
    ActionType,
    AddGlossary,
    AssistantAction,
    ClearChat,
    NoAction,
    ReadSavedTranslation,
    RemoveGlossary,
)
from .orchestrator import AssistantOrchestrator
from .reconciler import ActionReconciler, ReconcileOutcome
from .session import AssistantSession

__all__ = [
    "ActionType",
    "AddGlossary",
    "AssistantAction",
    "ClearChat",
    "NoAction",
    "ReadSavedTranslation",
    "RemoveGlossary",
    "AssistantOrchestrator",
    "ActionReconciler",
    "ReconcileOutcome",
    "AssistantSession",
]
