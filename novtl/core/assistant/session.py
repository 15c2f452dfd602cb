"""
Full assistant interaction: user turn, model turn, state reconciliation and
memory-injection follow-ups.
"""
import asyncio
import logging
from typing import Dict, Optional

from novtl.core.library import TranslationLibrary
from novtl.core.llm import LLMError, create_llm_provider, resolve_provider_config
from novtl.models import ROLE_MODEL, ROLE_USER, AppState, ChatMessage, EditorContext
from novtl.persistence import PersistenceError
from .actions import AssistantAction
from .orchestrator import AssistantOrchestrator, ProviderFactory
from .reconciler import ActionReconciler

logger = logging.getLogger(__name__)

ERROR_REPLY = "Sorry, system error: {error}"
STORE_ERROR_REPLY = "Sorry, I could not open your saved translations: {error}"


class AssistantSession:
    """
    Chat with the assistant on behalf of the UI.

    Turns are serialized per project: a second request for the same project
    waits until the first one, including its follow-ups, has been applied.
    """

    def __init__(
        self,
        state: AppState,
        library: TranslationLibrary,
        provider_factory: Optional[ProviderFactory] = None,
    ):
        self.state = state
        self.reconciler = ActionReconciler(state, library)
        self.orchestrator = AssistantOrchestrator(provider_factory or self._default_provider)
        self._project_locks: Dict[str, asyncio.Lock] = {}

    def _default_provider(self):
        return create_llm_provider(resolve_provider_config(self.state))

    def _lock_for(self, project_id: str) -> asyncio.Lock:
        if project_id not in self._project_locks:
            self._project_locks[project_id] = asyncio.Lock()
        return self._project_locks[project_id]

    async def process_request(
        self,
        text: str,
        editor_context: Optional[EditorContext] = None,
    ) -> Optional[AssistantAction]:
        """
        Handle one user message.

        Args:
            text: What the user typed
            editor_context: Snapshot of the editor panes

        Returns:
            The last action applied, or None when nothing was sent
        """
        if not text or not text.strip():
            return None

        project_id = self.state.active_project.id
        async with self._lock_for(project_id):
            action = None
            pending: Optional[str] = text
            hidden = False
            while pending is not None:
                action, pending = await self._run_turn(pending, hidden, editor_context)
                hidden = True
            return action

    async def _run_turn(self, text: str, hidden: bool, editor_context: Optional[EditorContext]):
        prior_history = list(self.state.chat)
        self.reconciler.append_message(ChatMessage(role=ROLE_USER, text=text, hidden=hidden))

        try:
            action = await self.orchestrator.respond(
                text, prior_history, self.state.active_project, editor_context
            )
        except LLMError as e:
            logger.error(f"Assistant turn failed: {e}")
            self.reconciler.append_message(ChatMessage(role=ROLE_MODEL, text=ERROR_REPLY.format(error=e)))
            return None, None

        try:
            outcome = await self.reconciler.apply(action)
        except PersistenceError as e:
            logger.error(f"Saved translations unavailable: {e}")
            self.reconciler.append_message(ChatMessage(role=ROLE_MODEL, text=STORE_ERROR_REPLY.format(error=e)))
            return None, None
        return action, outcome.follow_up

    def clear_chat(self) -> None:
        """Manual clear from the UI: leaves an empty history."""
        self.reconciler.clear_chat()
