"""
One conversational turn with the writing assistant.
"""
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from novtl.config import CHAT_HISTORY_WINDOW, READ_COMMAND_PREFIX, RESET_KEYWORDS
from novtl.core.llm import ActionDecodeError, LLMProvider, ProviderReply, ToolCall
from novtl.models import ChatMessage, EditorContext, Project
from novtl.prompts import build_assistant_prompt
from novtl.utils.llm_logger import log_llm_interaction
from .actions import (
    AddGlossary,
    AssistantAction,
    ClearChat,
    NoAction,
    ReadSavedTranslation,
    RemoveGlossary,
)
from .tools import ADD_TO_GLOSSARY, ASSISTANT_TOOLS, REMOVE_FROM_GLOSSARY

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[], LLMProvider]

CLEAR_CHAT_MESSAGE = "Done! My memory has been cleared."
EMPTY_REPLY_PLACEHOLDER = "..."


def is_reset_command(message: str) -> bool:
    return message.strip().lower() in RESET_KEYWORDS


def parse_read_command(message: str) -> Optional[str]:
    """Chapter name from a `/read <name>` command, or None."""
    stripped = message.strip()
    if not stripped.lower().startswith(READ_COMMAND_PREFIX.lower()):
        return None
    name = stripped[len(READ_COMMAND_PREFIX):].strip()
    return name or None


def visible_window(history: Sequence[ChatMessage], size: int = CHAT_HISTORY_WINDOW) -> List[ChatMessage]:
    """The last `size` non-hidden messages, oldest first."""
    visible = [msg for msg in history if not msg.hidden]
    if size <= 0:
        return []
    return visible[-size:]


def decode_tool_arguments(tool_call: ToolCall) -> Dict[str, Any]:
    """
    Decode tool-call arguments into a mapping.

    Raises:
        ActionDecodeError: If the arguments are not a JSON object
    """
    raw = tool_call.arguments
    if raw is None or raw == "":
        return {}
    if isinstance(raw, dict):
        return dict(raw)
    try:
        decoded = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise ActionDecodeError(f"Could not read the arguments of '{tool_call.name}': {e}")
    if not isinstance(decoded, dict):
        raise ActionDecodeError(f"Unexpected arguments for '{tool_call.name}': {raw!r}")
    return decoded


def _as_originals(value: Any) -> tuple:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return ()
    return tuple(str(item) for item in value if isinstance(item, (str, int, float)))


def decode_reply(reply: ProviderReply) -> AssistantAction:
    """
    Turn a provider reply into an action.

    Only the first tool call is honored; any further simultaneous calls are
    ignored. Calls to unknown tools fall back to the text reply.
    """
    if reply.tool_calls:
        tool_call = reply.tool_calls[0]
        if len(reply.tool_calls) > 1:
            logger.warning(f"Ignoring {len(reply.tool_calls) - 1} extra tool call(s)")

        if tool_call.name == ADD_TO_GLOSSARY:
            arguments = decode_tool_arguments(tool_call)
            return AddGlossary(raw_items=arguments, message="On it! Processing the glossary...")
        if tool_call.name == REMOVE_FROM_GLOSSARY:
            arguments = decode_tool_arguments(tool_call)
            originals = _as_originals(arguments.get("originals"))
            return RemoveGlossary(originals=originals, message=f"Sure, removing {len(originals)} item(s)...")

        logger.warning(f"Model called unknown tool '{tool_call.name}'")

    return NoAction(message=reply.text or EMPTY_REPLY_PLACEHOLDER)


class AssistantOrchestrator:
    """Drives one assistant turn: local commands, provider call, tool-call decoding"""

    def __init__(self, provider_factory: ProviderFactory, window_size: int = CHAT_HISTORY_WINDOW):
        """
        Args:
            provider_factory: Builds the provider; only called when the turn
                actually needs the network
            window_size: Number of prior visible messages sent as context
        """
        self.provider_factory = provider_factory
        self.window_size = window_size

    async def respond(
        self,
        message: str,
        history: Sequence[ChatMessage],
        project: Project,
        editor_context: Optional[EditorContext] = None,
    ) -> AssistantAction:
        """
        Produce the action for one user utterance.

        Args:
            message: Current-turn utterance (a hidden memory injection is passed here too)
            history: Messages preceding this turn
            project: Active project
            editor_context: Snapshot of the editor panes

        Returns:
            The decoded action

        Raises:
            ConfigurationError: If the provider has no API key
            TransportError: If the provider call fails
            ActionDecodeError: If tool-call arguments cannot be decoded
        """
        if is_reset_command(message):
            return ClearChat(message=CLEAR_CHAT_MESSAGE)

        chapter = parse_read_command(message)
        if chapter:
            return ReadSavedTranslation(name=chapter, message=f'Reading "{chapter}"...')

        system_prompt = build_assistant_prompt(project, editor_context)
        window = visible_window(history, self.window_size)

        provider = self.provider_factory()
        try:
            reply = await provider.chat(system_prompt, window, message, tools=ASSISTANT_TOOLS)
        finally:
            await provider.close()

        log_llm_interaction(
            system_prompt, message, reply.text, "assistant", provider.name,
            tool_calls=[f"{call.name}({call.arguments})" for call in reply.tool_calls],
        )
        return decode_reply(reply)
