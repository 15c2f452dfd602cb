"""
LLM logging utilities for debugging and transparency

Dumps LLM exchanges (system prompt, user prompt, reply, tool calls) to the
console when DEBUG_MODE is enabled.
"""
import os
from typing import Optional, Sequence

from novtl.config import DEBUG_MODE

YELLOW = '\033[93m'
ORANGE = '\033[38;5;214m'  # Sent to the LLM
GREEN = '\033[92m'         # Received from the LLM
GRAY = '\033[90m'
ENDC = '\033[0m'
BOLD = '\033[1m'

if os.environ.get('NO_COLOR'):
    YELLOW = ORANGE = GREEN = GRAY = ENDC = BOLD = ''


def _block(title: str, body: str, color: str) -> str:
    rule = f"{GRAY}{'-' * 80}{ENDC}"
    return f"{color}{BOLD}{title}{ENDC}\n{rule}\n{color}{body}{ENDC}\n{rule}\n"


def format_llm_interaction(
    system_prompt: Optional[str],
    user_prompt: str,
    raw_response: str,
    interaction_type: str = "translation",
    provider: str = "",
    tool_calls: Sequence[str] = (),
) -> str:
    """Render one exchange as a colored console block."""
    separator = f"{YELLOW}{BOLD}{'=' * 80}{ENDC}"
    provider_str = f" [{provider}]" if provider else ""
    parts = [
        separator,
        f"{YELLOW}{BOLD}DEBUG: LLM Interaction - {interaction_type.upper()}{provider_str}{ENDC}",
        separator,
        "",
    ]
    if system_prompt:
        parts.append(_block("System Prompt:", system_prompt, ORANGE))
    parts.append(_block("User Prompt:", user_prompt, ORANGE))
    parts.append(_block("Raw Response:", raw_response, GREEN))
    if tool_calls:
        parts.append(_block("Tool Calls:", "\n".join(tool_calls), GREEN))
    parts.append(separator)
    return "\n".join(parts)


def log_llm_interaction(
    system_prompt: Optional[str],
    user_prompt: str,
    raw_response: str,
    interaction_type: str = "translation",
    provider: str = "",
    tool_calls: Sequence[str] = (),
):
    """
    Print full LLM interaction details when DEBUG_MODE is enabled.

    Args:
        system_prompt: The system prompt (role/instructions)
        user_prompt: The user prompt (content to process)
        raw_response: Assembled response text
        interaction_type: "translation" or "assistant"
        provider: Provider id
        tool_calls: Tool invocations returned by the model, as display strings
    """
    if not DEBUG_MODE:
        return
    print(format_llm_interaction(system_prompt, user_prompt, raw_response,
                                 interaction_type, provider, tool_calls))
