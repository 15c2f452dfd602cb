from typing import List, Optional, Sequence

from novtl.config import (
    ASSISTANT_NAME,
    DEFAULT_TARGET_LANGUAGE,
    EDITOR_CONTEXT_PREVIEW_CHARS,
    FALLBACK_TRANSLATION_INSTRUCTION,
)
from novtl.models import EditorContext, GlossaryItem, Project


# ============================================================================
# TRANSLATION PROMPT SECTIONS
# ============================================================================

def _role_section(target_language: str) -> str:
    return f"""ROLE: Expert Novel Translator to {target_language}.

TASK: Translate the input text while strictly adhering to the glossary.

[PROCESS - FOR LONG TEXTS]
1. Read the text sentence by sentence.
2. BEFORE translating a sentence, scan it for "MANDATORY GLOSSARY" terms.
3. Replace terms immediately.
4. Ensure the style flows naturally."""


def format_glossary_pair(item: GlossaryItem) -> str:
    return f'"{item.original}" → "{item.translated}"'


def _glossary_section(relevant_glossary: Sequence[GlossaryItem]) -> str:
    pairs = "\n".join(f"- {format_glossary_pair(item)}" for item in relevant_glossary)
    return f"""[MANDATORY GLOSSARY]
CRITICAL: The following terms appear in the text and MUST be translated EXACTLY as defined.
DO NOT IGNORE THIS LIST. CHECK EVERY SENTENCE AGAINST THIS LIST.

{pairs}

INSTRUCTION: If you see the source word, you MUST use the target word."""


FORMATTING_SECTION = """[FORMATTING]
1. No Markdown Headers (#).
2. Use standard paragraphs."""


def build_translation_instruction(
    target_language: Optional[str],
    instruction: Optional[str],
    relevant_glossary: Sequence[GlossaryItem],
) -> str:
    """
    Build the system instruction for a translation call.

    Sections, in order: role framing, mandatory glossary (omitted entirely
    when no glossary term occurs in the text), style instruction, formatting
    rules. The output depends only on the arguments.

    Args:
        target_language: Language to translate into
        instruction: Free-form style instruction from the project
        relevant_glossary: Glossary entries already filtered against the input

    Returns:
        str: The system instruction
    """
    sections = [_role_section(target_language or DEFAULT_TARGET_LANGUAGE)]
    if relevant_glossary:
        sections.append(_glossary_section(relevant_glossary))
    sections.append(f"[STYLE]\n{instruction or FALLBACK_TRANSLATION_INSTRUCTION}")
    sections.append(FORMATTING_SECTION)
    return "\n\n".join(sections)


# ============================================================================
# ASSISTANT PROMPT
# ============================================================================

def _preview(text: str, limit: int = EDITOR_CONTEXT_PREVIEW_CHARS) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " [...]"


def _editor_section(editor_context: Optional[EditorContext]) -> str:
    if editor_context is None:
        return ""
    lines: List[str] = []
    if editor_context.source_text.strip():
        lines.append(f"Source text in the editor:\n{_preview(editor_context.source_text)}")
    if editor_context.translated_text.strip():
        lines.append(f"Current translation in the editor:\n{_preview(editor_context.translated_text)}")
    if not lines:
        return ""
    return "EDITOR (read-only):\n" + "\n\n".join(lines)


def build_assistant_prompt(project: Project, editor_context: Optional[EditorContext] = None) -> str:
    """System prompt for the writing assistant."""
    sections = [
        f"""Name: {ASSISTANT_NAME}.
Role: Writing and translation assistant.

STATUS:
- Project: {project.name} ({project.source_language} → {project.target_language})
- Glossary: {len(project.glossary)} items.

MAIN RULES:
1. SAVING: Use the 'add_to_glossary' tool when the user wants to save terms.
2. REMOVING: Use the 'remove_from_glossary' tool when the user wants to DELETE terms from the glossary.
3. ANTI-LOOP: Do not call a tool again if the user is only asking about status.
4. TEXT: Answer status questions with plain text.

Tone: Relaxed, helpful, to the point."""
    ]
    editor = _editor_section(editor_context)
    if editor:
        sections.append(editor)
    return "\n\n".join(sections)


def build_memory_injection(name: str, text: str) -> str:
    """Hidden turn handing the assistant the content of a saved translation."""
    return (
        f'(System: This is the content of the file "{name}". Keep it in your memory.\n'
        f"=== FILE CONTENT: {name} ===\n"
        f"{text}\n"
        f"=== END OF FILE: {name} ===)"
    )
