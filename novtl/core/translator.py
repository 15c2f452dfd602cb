"""
Streaming translation of a text with the project's glossary enforced.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from novtl.config import AUTO_DETECT_LANGUAGE, LANGUAGES, TRANSLATION_TEMPERATURE
from novtl.core.glossary import filter_relevant_glossary
from novtl.core.llm import LLMError, LLMProvider
from novtl.models import TranslationSettings
from novtl.prompts import build_translation_instruction
from novtl.utils.llm_logger import log_llm_interaction

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[str], None]
ProviderFactory = Callable[[], LLMProvider]


@dataclass
class TranslationResult:
    """Outcome of one translation call"""
    text: str
    detected_language: Optional[str] = None  # Only reported when the source is auto-detected
    fragment_count: int = 0


def is_auto_detect(language: Optional[str]) -> bool:
    return not language or language == AUTO_DETECT_LANGUAGE


def match_language(detected: Optional[str], languages: Sequence[str] = LANGUAGES) -> Optional[str]:
    """
    Match a provider-reported language against the supported list.

    Args:
        detected: Language name reported by the provider
        languages: Supported language names

    Returns:
        The supported spelling (never the auto-detect sentinel), or None
    """
    if not detected:
        return None
    wanted = detected.strip().lower()
    for language in languages:
        if language != AUTO_DETECT_LANGUAGE and language.lower() == wanted:
            return language
    return None


async def translate_text_stream(
    text: str,
    settings: TranslationSettings,
    on_chunk: ChunkCallback,
    provider_factory: ProviderFactory,
) -> TranslationResult:
    """
    Translate a text, forwarding each streamed fragment to a sink.

    Fragments reach `on_chunk` in the order the provider emits them. The
    returned text is the exact concatenation of those fragments. On failure
    the fragments already delivered stay delivered.

    Args:
        text: Source text; blank text is a no-op
        settings: Effective project settings
        on_chunk: Sink receiving each fragment
        provider_factory: Builds the provider for this call

    Returns:
        TranslationResult with the full text

    Raises:
        ConfigurationError: If the provider has no API key
        TransportError: If the provider call fails
    """
    if not text or not text.strip():
        return TranslationResult(text="")

    relevant_glossary = filter_relevant_glossary(settings.glossary, text)
    system_prompt = build_translation_instruction(
        settings.target_language,
        settings.translation_instruction,
        relevant_glossary,
    )

    provider = provider_factory()
    fragments: List[str] = []
    logger.info(
        f"Translating {len(text)} chars with {provider.name}/{provider.model} "
        f"({len(relevant_glossary)} glossary terms)"
    )
    try:
        async for fragment in provider.stream(system_prompt, text, temperature=TRANSLATION_TEMPERATURE):
            fragments.append(fragment)
            on_chunk(fragment)
    except LLMError as e:
        logger.error(f"Translation failed after {len(fragments)} fragments: {e}")
        raise
    finally:
        await provider.close()

    full_text = "".join(fragments)
    log_llm_interaction(system_prompt, text, full_text, "translation", provider.name)

    detected_language = None
    if is_auto_detect(settings.source_language):
        detected_language = provider.detected_language

    return TranslationResult(
        text=full_text,
        detected_language=detected_language,
        fragment_count=len(fragments),
    )


async def translate_text(
    text: str,
    settings: TranslationSettings,
    provider_factory: ProviderFactory,
) -> TranslationResult:
    """Translate without observing the stream."""
    return await translate_text_stream(text, settings, lambda _chunk: None, provider_factory)
