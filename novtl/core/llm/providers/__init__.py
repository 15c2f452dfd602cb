"""
LLM Provider Implementations

Individual provider implementations for the two wire families.

Providers:
    - gemini: Google Gemini through the google-genai SDK (native stream)
    - openai: OpenAI-compatible chat completions (HTTP delta stream)
"""

from .gemini import GeminiProvider
from .openai import OpenAICompatibleProvider

__all__ = ['GeminiProvider', 'OpenAICompatibleProvider']
