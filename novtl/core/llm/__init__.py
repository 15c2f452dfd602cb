"""
LLM provider layer.

Resolves provider settings and normalizes every provider's wire format into
an ordered stream of text fragments (translations) or a ProviderReply
(assistant turns).
"""

from .base import LLMProvider, ProviderConfig, ProviderReply, ToolCall, ToolSpec, WireFormat
from .exceptions import (
    ActionDecodeError,
    ConfigurationError,
    LLMError,
    StreamParseError,
    TransportError,
)
from .factory import create_llm_provider, resolve_provider_config

__all__ = [
    'LLMProvider',
    'ProviderConfig',
    'ProviderReply',
    'ToolCall',
    'ToolSpec',
    'WireFormat',
    'ActionDecodeError',
    'ConfigurationError',
    'LLMError',
    'StreamParseError',
    'TransportError',
    'create_llm_provider',
    'resolve_provider_config',
]
