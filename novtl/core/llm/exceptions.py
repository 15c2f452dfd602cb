"""
LLM-specific exceptions.

This module defines all custom exceptions used in the LLM provider system.
None of them is retried automatically: recovery is always a re-submission
by the user.
"""

from typing import Optional


class LLMError(Exception):
    """Base exception for all provider failures.

    Attributes:
        provider: Provider id the failure came from, if known
    """
    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class ConfigurationError(LLMError):
    """
    Raised when the provider cannot be called with the current settings.

    Typically a missing API key. Always raised before any network attempt,
    and its message is meant to be shown to the user verbatim.
    """
    pass


class TransportError(LLMError):
    """Raised on a non-2xx response or a failed network/SDK call.

    Attributes:
        status_code: HTTP status of the failed response, if any
    """
    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, provider)
        self.status_code = status_code


class StreamParseError(LLMError):
    """
    Raised when a single streaming line cannot be parsed.

    Stream readers catch it per line and keep going; it never reaches the user.
    """
    pass


class ActionDecodeError(TransportError):
    """Raised when tool-call arguments returned by the model are not valid JSON."""
    pass
