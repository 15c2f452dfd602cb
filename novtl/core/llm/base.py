"""
Base classes and data structures for LLM providers.

This module defines the abstract base class that all LLM providers must implement,
as well as the common data structures exchanged with them: the resolved
ProviderConfig, tool declarations and the ProviderReply of a chat turn.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Dict, List, Optional, Union
import httpx

from novtl.config import REQUEST_TIMEOUT, TRANSLATION_TEMPERATURE
from novtl.models import ChatMessage
from .exceptions import ConfigurationError


class WireFormat(Enum):
    """How a provider delivers its output"""
    NATIVE_STREAM = "native_stream"  # SDK call yielding response objects
    HTTP_DELTA = "http_delta"        # OpenAI-style `data: {...}` SSE lines


@dataclass
class ProviderConfig:
    """Network parameters resolved for one provider"""
    provider: str
    model: str
    api_key: str
    endpoint: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    wire_format: WireFormat = WireFormat.HTTP_DELTA


@dataclass(frozen=True)
class ToolSpec:
    """A function the model may call, described with a JSON schema"""
    name: str
    description: str
    parameters: Dict[str, Any]


@dataclass(frozen=True)
class ToolCall:
    """A function invocation returned by the model.

    `arguments` is left exactly as the provider sent it: a JSON string for
    OpenAI-compatible APIs, an already-decoded mapping for Gemini.
    """
    name: str
    arguments: Union[str, Dict[str, Any], None]


@dataclass
class ProviderReply:
    """Result of a non-streaming chat call"""
    text: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    def __init__(self, config: ProviderConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the LLM provider.

        Args:
            config: Resolved provider configuration
            transport: Optional httpx transport (used to stub the network in tests)
        """
        self.config = config
        self.model = config.model
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        # Language reported by the provider during the last stream, if any
        self.detected_language: Optional[str] = None

    @property
    def name(self) -> str:
        return self.config.provider

    def require_api_key(self) -> None:
        """Fail before any network attempt when no API key is configured."""
        if not self.config.api_key or not self.config.api_key.strip():
            raise ConfigurationError(
                f"API key for {self.config.provider} is not set. Please enter your key first.",
                provider=self.config.provider,
            )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create a persistent HTTP client with connection pooling"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
                timeout=httpx.Timeout(REQUEST_TIMEOUT),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    @abstractmethod
    def stream(self, system_prompt: str, prompt: str,
               temperature: float = TRANSLATION_TEMPERATURE) -> AsyncIterator[str]:
        """
        Stream a completion as text fragments.

        The concatenation of the yielded fragments is the complete response
        text, in emission order.

        Args:
            system_prompt: System instruction (role/rules)
            prompt: User content
            temperature: Sampling temperature

        Yields:
            Text fragments, possibly empty

        Raises:
            ConfigurationError: If the API key is missing
            TransportError: If the provider call fails
        """
        pass

    @abstractmethod
    async def chat(self, system_prompt: str, history: List[ChatMessage], message: str,
                   tools: Optional[List[ToolSpec]] = None) -> ProviderReply:
        """
        Run one non-streaming conversational turn.

        Args:
            system_prompt: System instruction
            history: Prior visible messages, oldest first
            message: Current-turn utterance
            tools: Functions the model may call

        Returns:
            ProviderReply with the text and any tool calls

        Raises:
            ConfigurationError: If the API key is missing
            TransportError: If the provider call fails
        """
        pass
