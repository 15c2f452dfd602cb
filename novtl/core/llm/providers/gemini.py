"""
Google Gemini provider implementation.

This module provides the GeminiProvider class for interacting with
Google's Gemini API through the google-genai SDK.

Features:
    - Native streaming (one SDK call yields response objects)
    - Function calling for the assistant's glossary tools
"""

from typing import Any, AsyncIterator, Dict, List, Optional
import logging
import httpx

from google import genai
from google.genai import errors, types

from novtl.config import (
    ASSISTANT_MAX_OUTPUT_TOKENS,
    ASSISTANT_TEMPERATURE,
    TRANSLATION_TEMPERATURE,
    TRANSLATION_TOP_P,
)
from novtl.models import ROLE_MODEL, ChatMessage
from ..base import LLMProvider, ProviderConfig, ProviderReply, ToolCall, ToolSpec
from ..exceptions import TransportError

logger = logging.getLogger(__name__)


def to_gemini_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a JSON schema to Gemini's schema dialect.

    Gemini spells types in upper case ("OBJECT", "STRING"...); everything else
    maps one to one.
    """
    converted: Dict[str, Any] = {}
    for key, value in schema.items():
        if key == "type":
            converted["type"] = str(value).upper()
        elif key == "properties":
            converted["properties"] = {name: to_gemini_schema(sub) for name, sub in value.items()}
        elif key == "items":
            converted["items"] = to_gemini_schema(value)
        else:
            converted[key] = value
    return converted


class GeminiProvider(LLMProvider):
    """
    Provider for Google Gemini API.

    Configuration:
        api_key: Google AI API key (required)
        model: Gemini model name

    Example:
        >>> provider = GeminiProvider(ProviderConfig(
        ...     provider="Gemini", model="gemini-flash-lite-latest", api_key="AI..."
        ... ))
        >>> async for fragment in provider.stream("Translate.", "Hello"):
        ...     print(fragment, end="")
    """

    def __init__(self, config: ProviderConfig, client: Optional[Any] = None):
        """
        Initialize the Gemini provider.

        Args:
            config: Resolved provider configuration
            client: Optional pre-built genai client (used to stub the SDK in tests)
        """
        super().__init__(config)
        self._genai_client = client
        self._owns_genai_client = client is None

    def _get_genai_client(self):
        if self._genai_client is None:
            self._genai_client = genai.Client(api_key=self.config.api_key)
        return self._genai_client

    async def close(self):
        """Close the SDK client if this provider built it, then the HTTP client"""
        if self._owns_genai_client and self._genai_client is not None:
            await self._genai_client.aio.aclose()
            self._genai_client = None
        await super().close()

    async def stream(self, system_prompt: str, prompt: str,
                     temperature: float = TRANSLATION_TEMPERATURE) -> AsyncIterator[str]:
        """
        Stream a completion with generate_content_stream.

        A response object without text yields an empty fragment.

        Args:
            system_prompt: System instruction
            prompt: Text to process
            temperature: Sampling temperature

        Yields:
            Text of each streamed response object
        """
        self.require_api_key()
        self.detected_language = None

        client = self._get_genai_client()
        try:
            response_stream = await client.aio.models.generate_content_stream(
                model=self.model,
                contents=[types.Content(role="user", parts=[types.Part(text=prompt)])],
                config=types.GenerateContentConfig(
                    system_instruction=system_prompt,
                    temperature=temperature,
                    top_p=TRANSLATION_TOP_P,
                ),
            )
            async for chunk in response_stream:
                yield getattr(chunk, "text", None) or ""
        except errors.APIError as e:
            logger.error(f"Gemini API Error {e.code}: {e.message}")
            raise TransportError(e.message or f"API Error ({e.code})", provider=self.name, status_code=e.code)
        except httpx.HTTPError as e:
            raise TransportError(f"Gemini request failed: {e}", provider=self.name)

    async def chat(self, system_prompt: str, history: List[ChatMessage], message: str,
                   tools: Optional[List[ToolSpec]] = None) -> ProviderReply:
        """
        Run one assistant turn with function declarations.

        Automatic function calling is disabled: calls are returned to the
        caller instead of being executed by the SDK.
        """
        self.require_api_key()

        contents = []
        for msg in history:
            role = "model" if msg.role == ROLE_MODEL else "user"
            contents.append(types.Content(role=role, parts=[types.Part(text=msg.text)]))
        contents.append(types.Content(role="user", parts=[types.Part(text=message)]))

        config_kwargs: Dict[str, Any] = {
            "system_instruction": system_prompt,
            "temperature": ASSISTANT_TEMPERATURE,
            "max_output_tokens": ASSISTANT_MAX_OUTPUT_TOKENS,
        }
        if tools:
            config_kwargs["tools"] = [types.Tool(function_declarations=[
                types.FunctionDeclaration(
                    name=tool.name,
                    description=tool.description,
                    parameters=to_gemini_schema(tool.parameters),
                )
                for tool in tools
            ])]
            config_kwargs["automatic_function_calling"] = types.AutomaticFunctionCallingConfig(disable=True)

        client = self._get_genai_client()
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(**config_kwargs),
            )
        except errors.APIError as e:
            logger.error(f"Gemini API Error {e.code}: {e.message}")
            raise TransportError(e.message or f"API Error ({e.code})", provider=self.name, status_code=e.code)
        except httpx.HTTPError as e:
            raise TransportError(f"Gemini request failed: {e}", provider=self.name)

        tool_calls = [
            ToolCall(name=call.name or "", arguments=call.args)
            for call in (getattr(response, "function_calls", None) or [])
        ]
        return ProviderReply(text=self._response_text(response), tool_calls=tool_calls)

    @staticmethod
    def _response_text(response: Any) -> str:
        """Join text parts of the first candidate, ignoring function-call parts."""
        candidates = getattr(response, "candidates", None) or []
        if not candidates or candidates[0].content is None:
            return ""
        parts = candidates[0].content.parts or []
        return "".join(part.text for part in parts if getattr(part, "text", None))
