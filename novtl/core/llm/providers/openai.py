"""
OpenAI-compatible provider implementation.

This module provides the OpenAICompatibleProvider class for the providers that
speak the OpenAI chat-completions protocol (OpenAI, DeepSeek, Grok/xAI).
Translations are streamed as `data: {...}` delta lines; assistant turns use a
plain JSON request with tool declarations.
"""

from typing import Any, AsyncIterator, Dict, List, Optional
import json
import logging
import httpx

from novtl.config import ASSISTANT_TEMPERATURE, TRANSLATION_TEMPERATURE
from novtl.models import ROLE_MODEL, ChatMessage
from ..base import LLMProvider, ProviderReply, ToolCall, ToolSpec
from ..exceptions import StreamParseError, TransportError
from ..utils.sse import extract_delta_content, is_done_line, parse_data_line

logger = logging.getLogger(__name__)


def extract_error_message(body: bytes, status_code: int) -> str:
    """
    Pull the provider's structured error message out of a failed response.

    Args:
        body: Raw response body
        status_code: HTTP status

    Returns:
        `error.message` from the JSON body, else a generic status-coded message
    """
    try:
        data = json.loads(body.decode("utf-8", errors="replace"))
    except (json.JSONDecodeError, ValueError):
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if data.get("message"):
            return str(data["message"])
    return f"API Error ({status_code})"


class OpenAICompatibleProvider(LLMProvider):
    """OpenAI chat-completions provider (OpenAI, DeepSeek, Grok)"""

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }
        headers.update(self.config.headers)
        return headers

    async def stream(self, system_prompt: str, prompt: str,
                     temperature: float = TRANSLATION_TEMPERATURE) -> AsyncIterator[str]:
        """
        Stream a completion from an OpenAI-compatible endpoint.

        Malformed lines (keep-alives, comments, broken JSON) are skipped and the
        stream continues. `data: [DONE]` ends the stream.

        Args:
            system_prompt: System instruction
            prompt: Text to process
            temperature: Sampling temperature

        Yields:
            Non-empty `choices[0].delta.content` fragments in arrival order
        """
        self.require_api_key()
        self.detected_language = None

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
            "stream": True,
        }

        client = await self._get_client()
        try:
            async with client.stream("POST", self.config.endpoint, json=payload,
                                     headers=self._headers()) as response:
                if response.status_code >= 400:
                    body = await response.aread()
                    message = extract_error_message(body, response.status_code)
                    logger.error(f"{self.name} HTTP {response.status_code}: {message}")
                    raise TransportError(message, provider=self.name, status_code=response.status_code)

                async for line in response.aiter_lines():
                    if is_done_line(line):
                        return
                    fragment = self._parse_line(line)
                    if fragment:
                        yield fragment

        except httpx.TimeoutException as e:
            raise TransportError(f"{self.name} request timed out: {e}", provider=self.name)
        except httpx.HTTPError as e:
            raise TransportError(f"{self.name} request failed: {e}", provider=self.name)

    def _parse_line(self, line: str) -> str:
        try:
            payload = parse_data_line(line)
        except StreamParseError as e:
            logger.debug(f"Skipping stream line: {e}")
            return ""
        if payload is None:
            return ""
        return extract_delta_content(payload)

    async def chat(self, system_prompt: str, history: List[ChatMessage], message: str,
                   tools: Optional[List[ToolSpec]] = None) -> ProviderReply:
        """
        Run one assistant turn with tool declarations.

        Args:
            system_prompt: System instruction
            history: Prior visible messages
            message: Current-turn utterance
            tools: Functions the model may call

        Returns:
            ProviderReply with text content and raw tool calls
        """
        self.require_api_key()

        messages = [{"role": "system", "content": system_prompt}]
        for msg in history:
            role = "assistant" if msg.role == ROLE_MODEL else "user"
            messages.append({"role": role, "content": msg.text})
        messages.append({"role": "user", "content": message})

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": ASSISTANT_TEMPERATURE,
        }
        if tools:
            payload["tools"] = [self._tool_declaration(tool) for tool in tools]

        client = await self._get_client()
        try:
            response = await client.post(self.config.endpoint, json=payload, headers=self._headers())
        except httpx.TimeoutException as e:
            raise TransportError(f"{self.name} request timed out: {e}", provider=self.name)
        except httpx.HTTPError as e:
            raise TransportError(f"{self.name} request failed: {e}", provider=self.name)

        if response.status_code >= 400:
            message_text = extract_error_message(response.content, response.status_code)
            logger.error(f"{self.name} HTTP {response.status_code}: {message_text}")
            raise TransportError(message_text, provider=self.name, status_code=response.status_code)

        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise TransportError(f"{self.name} returned an invalid response: {e}", provider=self.name)

        choices = data.get("choices") or []
        reply_message = (choices[0].get("message") if choices else None) or {}

        tool_calls = []
        for raw_call in reply_message.get("tool_calls") or []:
            function = raw_call.get("function") or {}
            tool_calls.append(ToolCall(name=function.get("name", ""), arguments=function.get("arguments")))

        return ProviderReply(text=reply_message.get("content") or "", tool_calls=tool_calls)

    @staticmethod
    def _tool_declaration(tool: ToolSpec) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.parameters,
            },
        }
