"""
Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and provides common fixtures
and configuration for all test modules.
"""

import sys
from pathlib import Path
from typing import List, Optional

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Import pytest for fixtures
import pytest
import httpx

from novtl.core.library import TranslationLibrary
from novtl.core.llm import LLMProvider, ProviderConfig, ProviderReply, WireFormat
from novtl.models import AppState, GlossaryItem, new_id
from novtl.persistence import InMemoryGateway


class ChunkStream(httpx.AsyncByteStream):
    """Response body delivered in fixed network chunks."""

    def __init__(self, chunks: List[bytes]):
        self.chunks = chunks

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk


class FakeProvider(LLMProvider):
    """Provider returning canned fragments / replies and recording every call."""

    def __init__(self, fragments=None, reply: Optional[ProviderReply] = None,
                 error: Optional[Exception] = None, fail_after: int = 0,
                 detected_language: Optional[str] = None):
        super().__init__(ProviderConfig(provider="Fake", model="fake-model", api_key="test-key"))
        self.fragments = list(fragments or [])
        self.reply = reply or ProviderReply(text="")
        self.error = error
        self.fail_after = fail_after
        self.reported_language = detected_language
        self.stream_calls = []
        self.chat_calls = []
        self.closed = 0

    @property
    def call_count(self) -> int:
        return len(self.stream_calls) + len(self.chat_calls)

    async def stream(self, system_prompt, prompt, temperature=0.3):
        self.stream_calls.append({"system_prompt": system_prompt, "prompt": prompt})
        self.detected_language = self.reported_language
        for index, fragment in enumerate(self.fragments):
            if self.error is not None and index == self.fail_after:
                raise self.error
            yield fragment
        if self.error is not None and self.fail_after >= len(self.fragments):
            raise self.error

    async def chat(self, system_prompt, history, message, tools=None):
        self.chat_calls.append({
            "system_prompt": system_prompt,
            "history": list(history),
            "message": message,
            "tools": tools,
        })
        if self.error is not None:
            raise self.error
        return self.reply

    async def close(self):
        self.closed += 1


def make_item(original: str, translated: str, source_language: str = "Korean") -> GlossaryItem:
    return GlossaryItem(id=new_id(), original=original, translated=translated,
                        source_language=source_language)


@pytest.fixture
def app_state():
    """Default state with an empty glossary."""
    return AppState.default()


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def library(gateway):
    return TranslationLibrary(gateway)


@pytest.fixture
def http_config():
    return ProviderConfig(
        provider="OpenAI (GPT)",
        model="gpt-4o-mini",
        api_key="sk-test",
        endpoint="https://api.openai.com/v1/chat/completions",
        wire_format=WireFormat.HTTP_DELTA,
    )


@pytest.fixture
def gemini_config():
    return ProviderConfig(
        provider="Gemini",
        model="gemini-flash-lite-latest",
        api_key="AI-test",
        wire_format=WireFormat.NATIVE_STREAM,
    )


@pytest.fixture
def fake_provider():
    """Factory building FakeProvider instances."""
    return FakeProvider


@pytest.fixture
def chunked_body():
    """Factory building a streamed response body from byte chunks."""
    return ChunkStream


@pytest.fixture
def glossary_item():
    """Factory building glossary entries."""
    return make_item
