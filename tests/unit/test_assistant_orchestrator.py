"""Unit tests for assistant turns and tool-call decoding."""

import json

import pytest

from novtl.core.assistant import (
    ActionType,
    AddGlossary,
    AssistantOrchestrator,
    ClearChat,
    NoAction,
    ReadSavedTranslation,
    RemoveGlossary,
)
from novtl.core.assistant.orchestrator import (
    decode_reply,
    decode_tool_arguments,
    is_reset_command,
    parse_read_command,
    visible_window,
)
from novtl.core.llm import ActionDecodeError, ProviderReply, ToolCall, TransportError
from novtl.models import ChatMessage, EditorContext, Project


@pytest.fixture
def project():
    return Project(id="p1", name="Novel", source_language="Korean", target_language="Indonesian")


class TestLocalCommands:
    """Test commands answered without a network call."""

    @pytest.mark.parametrize("message", ["reset", "RESET", "  clear ", "Bersihkan"])
    def test_reset_keywords(self, message):
        assert is_reset_command(message)

    @pytest.mark.parametrize("message", ["reset my glossary", "clear the chat please", ""])
    def test_reset_needs_exact_keyword(self, message):
        assert not is_reset_command(message)

    def test_read_command(self):
        assert parse_read_command("/read Chapter 3") == "Chapter 3"
        assert parse_read_command("  /READ   chapter 3 ") == "chapter 3"
        assert parse_read_command("/read ") is None
        assert parse_read_command("read Chapter 3") is None

    @pytest.mark.parametrize("message", ["/readme is great", "/reader mode please", "/read"])
    def test_words_starting_with_read_are_not_commands(self, message):
        assert parse_read_command(message) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["reset", "bersihkan", "clear"])
    async def test_reset_makes_no_provider_call(self, fake_provider, project, message):
        provider = fake_provider()
        orchestrator = AssistantOrchestrator(lambda: provider)

        action = await orchestrator.respond(message, [], project)

        assert isinstance(action, ClearChat)
        assert action.type is ActionType.CLEAR_CHAT
        assert provider.call_count == 0

    @pytest.mark.asyncio
    async def test_read_makes_no_provider_call(self, fake_provider, project):
        provider = fake_provider()
        orchestrator = AssistantOrchestrator(lambda: provider)

        action = await orchestrator.respond("/read Chapter 3", [], project)

        assert action == ReadSavedTranslation(name="Chapter 3", message='Reading "Chapter 3"...')
        assert provider.call_count == 0

    @pytest.mark.asyncio
    async def test_readme_message_goes_to_the_model(self, fake_provider, project):
        provider = fake_provider(reply=ProviderReply(text="A README describes a project."))
        orchestrator = AssistantOrchestrator(lambda: provider)

        action = await orchestrator.respond("/readme please explain", [], project)

        assert action == NoAction(message="A README describes a project.")
        assert provider.chat_calls[0]["message"] == "/readme please explain"


class TestHistoryWindow:
    """Test the prior-context window sent with each turn."""

    def test_hidden_messages_are_excluded(self):
        history = [
            ChatMessage(role="user", text="u1"),
            ChatMessage(role="user", text="(System: file)", hidden=True),
            ChatMessage(role="model", text="m1"),
        ]
        assert [m.text for m in visible_window(history, 8)] == ["u1", "m1"]

    def test_window_keeps_last_messages(self):
        history = [ChatMessage(role="user", text=str(i)) for i in range(12)]
        assert [m.text for m in visible_window(history, 8)] == [str(i) for i in range(4, 12)]

    def test_zero_window(self):
        assert visible_window([ChatMessage(role="user", text="a")], 0) == []

    @pytest.mark.asyncio
    async def test_provider_receives_window_and_message(self, fake_provider, project):
        provider = fake_provider(reply=ProviderReply(text="Hi!"))
        history = [ChatMessage(role="user", text=f"m{i}") for i in range(10)]
        history.insert(9, ChatMessage(role="user", text="secret", hidden=True))

        await AssistantOrchestrator(lambda: provider, window_size=8).respond(
            "next", history, project, EditorContext(source_text="Hyung!")
        )

        call = provider.chat_calls[0]
        assert [m.text for m in call["history"]] == [f"m{i}" for i in range(2, 10)]
        assert call["message"] == "next"
        assert "Hyung!" in call["system_prompt"]
        assert [tool.name for tool in call["tools"]] == ["add_to_glossary", "remove_from_glossary"]
        assert provider.closed == 1


class TestDecodeReply:
    """Test mapping of provider replies onto actions."""

    def test_plain_text(self):
        assert decode_reply(ProviderReply(text="You have 3 terms.")) == NoAction(message="You have 3 terms.")

    def test_empty_reply_uses_placeholder(self):
        assert decode_reply(ProviderReply(text="")) == NoAction(message="...")

    def test_add_with_json_string_arguments(self):
        arguments = json.dumps({"items": [{"original": "Hyung", "translated": "Kakak"}]})
        action = decode_reply(ProviderReply(tool_calls=[ToolCall("add_to_glossary", arguments)]))

        assert isinstance(action, AddGlossary)
        assert action.raw_items == {"items": [{"original": "Hyung", "translated": "Kakak"}]}
        assert action.type is ActionType.ADD_GLOSSARY

    def test_add_with_mapping_arguments(self):
        arguments = {"items": [{"term": "Noona", "translation": "Kakak"}]}
        action = decode_reply(ProviderReply(tool_calls=[ToolCall("add_to_glossary", arguments)]))
        assert action.raw_items == arguments

    def test_remove(self):
        arguments = json.dumps({"originals": ["Hyung", "Noona"]})
        action = decode_reply(ProviderReply(tool_calls=[ToolCall("remove_from_glossary", arguments)]))

        assert isinstance(action, RemoveGlossary)
        assert action.originals == ("Hyung", "Noona")
        assert action.type is ActionType.REMOVE_GLOSSARY

    def test_remove_single_string(self):
        action = decode_reply(ProviderReply(tool_calls=[ToolCall("remove_from_glossary", {"originals": "Hyung"})]))
        assert action.originals == ("Hyung",)

    def test_only_first_tool_call_is_honored(self):
        reply = ProviderReply(tool_calls=[
            ToolCall("remove_from_glossary", {"originals": ["Hyung"]}),
            ToolCall("add_to_glossary", {"items": [{"original": "X", "translated": "Y"}]}),
        ])
        action = decode_reply(reply)
        assert isinstance(action, RemoveGlossary)
        assert action.originals == ("Hyung",)

    def test_unknown_tool_falls_back_to_text(self):
        reply = ProviderReply(text="Let me check.", tool_calls=[ToolCall("delete_everything", "{}")])
        assert decode_reply(reply) == NoAction(message="Let me check.")

    def test_invalid_json_arguments(self):
        reply = ProviderReply(tool_calls=[ToolCall("add_to_glossary", '{"items": [')])
        with pytest.raises(ActionDecodeError) as exc_info:
            decode_reply(reply)
        assert isinstance(exc_info.value, TransportError)

    def test_non_object_arguments(self):
        with pytest.raises(ActionDecodeError):
            decode_tool_arguments(ToolCall("add_to_glossary", "[1, 2]"))

    def test_missing_arguments(self):
        assert decode_tool_arguments(ToolCall("add_to_glossary", None)) == {}
        assert decode_tool_arguments(ToolCall("add_to_glossary", "")) == {}


class TestProviderFailure:
    """Test error propagation from the provider."""

    @pytest.mark.asyncio
    async def test_transport_error_propagates_and_closes(self, fake_provider, project):
        provider = fake_provider(error=TransportError("API Error (500)", provider="Fake"))

        with pytest.raises(TransportError):
            await AssistantOrchestrator(lambda: provider).respond("hello", [], project)

        assert provider.closed == 1
