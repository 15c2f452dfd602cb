"""Unit tests for applying assistant actions to the application state."""

import pytest

from novtl.core.assistant import (
    ActionReconciler,
    AddGlossary,
    ClearChat,
    NoAction,
    ReadSavedTranslation,
    RemoveGlossary,
)
from novtl.core.glossary import DuplicateGlossaryError
from novtl.models import ChatMessage, Project
from novtl.persistence import PersistenceError


HYUNG_PAYLOAD = {"items": [{"original": "Hyung", "translated": "Kakak"}]}


@pytest.fixture
def reconciler(app_state, library):
    return ActionReconciler(app_state, library)


def originals(state):
    return [item.original for item in state.active_project.glossary]


class TestAddGlossary:
    """Test glossary additions from the assistant."""

    @pytest.mark.asyncio
    async def test_new_terms_are_added(self, reconciler, app_state):
        outcome = await reconciler.apply(AddGlossary(raw_items=HYUNG_PAYLOAD, message="On it!"))

        assert originals(app_state) == ["Hyung"]
        item = app_state.active_project.glossary[0]
        assert item.translated == "Kakak"
        assert item.source_language == app_state.active_project.source_language
        assert [i.original for i in outcome.added] == ["Hyung"]
        assert app_state.chat[-1].text.startswith("On it!")
        assert "saved 1 new item(s)" in app_state.chat[-1].text

    @pytest.mark.asyncio
    async def test_same_payload_twice_adds_once(self, reconciler, app_state):
        await reconciler.apply(AddGlossary(raw_items=HYUNG_PAYLOAD, message="On it!"))
        outcome = await reconciler.apply(AddGlossary(raw_items=HYUNG_PAYLOAD, message="On it!"))

        assert originals(app_state) == ["Hyung"]
        assert outcome.added == []
        assert outcome.duplicates == ["Hyung"]

    @pytest.mark.asyncio
    async def test_duplicate_is_rejected_case_insensitively(self, reconciler, app_state, glossary_item):
        app_state.active_project.glossary = [glossary_item("Hyung", "Kakak")]

        outcome = await reconciler.apply(AddGlossary(
            raw_items={"items": [{"original": " hyung ", "translated": "Abang"}]}, message="On it!"
        ))

        assert [(i.original, i.translated) for i in app_state.active_project.glossary] == [("Hyung", "Kakak")]
        assert outcome.duplicates == ["hyung"]
        reply = app_state.chat[-1].text
        assert "already in" in reply
        assert "- hyung" in reply

    @pytest.mark.asyncio
    async def test_repeat_within_one_batch(self, reconciler, app_state):
        payload = [{"term": "Noona", "translation": "Kakak"}, {"original": "NOONA", "translated": "Mbak"}]

        outcome = await reconciler.apply(AddGlossary(raw_items=payload, message="On it!"))

        assert originals(app_state) == ["Noona"]
        assert outcome.duplicates == ["NOONA"]

    @pytest.mark.asyncio
    async def test_partial_batch(self, reconciler, app_state, glossary_item):
        app_state.active_project.glossary = [glossary_item("Hyung", "Kakak")]
        payload = {"items": [
            {"original": "Hyung", "translated": "Kakak"},
            {"original": "Sunbae", "translated": "Senior"},
            {"original": "Missing"},
        ]}

        outcome = await reconciler.apply(AddGlossary(raw_items=payload, message="On it!"))

        assert originals(app_state) == ["Hyung", "Sunbae"]
        assert outcome.invalid == 1
        reply = app_state.chat[-1].text
        assert "saved 1 new item(s)" in reply
        assert "- Hyung" in reply

    @pytest.mark.asyncio
    async def test_no_valid_data(self, reconciler, app_state):
        before = list(app_state.chat)

        outcome = await reconciler.apply(AddGlossary(raw_items={"items": [{"foo": "bar"}]}, message="On it!"))

        assert originals(app_state) == []
        assert outcome.invalid == 1
        assert app_state.chat[:-1] == before
        assert "no valid glossary data" in app_state.chat[-1].text


class TestRemoveGlossary:
    """Test glossary removals from the assistant."""

    @pytest.mark.asyncio
    async def test_matching_entries_are_removed(self, reconciler, app_state, glossary_item):
        app_state.active_project.glossary = [
            glossary_item("Hyung", "Kakak"), glossary_item("Noona", "Kakak"), glossary_item("Sunbae", "Senior"),
        ]

        outcome = await reconciler.apply(RemoveGlossary(originals=("hyung", "SUNBAE "), message="Sure"))

        assert originals(app_state) == ["Noona"]
        assert outcome.removed == 2
        assert "removed 2 item(s)" in app_state.chat[-1].text

    @pytest.mark.asyncio
    async def test_absent_term_removes_nothing(self, reconciler, app_state, glossary_item):
        app_state.active_project.glossary = [glossary_item("Hyung", "Kakak")]

        outcome = await reconciler.apply(RemoveGlossary(originals=("Noona",), message="Sure"))

        assert originals(app_state) == ["Hyung"]
        assert outcome.removed == 0
        assert "removed 0 item(s)" in app_state.chat[-1].text


class TestChatActions:
    """Test chat history updates."""

    @pytest.mark.asyncio
    async def test_clear_chat_leaves_one_message(self, reconciler, app_state):
        app_state.chat = app_state.chat + [ChatMessage(role="user", text=str(i)) for i in range(5)]

        await reconciler.apply(ClearChat(message="Done! My memory has been cleared."))

        assert [(m.role, m.text) for m in app_state.chat] == [("model", "Done! My memory has been cleared.")]

    @pytest.mark.asyncio
    async def test_clear_chat_is_idempotent(self, reconciler, app_state):
        await reconciler.apply(ClearChat(message="Done!"))
        first = list(app_state.chat)
        await reconciler.apply(ClearChat(message="Done!"))

        assert app_state.chat == first

    def test_manual_clear_empties_history(self, reconciler, app_state):
        reconciler.clear_chat()
        assert app_state.chat == []

    @pytest.mark.asyncio
    async def test_no_action_appends_reply(self, reconciler, app_state, glossary_item):
        app_state.active_project.glossary = [glossary_item("Hyung", "Kakak")]
        glossary_before = list(app_state.active_project.glossary)

        await reconciler.apply(NoAction(message="You have 1 term."))

        assert app_state.chat[-1].text == "You have 1 term."
        assert app_state.active_project.glossary == glossary_before

    @pytest.mark.asyncio
    async def test_unknown_action_is_rejected(self, reconciler):
        with pytest.raises(TypeError):
            await reconciler.apply("ADD_GLOSSARY")


class TestReadSavedTranslation:
    """Test loading saved translations into the assistant's memory."""

    @pytest.mark.asyncio
    async def test_hit_produces_memory_injection(self, reconciler, app_state, library):
        saved = await library.save_translation(app_state.active_project.id, "Isi bab satu.")

        outcome = await reconciler.apply(ReadSavedTranslation(name="chapter 1", message="Reading..."))

        assert saved.name == "Chapter 1"
        assert app_state.chat[-1].text == "Reading..."
        assert "=== FILE CONTENT: Chapter 1 ===" in outcome.follow_up
        assert "Isi bab satu." in outcome.follow_up

    @pytest.mark.asyncio
    async def test_miss_replies_not_found(self, reconciler, app_state):
        outcome = await reconciler.apply(ReadSavedTranslation(name="Chapter 9", message="Reading..."))

        assert outcome.follow_up is None
        assert "could not find" in app_state.chat[-1].text
        assert "Chapter 9" in app_state.chat[-1].text

    @pytest.mark.asyncio
    async def test_store_failure_leaves_chat_untouched(self, reconciler, app_state, gateway, monkeypatch):
        async def failing_list(project_id):
            raise PersistenceError("db down", operation="list")

        monkeypatch.setattr(gateway, "list_by_project", failing_list)
        before = list(app_state.chat)

        with pytest.raises(PersistenceError):
            await reconciler.apply(ReadSavedTranslation(name="Chapter 1", message="Reading..."))

        assert app_state.chat == before

    @pytest.mark.asyncio
    async def test_other_projects_are_not_searched(self, reconciler, app_state, library):
        await library.save_translation("another-project", "Someone else's chapter.")

        outcome = await reconciler.apply(ReadSavedTranslation(name="Chapter 1", message="Reading..."))

        assert outcome.follow_up is None


class TestManualEdits:
    """Test glossary edits made directly by the user."""

    def test_add_manual_item(self, reconciler, app_state):
        item = reconciler.add_manual_item("  Hyung ", " Kakak ")

        assert (item.original, item.translated) == ("Hyung", "Kakak")
        assert app_state.active_project.glossary == [item]

    def test_manual_duplicate_is_rejected(self, reconciler, app_state):
        reconciler.add_manual_item("Hyung", "Kakak")

        with pytest.raises(DuplicateGlossaryError) as exc_info:
            reconciler.add_manual_item("HYUNG", "Abang")

        assert exc_info.value.original == "HYUNG"
        assert originals(app_state) == ["Hyung"]

    def test_manual_blank_fields_are_rejected(self, reconciler):
        with pytest.raises(ValueError):
            reconciler.add_manual_item("Hyung", "   ")

    def test_remove_items_by_id(self, reconciler, app_state):
        first = reconciler.add_manual_item("Hyung", "Kakak")
        reconciler.add_manual_item("Noona", "Kakak")

        assert reconciler.remove_items([first.id, "unknown"]) == 1
        assert originals(app_state) == ["Noona"]


class TestProjects:
    """Test project lifecycle."""

    def test_create_project_becomes_active(self, reconciler, app_state):
        project = reconciler.create_project("Second Novel")

        assert app_state.active_project is project
        assert project.glossary == []
        assert len(app_state.projects) == 2

    def test_create_project_requires_name(self, reconciler):
        with pytest.raises(ValueError):
            reconciler.create_project("  ")

    @pytest.mark.asyncio
    async def test_delete_project_clears_saved_translations(self, reconciler, app_state, library):
        first_id = app_state.active_project.id
        second = reconciler.create_project("Second Novel")
        await library.save_translation(second.id, "Chapter text")

        await reconciler.delete_project(second.id)

        assert [p.id for p in app_state.projects] == [first_id]
        assert app_state.active_project_id == first_id
        assert await library.list_project(second.id) == []

    @pytest.mark.asyncio
    async def test_last_project_cannot_be_deleted(self, reconciler, app_state):
        with pytest.raises(ValueError):
            await reconciler.delete_project(app_state.active_project.id)

    @pytest.mark.asyncio
    async def test_unknown_project(self, reconciler):
        with pytest.raises(LookupError):
            await reconciler.delete_project("missing")

    @pytest.mark.asyncio
    async def test_failed_clear_leaves_project(self, reconciler, app_state, library, monkeypatch):
        second = reconciler.create_project("Second Novel")

        async def failing_clear(project_id):
            raise PersistenceError("disk full", operation="clear")

        monkeypatch.setattr(library, "clear_project", failing_clear)

        with pytest.raises(PersistenceError):
            await reconciler.delete_project(second.id)

        assert app_state.get_project(second.id) is second
        assert isinstance(second, Project)
