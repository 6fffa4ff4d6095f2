"""Tests for the in-memory note store."""

from __future__ import annotations

import pytest

from clauselens.errors import NoteNotFoundError
from clauselens.notes import InMemoryNoteStore, NoteStoreProtocol


@pytest.fixture
def store() -> InMemoryNoteStore:
    return InMemoryNoteStore()


class TestNoteStore:
    def test_satisfies_protocol(self, store: InMemoryNoteStore) -> None:
        protocol_store: NoteStoreProtocol = store
        assert protocol_store.list_notes("doc-1") == []

    def test_add_and_get(self, store: InMemoryNoteStore) -> None:
        note_id = store.add_note("doc-1", "assignment-40", "Check consent wording")

        note = store.get_note("doc-1", "assignment-40")
        assert note is not None
        assert note.id == note_id
        assert note.text == "Check consent wording"
        assert note.created_at == note.updated_at

    def test_notes_scoped_by_document(self, store: InMemoryNoteStore) -> None:
        store.add_note("doc-1", "assignment-40", "one")

        assert store.get_note("doc-2", "assignment-40") is None
        assert store.list_notes("doc-2") == []

    def test_second_add_replaces_text(self, store: InMemoryNoteStore) -> None:
        first = store.add_note("doc-1", "assignment-40", "draft")
        second = store.add_note("doc-1", "assignment-40", "final")

        assert first == second
        assert [n.text for n in store.list_notes("doc-1")] == ["final"]

    def test_list_oldest_first(self, store: InMemoryNoteStore) -> None:
        store.add_note("doc-1", "assignment-40", "a")
        store.add_note("doc-1", "severability-90", "b")

        notes = store.list_notes("doc-1")
        assert [n.annotation_id for n in notes] == ["assignment-40", "severability-90"]

    def test_update(self, store: InMemoryNoteStore) -> None:
        note_id = store.add_note("doc-1", "assignment-40", "a")

        updated = store.update_note("doc-1", note_id, "b")

        assert updated.text == "b"
        assert updated.updated_at >= updated.created_at
        assert store.get_note("doc-1", "assignment-40") == updated

    def test_delete(self, store: InMemoryNoteStore) -> None:
        note_id = store.add_note("doc-1", "assignment-40", "a")

        store.delete_note("doc-1", note_id)

        assert store.get_note("doc-1", "assignment-40") is None

    @pytest.mark.parametrize("operation", ["update", "delete"])
    def test_unknown_note(self, store: InMemoryNoteStore, operation: str) -> None:
        with pytest.raises(NoteNotFoundError) as exc_info:
            if operation == "update":
                store.update_note("doc-1", 99, "x")
            else:
                store.delete_note("doc-1", 99)

        assert exc_info.value.note_id == 99
