"""Notes attached to annotations, keyed by annotation identifier.

Note persistence belongs to an external service. This module defines
the interface the engine's callers program against and an in-memory
implementation for tests and local tooling. The key is
``(document_id, annotation_identifier(annotation))``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from itertools import count
from typing import Protocol

from clauselens.errors import NoteNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Note:
    """A reviewer note on one annotation.

    Attributes:
        id: Store-assigned identifier.
        annotation_id: Identifier of the annotation the note belongs to.
        text: Note body.
        created_at: Creation time (UTC).
        updated_at: Last update time (UTC).
    """

    id: int
    annotation_id: str
    text: str
    created_at: datetime
    updated_at: datetime


class NoteStoreProtocol(Protocol):
    """Key-value style note API used by the annotation detail view."""

    def add_note(self, document_id: str, annotation_id: str, text: str) -> int:
        """Create a note and return its id."""
        ...

    def get_note(self, document_id: str, annotation_id: str) -> Note | None:
        """Return the note for an annotation, or None."""
        ...

    def list_notes(self, document_id: str) -> list[Note]:
        """Return every note for a document, oldest first."""
        ...

    def update_note(self, document_id: str, note_id: int, text: str) -> Note:
        """Replace a note's text.

        Raises:
            NoteNotFoundError: If *note_id* does not exist.
        """
        ...

    def delete_note(self, document_id: str, note_id: int) -> None:
        """Remove a note.

        Raises:
            NoteNotFoundError: If *note_id* does not exist.
        """
        ...


class InMemoryNoteStore:
    """In-memory implementation of NoteStoreProtocol.

    One note per ``(document_id, annotation_id)``: adding a second note
    for the same annotation replaces the text of the first.
    """

    def __init__(self) -> None:
        self._notes: dict[str, dict[int, Note]] = {}
        self._ids = count(1)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def _find(self, document_id: str, note_id: int) -> Note:
        note = self._notes.get(document_id, {}).get(note_id)
        if note is None:
            raise NoteNotFoundError(document_id, note_id)
        return note

    def add_note(self, document_id: str, annotation_id: str, text: str) -> int:
        existing = self.get_note(document_id, annotation_id)
        if existing is not None:
            return self.update_note(document_id, existing.id, text).id

        now = self._now()
        note = Note(next(self._ids), annotation_id, text, now, now)
        self._notes.setdefault(document_id, {})[note.id] = note
        logger.debug("Added note %d for %s/%s", note.id, document_id, annotation_id)
        return note.id

    def get_note(self, document_id: str, annotation_id: str) -> Note | None:
        for note in self._notes.get(document_id, {}).values():
            if note.annotation_id == annotation_id:
                return note
        return None

    def list_notes(self, document_id: str) -> list[Note]:
        return list(self._notes.get(document_id, {}).values())

    def update_note(self, document_id: str, note_id: int, text: str) -> Note:
        note = replace(
            self._find(document_id, note_id), text=text, updated_at=self._now()
        )
        self._notes[document_id][note_id] = note
        return note

    def delete_note(self, document_id: str, note_id: int) -> None:
        self._find(document_id, note_id)
        del self._notes[document_id][note_id]
