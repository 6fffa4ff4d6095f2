"""Exception hierarchy for clauselens.

Per-annotation problems are never raised; they are reported through the
diagnostic sink. These exceptions cover failures that stop a whole
operation: an unparsable document, an unusable analysis payload, or a
missing note.
"""

from __future__ import annotations


class ClauseLensError(Exception):
    """Base class for all clauselens errors."""


class MalformedDocumentError(ClauseLensError):
    """Structured document markup could not be parsed into a tree."""


class InvalidAnalysisError(ClauseLensError):
    """Document-analysis payload failed validation."""


class AnalysisNotReadyError(ClauseLensError):
    """Document analysis is still processing."""

    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        super().__init__(f"Document {document_id} is still processing")


class AnalysisFailedError(ClauseLensError):
    """Document analysis finished with status ``failed``."""

    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        super().__init__(f"Document analysis failed for {document_id}")


class NoteNotFoundError(ClauseLensError):
    """No note with the given id exists for the document."""

    def __init__(self, document_id: str, note_id: int) -> None:
        self.document_id = document_id
        self.note_id = note_id
        super().__init__(f"Note {note_id} not found for document {document_id}")
