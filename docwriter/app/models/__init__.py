"""Models package - re-exports for convenience."""

from docwriter.app.models.document import (
    DocumentSummary,
    SavedDocument,
    decode_sections,
    encode_sections,
)
from docwriter.app.models.section import (
    CategorizedNotes,
    GenerationParameters,
    NoteCategory,
    NoteExpansion,
    Section,
    Tone,
    create_section,
)
from docwriter.app.models.session import SessionMode, SessionSnapshot

__all__ = [
    # Section
    "Section",
    "GenerationParameters",
    "CategorizedNotes",
    "NoteExpansion",
    "NoteCategory",
    "Tone",
    "create_section",
    # Document
    "SavedDocument",
    "DocumentSummary",
    "encode_sections",
    "decode_sections",
    # Session
    "SessionMode",
    "SessionSnapshot",
]
