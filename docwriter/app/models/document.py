"""Saved document models and the stored sections codec."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter

from docwriter.app.models.section import PRESENTATION_FIELDS, TRANSIENT_FIELDS, Section

SECTIONS_FORMAT_VERSION = 1

_sections_adapter = TypeAdapter(list[Section])


class SavedDocument(BaseModel):
    """A named, persisted snapshot of a section list."""

    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    sections: list[Section] = Field(default_factory=list)

    def summary(self) -> "DocumentSummary":
        """Metadata-only projection for listings."""
        return DocumentSummary(
            id=self.id,
            title=self.title,
            created_at=self.created_at,
            updated_at=self.updated_at,
            section_count=len(self.sections),
        )


class DocumentSummary(BaseModel):
    """Saved document metadata (no section bodies)."""

    id: str
    title: str
    created_at: datetime
    updated_at: datetime
    section_count: int


class UnsupportedSectionsFormat(ValueError):
    """Raised when a stored sections blob has an unknown version."""


def sort_by_recency(documents: list[SavedDocument]) -> list[SavedDocument]:
    """Sort documents by updated_at, newest first."""
    return sorted(documents, key=lambda doc: doc.updated_at, reverse=True)


def encode_sections(sections: list[Section] | tuple[Section, ...]) -> dict[str, Any]:
    """Encode sections for the remote store.

    Presentation and transient fields are dropped; the list is wrapped in a
    versioned envelope.
    """
    exclude = PRESENTATION_FIELDS | TRANSIENT_FIELDS
    return {
        "version": SECTIONS_FORMAT_VERSION,
        "sections": [section.model_dump(mode="json", exclude=exclude) for section in sections],
    }


def decode_sections(blob: Any) -> list[Section]:
    """Decode a stored sections blob.

    Accepts the versioned envelope or a bare list (rows written before the
    envelope existed).

    Raises:
        UnsupportedSectionsFormat: If the envelope version is unknown
        pydantic.ValidationError: If the sections do not validate
    """
    if isinstance(blob, list):
        return _sections_adapter.validate_python(blob)

    if not isinstance(blob, dict):
        raise UnsupportedSectionsFormat(f"Unexpected sections blob type: {type(blob).__name__}")

    version = blob.get("version")
    if version != SECTIONS_FORMAT_VERSION:
        raise UnsupportedSectionsFormat(f"Unsupported sections format version: {version!r}")

    return _sections_adapter.validate_python(blob.get("sections", []))


def dump_sections_for_local(sections: list[Section] | tuple[Section, ...]) -> list[dict[str, Any]]:
    """Serialize sections for local storage (presentation state kept)."""
    return [section.model_dump(mode="json", exclude=TRANSIENT_FIELDS) for section in sections]


def dump_documents_for_local(documents: list[SavedDocument]) -> list[dict[str, Any]]:
    """Serialize saved documents for local storage (transient section state dropped)."""
    return [
        doc.model_dump(mode="json", exclude={"sections": {"__all__": TRANSIENT_FIELDS}})
        for doc in documents
    ]


_documents_adapter = TypeAdapter(list[SavedDocument])


def load_sections(raw: Any) -> list[Section]:
    """Validate sections read back from local storage."""
    return _sections_adapter.validate_python(raw or [])


def load_documents(raw: Any) -> list[SavedDocument]:
    """Validate saved documents read back from local storage, newest first."""
    return sort_by_recency(_documents_adapter.validate_python(raw or []))
