"""Session state models."""

from enum import Enum

from pydantic import BaseModel

from docwriter.app.models.document import DocumentSummary
from docwriter.app.models.section import Section


class SessionMode(str, Enum):
    """Persistence mode of the editing session."""

    initializing = "initializing"
    remote = "remote"
    local = "local"
    degraded = "degraded"


class SessionSnapshot(BaseModel):
    """Read-only view of the session for API responses."""

    mode: SessionMode
    error: str | None = None
    notice: str | None = None
    open_document_id: str | None = None
    sections: list[Section]
    documents: list[DocumentSummary]
