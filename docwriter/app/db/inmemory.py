"""In-memory implementations of repository interfaces."""

import uuid
from datetime import UTC, datetime

from docwriter.app.db.context import RequestContext
from docwriter.app.db.repositories import DocumentNotFound
from docwriter.app.models.document import SavedDocument, sort_by_recency
from docwriter.app.models.section import Section


class InMemoryDocumentStore:
    """In-memory implementation of DocumentStore."""

    def __init__(self) -> None:
        self._documents: dict[str, tuple[RequestContext, SavedDocument]] = {}

    async def list_documents(self, ctx: RequestContext) -> list[SavedDocument]:
        """List the owner's documents, newest first."""
        owned = [doc for owner, doc in self._documents.values() if owner.user_id == ctx.user_id]
        return sort_by_recency(owned)

    async def insert_document(
        self, ctx: RequestContext, *, title: str, sections: list[Section]
    ) -> SavedDocument:
        """Insert a new document."""
        now = datetime.now(UTC)
        document = SavedDocument(
            id=str(uuid.uuid4()),
            title=title,
            created_at=now,
            updated_at=now,
            sections=list(sections),
        )
        self._documents[document.id] = (ctx, document)
        return document

    async def update_document(
        self,
        ctx: RequestContext,
        document_id: str,
        *,
        title: str,
        sections: list[Section],
    ) -> SavedDocument:
        """Update an existing document."""
        owner, existing = self._get_owned(ctx, document_id)

        document = existing.model_copy(
            update={"title": title, "sections": list(sections), "updated_at": datetime.now(UTC)}
        )
        self._documents[document_id] = (owner, document)
        return document

    async def delete_document(self, ctx: RequestContext, document_id: str) -> None:
        """Delete a document."""
        self._get_owned(ctx, document_id)
        del self._documents[document_id]

    def _get_owned(self, ctx: RequestContext, document_id: str) -> tuple[RequestContext, SavedDocument]:
        data = self._documents.get(document_id)

        # Enforce ownership
        if data is None or data[0].user_id != ctx.user_id:
            raise DocumentNotFound(document_id)

        return data


class StaticIdentityProvider:
    """IdentityProvider returning a fixed owner (or nobody)."""

    def __init__(self, ctx: RequestContext | None) -> None:
        self._ctx = ctx

    async def resolve(self) -> RequestContext | None:
        """Return the configured owner."""
        return self._ctx


class InMemoryInstallationStore:
    """In-memory implementation of InstallationStore."""

    def __init__(self) -> None:
        self._installed: set[tuple[str, uuid.UUID]] = set()

    async def is_installed(self, ctx: RequestContext, app_id: str) -> bool:
        """Check the first-run flag."""
        return (app_id, ctx.user_id) in self._installed

    async def mark_installed(self, ctx: RequestContext, app_id: str) -> None:
        """Set the first-run flag."""
        self._installed.add((app_id, ctx.user_id))
