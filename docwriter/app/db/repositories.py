"""Repository protocol interfaces for the remote document store."""

from typing import Protocol

from docwriter.app.db.context import RequestContext
from docwriter.app.models.document import SavedDocument
from docwriter.app.models.section import Section


class DocumentNotFound(LookupError):
    """Raised when a document id is unknown or owned by someone else."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document not found: {document_id}")
        self.document_id = document_id


class DocumentStore(Protocol):
    """Remote store for saved documents."""

    async def list_documents(self, ctx: RequestContext) -> list[SavedDocument]:
        """List the owner's documents.

        Args:
            ctx: Request context (enforces ownership)

        Returns:
            Documents ordered by updated_at, newest first
        """
        ...

    async def insert_document(
        self, ctx: RequestContext, *, title: str, sections: list[Section]
    ) -> SavedDocument:
        """Insert a new document owned by ctx.user_id.

        Args:
            ctx: Request context
            title: Document title
            sections: Section list to store

        Returns:
            The stored document with its generated id and timestamps
        """
        ...

    async def update_document(
        self,
        ctx: RequestContext,
        document_id: str,
        *,
        title: str,
        sections: list[Section],
    ) -> SavedDocument:
        """Update title and sections of an existing document.

        Args:
            ctx: Request context (enforces ownership)
            document_id: Document ID
            title: New title
            sections: New section list

        Returns:
            The updated document

        Raises:
            DocumentNotFound: If the document does not exist for this owner
        """
        ...

    async def delete_document(self, ctx: RequestContext, document_id: str) -> None:
        """Delete a document.

        Args:
            ctx: Request context (enforces ownership)
            document_id: Document ID

        Raises:
            DocumentNotFound: If the document does not exist for this owner
        """
        ...


class IdentityProvider(Protocol):
    """Resolves the remote identity the session acts as."""

    async def resolve(self) -> RequestContext | None:
        """Return the authenticated owner, or None when there is none.

        Raises:
            Exception: Any connection error; the session treats it as unavailable
        """
        ...


class InstallationStore(Protocol):
    """Per app, per owner first-run flag."""

    async def is_installed(self, ctx: RequestContext, app_id: str) -> bool:
        """Check whether first-run initialization already happened."""
        ...

    async def mark_installed(self, ctx: RequestContext, app_id: str) -> None:
        """Record that first-run initialization happened (upsert)."""
        ...
