"""SQL implementations of repository interfaces."""

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docwriter.app.db.context import RequestContext
from docwriter.app.db.models import AppInstallation, DocumentRecord
from docwriter.app.db.queries import select_documents, select_installation
from docwriter.app.db.repositories import DocumentNotFound
from docwriter.app.models.document import SavedDocument, decode_sections, encode_sections
from docwriter.app.models.section import Section

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # sqlite hands back naive timestamps
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _to_saved_document(record: DocumentRecord) -> SavedDocument:
    return SavedDocument(
        id=str(record.id),
        title=record.title,
        created_at=_as_utc(record.created_at),
        updated_at=_as_utc(record.updated_at),
        sections=decode_sections(record.sections),
    )


def _parse_id(document_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(document_id)
    except ValueError as e:
        raise DocumentNotFound(document_id) from e


class SqlDocumentStore:
    """SQL implementation of DocumentStore."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_documents(self, ctx: RequestContext) -> list[SavedDocument]:
        """List the owner's documents, newest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select_documents(ctx).order_by(DocumentRecord.updated_at.desc())
            )
            records = list(result.scalars().all())

        return [_to_saved_document(record) for record in records]

    async def insert_document(
        self, ctx: RequestContext, *, title: str, sections: list[Section]
    ) -> SavedDocument:
        """Insert a new document."""
        now = datetime.now(UTC)
        record = DocumentRecord(
            id=uuid.uuid4(),
            user_id=ctx.user_id,
            title=title,
            sections=encode_sections(sections),
            created_at=now,
            updated_at=now,
        )

        async with self._session_factory() as session:
            session.add(record)
            await session.commit()

        logger.info(f"Document inserted: {record.id}")
        return _to_saved_document(record)

    async def update_document(
        self,
        ctx: RequestContext,
        document_id: str,
        *,
        title: str,
        sections: list[Section],
    ) -> SavedDocument:
        """Update an existing document."""
        async with self._session_factory() as session:
            result = await session.execute(
                select_documents(ctx).where(DocumentRecord.id == _parse_id(document_id))
            )
            record = result.scalars().first()

            if record is None:
                raise DocumentNotFound(document_id)

            record.title = title
            record.sections = encode_sections(sections)
            record.updated_at = datetime.now(UTC)
            await session.commit()

        logger.info(f"Document updated: {document_id}")
        return _to_saved_document(record)

    async def delete_document(self, ctx: RequestContext, document_id: str) -> None:
        """Delete a document."""
        async with self._session_factory() as session:
            result = await session.execute(
                select_documents(ctx).where(DocumentRecord.id == _parse_id(document_id))
            )
            record = result.scalars().first()

            if record is None:
                raise DocumentNotFound(document_id)

            await session.delete(record)
            await session.commit()

        logger.info(f"Document deleted: {document_id}")


class SqlIdentityProvider:
    """IdentityProvider for a configured owner, verified with a connectivity probe."""

    def __init__(
        self, session_factory: async_sessionmaker[AsyncSession], owner_id: uuid.UUID | None
    ) -> None:
        self._session_factory = session_factory
        self._owner_id = owner_id

    async def resolve(self) -> RequestContext | None:
        """Return the owner if one is configured and the database answers."""
        if self._owner_id is None:
            return None

        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))

        return RequestContext(user_id=self._owner_id)


class SqlInstallationStore:
    """SQL implementation of InstallationStore."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def is_installed(self, ctx: RequestContext, app_id: str) -> bool:
        """Check the first-run flag."""
        async with self._session_factory() as session:
            result = await session.execute(select_installation(ctx, app_id))
            record = result.scalars().first()

        return bool(record and record.initialized)

    async def mark_installed(self, ctx: RequestContext, app_id: str) -> None:
        """Set the first-run flag."""
        async with self._session_factory() as session:
            await session.merge(
                AppInstallation(
                    app_id=app_id,
                    user_id=ctx.user_id,
                    initialized=True,
                    updated_at=datetime.now(UTC),
                )
            )
            await session.commit()
