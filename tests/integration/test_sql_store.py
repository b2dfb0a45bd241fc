"""Integration tests for the SQL document store on sqlite+aiosqlite."""

import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docwriter.app.db.context import RequestContext
from docwriter.app.db.models import DocumentRecord
from docwriter.app.db.repositories import DocumentNotFound
from docwriter.app.db.sql_repositories import (
    SqlDocumentStore,
    SqlIdentityProvider,
    SqlInstallationStore,
)
from docwriter.app.llm.client import DeterministicStubClient
from docwriter.app.models.section import create_section
from docwriter.app.models.session import SessionMode
from docwriter.app.session.manager import DocumentSession
from docwriter.app.storage.local import InMemoryStorage


@pytest.mark.asyncio
async def test_insert_list_update_delete(
    sqlite_session_factory: async_sessionmaker[AsyncSession], owner_ctx: RequestContext
) -> None:
    store = SqlDocumentStore(sqlite_session_factory)
    sections = [create_section(input="one"), create_section(input="two")]

    inserted = await store.insert_document(owner_ctx, title="Doc", sections=sections)

    listed = await store.list_documents(owner_ctx)
    assert [doc.id for doc in listed] == [inserted.id]
    assert [s.input for s in listed[0].sections] == ["one", "two"]
    assert listed[0].created_at.tzinfo is not None

    updated = await store.update_document(
        owner_ctx, inserted.id, title="Renamed", sections=sections[:1]
    )
    assert updated.title == "Renamed"
    assert updated.updated_at >= inserted.updated_at

    listed = await store.list_documents(owner_ctx)
    assert listed[0].title == "Renamed"
    assert len(listed[0].sections) == 1

    await store.delete_document(owner_ctx, inserted.id)
    assert await store.list_documents(owner_ctx) == []


@pytest.mark.asyncio
async def test_list_orders_by_recency(
    sqlite_session_factory: async_sessionmaker[AsyncSession], owner_ctx: RequestContext
) -> None:
    store = SqlDocumentStore(sqlite_session_factory)
    first = await store.insert_document(owner_ctx, title="First", sections=[])
    await store.insert_document(owner_ctx, title="Second", sections=[])
    await store.update_document(owner_ctx, first.id, title="First again", sections=[])

    listed = await store.list_documents(owner_ctx)

    assert [doc.title for doc in listed] == ["First again", "Second"]


@pytest.mark.asyncio
async def test_owner_isolation(
    sqlite_session_factory: async_sessionmaker[AsyncSession], owner_ctx: RequestContext
) -> None:
    store = SqlDocumentStore(sqlite_session_factory)
    other_ctx = RequestContext(user_id=uuid.uuid4())
    theirs = await store.insert_document(other_ctx, title="Theirs", sections=[])

    assert await store.list_documents(owner_ctx) == []

    with pytest.raises(DocumentNotFound):
        await store.update_document(owner_ctx, theirs.id, title="Stolen", sections=[])

    with pytest.raises(DocumentNotFound):
        await store.delete_document(owner_ctx, theirs.id)

    assert [doc.title for doc in await store.list_documents(other_ctx)] == ["Theirs"]


@pytest.mark.asyncio
async def test_malformed_id_is_not_found(
    sqlite_session_factory: async_sessionmaker[AsyncSession], owner_ctx: RequestContext
) -> None:
    store = SqlDocumentStore(sqlite_session_factory)

    with pytest.raises(DocumentNotFound):
        await store.delete_document(owner_ctx, "not-a-uuid")


@pytest.mark.asyncio
async def test_rows_store_versioned_blob_without_presentation_state(
    sqlite_session_factory: async_sessionmaker[AsyncSession], owner_ctx: RequestContext
) -> None:
    store = SqlDocumentStore(sqlite_session_factory)
    section = create_section(input="x").model_copy(update={"expanded": False, "is_loading": True})

    await store.insert_document(owner_ctx, title="Doc", sections=[section])

    async with sqlite_session_factory() as session:
        record = (await session.execute(select(DocumentRecord))).scalars().one()

    assert record.sections["version"] == 1
    stored = record.sections["sections"][0]
    assert stored["input"] == "x"
    assert "expanded" not in stored
    assert "is_loading" not in stored


@pytest.mark.asyncio
async def test_legacy_bare_list_rows_decode(
    sqlite_session_factory: async_sessionmaker[AsyncSession], owner_ctx: RequestContext
) -> None:
    async with sqlite_session_factory() as session:
        session.add(
            DocumentRecord(
                id=uuid.uuid4(),
                user_id=owner_ctx.user_id,
                title="Legacy",
                sections=[{"id": "abc", "title": "Old", "input": "kept"}],
            )
        )
        await session.commit()

    listed = await SqlDocumentStore(sqlite_session_factory).list_documents(owner_ctx)

    assert listed[0].sections[0].input == "kept"


@pytest.mark.asyncio
async def test_identity_provider(
    sqlite_session_factory: async_sessionmaker[AsyncSession], owner_ctx: RequestContext
) -> None:
    assert await SqlIdentityProvider(sqlite_session_factory, None).resolve() is None

    resolved = await SqlIdentityProvider(sqlite_session_factory, owner_ctx.user_id).resolve()

    assert resolved == owner_ctx


@pytest.mark.asyncio
async def test_installation_flag_is_per_app_and_owner(
    sqlite_session_factory: async_sessionmaker[AsyncSession], owner_ctx: RequestContext
) -> None:
    installations = SqlInstallationStore(sqlite_session_factory)

    assert not await installations.is_installed(owner_ctx, "writer")

    await installations.mark_installed(owner_ctx, "writer")
    await installations.mark_installed(owner_ctx, "writer")

    assert await installations.is_installed(owner_ctx, "writer")
    assert not await installations.is_installed(owner_ctx, "other-app")
    assert not await installations.is_installed(RequestContext(user_id=uuid.uuid4()), "writer")


@pytest.mark.asyncio
async def test_session_round_trip_through_sql_store(
    sqlite_session_factory: async_sessionmaker[AsyncSession], owner_ctx: RequestContext
) -> None:
    """A remote session saves, re-lists and reopens a document from the database."""
    session = DocumentSession(
        storage=InMemoryStorage(),
        generator=DeterministicStubClient(),
        store=SqlDocumentStore(sqlite_session_factory),
        identity=SqlIdentityProvider(sqlite_session_factory, owner_ctx.user_id),
        installations=SqlInstallationStore(sqlite_session_factory),
    )
    assert await session.initialize() is SessionMode.remote
    session.import_text("seed text")
    saved = await session.save("Remote")
    assert saved is not None

    session.new_document()
    session.open(saved.id)

    assert session.sections[0].input == "seed text"
    assert [doc.title for doc in session.saved_documents] == ["Remote"]
