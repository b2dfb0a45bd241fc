"""Session wiring from settings."""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from docwriter.app.config import Settings
from docwriter.app.db.engine import create_async_engine_from_settings, create_session_factory
from docwriter.app.db.sql_repositories import (
    SqlDocumentStore,
    SqlIdentityProvider,
    SqlInstallationStore,
)
from docwriter.app.llm.client import get_generation_client
from docwriter.app.session.manager import DocumentSession
from docwriter.app.storage.local import JsonFileStorage

logger = logging.getLogger(__name__)


def build_session(settings: Settings) -> tuple[DocumentSession, AsyncEngine | None]:
    """Build an uninitialized session from settings.

    Without DATABASE_URL the session has no remote collaborators and
    initialize() falls back to local storage.

    Returns:
        (session, engine) - engine is None when no database is configured and
        must be disposed by the caller otherwise
    """
    storage = JsonFileStorage(settings.local_storage_path)
    generator = get_generation_client(settings)

    if not settings.database_url:
        logger.info("DATABASE_URL not set, remote document store disabled")
        session = DocumentSession(
            storage=storage,
            generator=generator,
            app_id=settings.app_id,
            temperature=settings.generation_temperature,
        )
        return session, None

    engine = create_async_engine_from_settings(settings)
    session_factory = create_session_factory(engine)

    session = DocumentSession(
        storage=storage,
        generator=generator,
        store=SqlDocumentStore(session_factory),
        identity=SqlIdentityProvider(session_factory, settings.owner_id),
        installations=SqlInstallationStore(session_factory),
        app_id=settings.app_id,
        temperature=settings.generation_temperature,
    )
    return session, engine
