"""Editing session - owns the live section list and the persistence mode.

Mode transitions:
    initializing -> remote    remote identity resolved and documents listed
    initializing -> local     no remote store, no identity or remote request failed
    initializing -> degraded  unexpected failure while loading either backend
    remote -> degraded        any remote save/delete failure
    local -> degraded         any local storage read/write failure

There is no way back to remote within a session.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from docwriter.app.db.context import RequestContext
from docwriter.app.db.repositories import (
    DocumentNotFound,
    DocumentStore,
    IdentityProvider,
    InstallationStore,
)
from docwriter.app.documents.continuous import apply_split, merge_sections, split_sections
from docwriter.app.documents.printable import render_printable
from docwriter.app.documents.sections import (
    Sections,
    SectionNotFound,
    default_sections,
    find_section,
    set_fields,
)
from docwriter.app.documents.sections import import_text as import_into_sections
from docwriter.app.llm.client import GenerationClient
from docwriter.app.llm.generate import (
    DEFAULT_TEMPERATURE,
    GenerationResult,
    GenerationSuccess,
    generate_section,
)
from docwriter.app.models.document import (
    SavedDocument,
    dump_documents_for_local,
    dump_sections_for_local,
    load_documents,
    load_sections,
    sort_by_recency,
)
from docwriter.app.models.section import is_blank
from docwriter.app.models.session import SessionMode, SessionSnapshot
from docwriter.app.storage.local import (
    CURRENT_DOCUMENT_ID_KEY,
    ROWS_KEY,
    SAVED_DOCUMENTS_KEY,
    KeyValueStorage,
    LocalStorageError,
)
from docwriter.app.utils.logging import StructuredSessionLogger
from docwriter.app.utils.metrics import persistence_failures_total, session_mode_transitions_total

logger = logging.getLogger(__name__)

_ALLOWED_TRANSITIONS: dict[SessionMode, set[SessionMode]] = {
    SessionMode.initializing: {SessionMode.remote, SessionMode.local, SessionMode.degraded},
    SessionMode.remote: {SessionMode.degraded},
    SessionMode.local: {SessionMode.degraded},
    SessionMode.degraded: set(),
}


class InvalidSessionState(Exception):
    """Raised when an operation is not allowed in the current mode."""


class PersistenceFailure(Exception):
    """Raised when a save or delete could not be persisted.

    The session is degraded by the time this is raised.
    """

    def __init__(self, message: str, backend: str, operation: str) -> None:
        super().__init__(message)
        self.backend = backend
        self.operation = operation


class InitializationFailure(Exception):
    """Remote backend unavailable at startup; the session falls back to local storage."""


class DocumentSession:
    """Live editing state for one running instance.

    Sections are an immutable tuple, replaced wholesale on every change.
    """

    def __init__(
        self,
        *,
        storage: KeyValueStorage,
        generator: GenerationClient,
        store: DocumentStore | None = None,
        identity: IdentityProvider | None = None,
        installations: InstallationStore | None = None,
        app_id: str = "business-writer",
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        self._storage = storage
        self._generator = generator
        self._store = store
        self._identity = identity
        self._installations = installations
        self._app_id = app_id
        self._temperature = temperature
        self._structured_logger = StructuredSessionLogger()

        self._mode = SessionMode.initializing
        self._ctx: RequestContext | None = None
        self._sections: Sections = default_sections()
        self._open_document_id: str | None = None
        self._saved_documents: list[SavedDocument] = []
        self._error: str | None = None
        self._notice: str | None = None

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def sections(self) -> Sections:
        return self._sections

    @property
    def open_document_id(self) -> str | None:
        return self._open_document_id

    @property
    def saved_documents(self) -> list[SavedDocument]:
        """Saved documents, newest first."""
        return list(self._saved_documents)

    @property
    def error(self) -> str | None:
        """Cause of the degraded state, if any."""
        return self._error

    @property
    def notice(self) -> str | None:
        """Why the session fell back to local storage, if it did."""
        return self._notice

    def snapshot(self) -> SessionSnapshot:
        """Read-only view for API responses."""
        return SessionSnapshot(
            mode=self._mode,
            error=self._error,
            notice=self._notice,
            open_document_id=self._open_document_id,
            sections=list(self._sections),
            documents=[document.summary() for document in self._saved_documents],
        )

    # --- Initialization ---

    async def initialize(self) -> SessionMode:
        """Decide the persistence mode and load the starting document.

        Returns:
            The mode the session settled in

        Raises:
            InvalidSessionState: If the session was already initialized
        """
        if self._mode is not SessionMode.initializing:
            raise InvalidSessionState(f"Session already initialized ({self._mode.value})")

        try:
            ctx, documents = await self._connect_remote()
        except InitializationFailure as e:
            logger.warning(f"Remote store unavailable, using local storage: {e}")
            self._notice = str(e)
            self._load_local()
            return self._mode
        except ValueError as e:
            # Rows that fail to decode are not a reason to fall back silently
            self._degrade(f"Could not load saved documents: {e}", "remote", "initialize")
            return self._mode

        self._ctx = ctx
        self._saved_documents = sort_by_recency(documents)
        self._sections = default_sections()
        self._open_document_id = None
        self._enter_remote()

        await self._mark_installed(ctx)
        return self._mode

    async def _connect_remote(self) -> tuple[RequestContext, list[SavedDocument]]:
        if self._store is None or self._identity is None:
            raise InitializationFailure("No remote document store configured")

        try:
            ctx = await self._identity.resolve()
        except Exception as e:
            raise InitializationFailure(f"Remote store unreachable: {e}") from e

        if ctx is None:
            raise InitializationFailure("No remote identity configured")

        try:
            documents = await self._store.list_documents(ctx)
        except ValueError:
            raise
        except Exception as e:
            raise InitializationFailure(f"Could not list remote documents: {e}") from e

        return ctx, documents

    def _load_local(self) -> None:
        try:
            rows = load_sections(self._storage.get_item(ROWS_KEY))
            documents = load_documents(self._storage.get_item(SAVED_DOCUMENTS_KEY))
            open_id = self._storage.get_item(CURRENT_DOCUMENT_ID_KEY)
        except (LocalStorageError, ValueError) as e:
            self._degrade(f"Could not read local storage: {e}", "local", "initialize")
            return

        self._saved_documents = documents

        if open_id:
            document = self._find_saved(open_id)
            if document is not None:
                self._sections = tuple(document.sections) or default_sections()
                self._open_document_id = document.id
            else:
                logger.info(f"Open document {open_id} missing from local index, starting fresh")
                self._sections = default_sections()
                self._open_document_id = None
        elif rows and not (len(rows) == 1 and is_blank(rows[0])):
            self._sections = tuple(rows)
        else:
            self._sections = default_sections()

        self._enter_local()
        self._snapshot_local("initialize")

    async def _mark_installed(self, ctx: RequestContext) -> None:
        if self._installations is None:
            return

        try:
            if not await self._installations.is_installed(ctx, self._app_id):
                await self._installations.mark_installed(ctx, self._app_id)
                logger.info(f"Marked app {self._app_id} installed for owner {ctx.user_id}")
        except Exception as e:
            logger.warning(f"Could not record installation of {self._app_id}: {e}")

    # --- Transitions ---

    def _transition(self, mode: SessionMode) -> None:
        if mode not in _ALLOWED_TRANSITIONS[self._mode]:
            raise InvalidSessionState(
                f"Invalid transition from {self._mode.value} to {mode.value}"
            )

        self._structured_logger.log_transition(self._mode.value, mode.value)
        session_mode_transitions_total.labels(mode=mode.value).inc()
        self._mode = mode

    def _enter_remote(self) -> None:
        self._transition(SessionMode.remote)

    def _enter_local(self) -> None:
        self._transition(SessionMode.local)

    def _degrade(self, cause: str, backend: str, operation: str) -> None:
        self._structured_logger.log_persistence_failure(backend, operation, cause)
        persistence_failures_total.labels(backend=backend, operation=operation).inc()
        self._error = cause
        if self._mode is not SessionMode.degraded:
            self._transition(SessionMode.degraded)

    def _persistence_failure(
        self, error: Exception, backend: str, operation: str
    ) -> PersistenceFailure:
        message = f"Could not {operation} document: {error}"
        self._degrade(message, backend, operation)
        return PersistenceFailure(message, backend, operation)

    # --- Local snapshot ---

    def _write_local(
        self, sections: Sections, documents: list[SavedDocument], open_document_id: str | None
    ) -> None:
        self._storage.set_items(
            {
                ROWS_KEY: dump_sections_for_local(sections),
                SAVED_DOCUMENTS_KEY: dump_documents_for_local(documents),
                CURRENT_DOCUMENT_ID_KEY: open_document_id,
            }
        )

    def _commit_local(
        self,
        operation: str,
        sections: Sections,
        documents: list[SavedDocument],
        open_document_id: str | None,
    ) -> None:
        """Write the snapshot, then apply it; nothing changes if the write fails."""
        try:
            self._write_local(sections, documents, open_document_id)
        except LocalStorageError as e:
            raise self._persistence_failure(e, "local", operation) from e

        self._sections = sections
        self._saved_documents = documents
        self._open_document_id = open_document_id

    def _snapshot_local(self, operation: str) -> None:
        """Best-effort write after an in-memory change (local mode only)."""
        if self._mode is not SessionMode.local:
            return

        try:
            self._write_local(self._sections, self._saved_documents, self._open_document_id)
        except LocalStorageError as e:
            self._degrade(f"Could not write local storage: {e}", "local", operation)

    # --- Section edits ---

    def mutate_sections(self, change: Callable[[Sections], Sections]) -> Sections:
        """Apply a pure transformation to the section list.

        Allowed in every mode. In local mode the snapshot is written afterwards.
        Exceptions raised by change leave the list untouched.
        """
        sections = change(self._sections)
        if not sections:
            raise ValueError("A document must keep at least one section")

        self._sections = sections
        self._snapshot_local("edit")
        return self._sections

    def import_text(self, text: str) -> Sections:
        """Seed the last blank section with text, or append a new one."""
        return self.mutate_sections(lambda sections: import_into_sections(sections, text))

    # --- Documents ---

    async def save(self, title: str) -> SavedDocument | None:
        """Save the current sections under title.

        Returns:
            The saved document, or None when the title is blank

        Raises:
            InvalidSessionState: If the session is neither remote nor local
            PersistenceFailure: If the write failed (session is now degraded)
        """
        title = title.strip()
        if not title:
            return None

        if self._mode is SessionMode.remote:
            return await self._save_remote(title)
        if self._mode is SessionMode.local:
            return self._save_local(title)

        raise InvalidSessionState(f"Cannot save while session is {self._mode.value}")

    async def _save_remote(self, title: str) -> SavedDocument:
        assert self._store is not None and self._ctx is not None
        sections = list(self._sections)

        try:
            if self._open_document_id is None:
                saved = await self._store.insert_document(self._ctx, title=title, sections=sections)
            else:
                saved = await self._store.update_document(
                    self._ctx, self._open_document_id, title=title, sections=sections
                )
            self._open_document_id = saved.id
            documents = await self._store.list_documents(self._ctx)
        except Exception as e:
            raise self._persistence_failure(e, "remote", "save") from e

        self._saved_documents = sort_by_recency(documents)
        logger.info(f"Saved document {saved.id} remotely ({len(sections)} sections)")
        return saved

    def _save_local(self, title: str) -> SavedDocument:
        now = datetime.now(UTC)
        existing = self._find_saved(self._open_document_id) if self._open_document_id else None

        if existing is not None:
            saved = existing.model_copy(
                update={"title": title, "sections": list(self._sections), "updated_at": now}
            )
            documents = [saved if doc.id == saved.id else doc for doc in self._saved_documents]
        else:
            saved = SavedDocument(
                id=str(uuid.uuid4()),
                title=title,
                created_at=now,
                updated_at=now,
                sections=list(self._sections),
            )
            documents = [*self._saved_documents, saved]

        self._commit_local("save", self._sections, sort_by_recency(documents), saved.id)
        logger.info(f"Saved document {saved.id} locally ({len(saved.sections)} sections)")
        return saved

    def open(self, document_id: str) -> Sections:
        """Load a saved document's sections and bind it as the open document.

        Raises:
            DocumentNotFound: If the id is not in the saved documents index
        """
        document = self._find_saved(document_id)
        if document is None:
            raise DocumentNotFound(document_id)

        self._sections = tuple(document.sections) or default_sections()
        self._open_document_id = document.id
        self._snapshot_local("open")
        return self._sections

    async def delete(self, document_id: str) -> None:
        """Delete a saved document; deleting the open one starts a fresh document.

        Raises:
            InvalidSessionState: If the session is neither remote nor local
            DocumentNotFound: If the id is not in the saved documents index
            PersistenceFailure: If the delete failed (session is now degraded)
        """
        if self._mode not in (SessionMode.remote, SessionMode.local):
            raise InvalidSessionState(f"Cannot delete while session is {self._mode.value}")

        if self._find_saved(document_id) is None:
            raise DocumentNotFound(document_id)

        was_open = self._open_document_id == document_id

        if self._mode is SessionMode.remote:
            await self._delete_remote(document_id, was_open)
        else:
            documents = [doc for doc in self._saved_documents if doc.id != document_id]
            if was_open:
                self._commit_local("delete", default_sections(), documents, None)
            else:
                self._commit_local("delete", self._sections, documents, self._open_document_id)

        logger.info(f"Deleted document {document_id}")

    async def _delete_remote(self, document_id: str, was_open: bool) -> None:
        assert self._store is not None and self._ctx is not None

        try:
            await self._store.delete_document(self._ctx, document_id)
        except DocumentNotFound:
            raise
        except Exception as e:
            raise self._persistence_failure(e, "remote", "delete") from e

        if was_open:
            self._sections = default_sections()
            self._open_document_id = None

        try:
            documents = await self._store.list_documents(self._ctx)
        except Exception as e:
            raise self._persistence_failure(e, "remote", "delete") from e

        self._saved_documents = sort_by_recency(documents)

    def new_document(self) -> Sections:
        """Start an unsaved document with one default section."""
        self._sections = default_sections()
        self._open_document_id = None
        self._snapshot_local("new")
        return self._sections

    def _find_saved(self, document_id: str) -> SavedDocument | None:
        for document in self._saved_documents:
            if document.id == document_id:
                return document
        return None

    # --- Generation ---

    async def generate(self, section_id: str) -> GenerationResult:
        """Draft one section and record the outcome on it.

        Concurrent requests for the same section are not cancelled; the last
        one to complete wins.

        Raises:
            SectionNotFound: If the section id is unknown when the request starts
        """
        section = find_section(self._sections, section_id)
        self.mutate_sections(
            lambda sections: set_fields(sections, section_id, is_loading=True, error=None)
        )

        result = await generate_section(section, self._generator, temperature=self._temperature)

        if isinstance(result, GenerationSuccess):
            fields: dict[str, object] = {"output": result.html, "is_loading": False, "error": None}
        else:
            fields = {"is_loading": False, "error": str(result)}

        try:
            self.mutate_sections(lambda sections: set_fields(sections, section_id, **fields))
        except SectionNotFound:
            logger.info(f"Section {section_id} removed before generation completed")

        return result

    # --- Continuous view ---

    def continuous_markup(self) -> str:
        """Merge all sections into one HTML document."""
        return merge_sections(self._sections)

    def sync_continuous(self, markup: str) -> Sections:
        """Split edited merged markup back into the current sections.

        Raises:
            StructuralMismatch: If the heading count changed (sections untouched)
        """
        derived = split_sections(markup, len(self._sections))
        return self.mutate_sections(lambda sections: apply_split(sections, derived))

    def printable(self, title: str | None = None) -> str:
        """Printable HTML page for the current sections.

        Defaults to the open document's title.
        """
        if title is None and self._open_document_id is not None:
            document = self._find_saved(self._open_document_id)
            title = document.title if document else None
        return render_printable(title or "", self._sections)
