"""Saved document endpoints - save, open, delete and start fresh."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from docwriter.app.api.deps import get_document_session
from docwriter.app.db.repositories import DocumentNotFound
from docwriter.app.models.document import DocumentSummary
from docwriter.app.models.session import SessionSnapshot
from docwriter.app.session.manager import DocumentSession, InvalidSessionState, PersistenceFailure

router = APIRouter(prefix="/documents", tags=["documents"])


class SaveDocumentRequest(BaseModel):
    """Request body for POST /documents."""

    title: str = Field(..., description="Document title (blank titles are rejected)")


def _persistence_error(e: Exception) -> HTTPException:
    if isinstance(e, InvalidSessionState):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if isinstance(e, DocumentNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.get("", response_model=list[DocumentSummary])
async def list_documents(
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> list[DocumentSummary]:
    """Saved documents, newest first."""
    return [document.summary() for document in session.saved_documents]


@router.post("", response_model=DocumentSummary, status_code=status.HTTP_201_CREATED)
async def save_document(
    request: SaveDocumentRequest,
    session: Annotated[DocumentSession, Depends(get_document_session)],
    response: Response,
) -> DocumentSummary:
    """Save the current sections (insert, or update the open document).

    Returns:
        201 with the saved document summary; 200 when the open document was updated
    """
    was_open = session.open_document_id is not None

    try:
        saved = await session.save(request.title)
    except (InvalidSessionState, PersistenceFailure) as e:
        raise _persistence_error(e) from e

    if saved is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Document title must not be blank",
        )

    if was_open:
        response.status_code = status.HTTP_200_OK
    return saved.summary()


@router.post("/new", response_model=SessionSnapshot)
async def new_document(
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Start an unsaved document with one default section."""
    session.new_document()
    return session.snapshot()


@router.post("/{document_id}/open", response_model=SessionSnapshot)
async def open_document(
    document_id: str,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Load a saved document into the session."""
    try:
        session.open(document_id)
    except DocumentNotFound as e:
        raise _persistence_error(e) from e
    return session.snapshot()


@router.delete("/{document_id}", response_model=SessionSnapshot)
async def delete_document(
    document_id: str,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Delete a saved document."""
    try:
        await session.delete(document_id)
    except (InvalidSessionState, DocumentNotFound, PersistenceFailure) as e:
        raise _persistence_error(e) from e
    return session.snapshot()
