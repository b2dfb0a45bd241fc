"""Continuous view and printable export endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from docwriter.app.api.deps import get_document_session
from docwriter.app.documents.continuous import StructuralMismatch
from docwriter.app.models.session import SessionSnapshot
from docwriter.app.session.manager import DocumentSession

router = APIRouter(tags=["continuous"])


class ContinuousMarkup(BaseModel):
    """Merged HTML of all sections."""

    html: str


@router.get("/continuous", response_model=ContinuousMarkup)
async def get_continuous(
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> ContinuousMarkup:
    """Merge the current sections into one HTML document."""
    return ContinuousMarkup(html=session.continuous_markup())


@router.post("/continuous/sync", response_model=SessionSnapshot)
async def sync_continuous(
    request: ContinuousMarkup,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Split edited merged HTML back into the sections.

    Raises:
        HTTPException: 422 with found/expected counts when headings were added or removed
    """
    try:
        session.sync_continuous(request.html)
    except StructuralMismatch as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(e), "found": e.found, "expected": e.expected},
        ) from e
    return session.snapshot()


@router.get("/print", response_class=HTMLResponse)
async def print_document(
    session: Annotated[DocumentSession, Depends(get_document_session)],
    title: Annotated[str | None, Query()] = None,
) -> HTMLResponse:
    """Standalone printable HTML page for the current document."""
    return HTMLResponse(content=session.printable(title))
