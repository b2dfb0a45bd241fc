"""Session state endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from docwriter.app.api.deps import get_document_session
from docwriter.app.models.session import SessionSnapshot
from docwriter.app.session.manager import DocumentSession

router = APIRouter(tags=["session"])


@router.get("/session", response_model=SessionSnapshot)
async def get_session_state(
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Current mode, open document and sections."""
    return session.snapshot()
