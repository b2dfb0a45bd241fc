"""Health check endpoints.

/health answers as long as the process is up; /healthz reports the session's
persistence mode and fails once the session is degraded.
"""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Response

from docwriter.app.api.deps import get_document_session
from docwriter.app.models.session import SessionMode
from docwriter.app.session.manager import DocumentSession

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> dict[str, Any] | Response:
    """Session health.

    Returns:
        200 with the persistence mode while remote or local
        503 with the recorded cause once degraded
    """
    response_body = {
        "status": "degraded" if session.mode is SessionMode.degraded else "ok",
        "mode": session.mode.value,
        "error": session.error,
        "notice": session.notice,
    }

    if session.mode is SessionMode.degraded:
        return Response(
            content=json.dumps(response_body),
            status_code=503,
            media_type="application/json",
        )

    return response_body
