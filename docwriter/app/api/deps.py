"""Request dependencies."""

from fastapi import HTTPException, Request, status

from docwriter.app.session.manager import DocumentSession


def get_document_session(request: Request) -> DocumentSession:
    """Return the session built at startup.

    Raises:
        HTTPException: 503 if the application has not finished starting
    """
    session = getattr(request.app.state, "document_session", None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Document session is not initialized",
        )
    return session
