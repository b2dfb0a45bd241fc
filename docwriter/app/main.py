"""FastAPI application - document writer."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from docwriter.app.api.routes.continuous import router as continuous_router
from docwriter.app.api.routes.documents import router as documents_router
from docwriter.app.api.routes.health import router as health_router
from docwriter.app.api.routes.metrics import router as metrics_router
from docwriter.app.api.routes.sections import router as sections_router
from docwriter.app.api.routes.session import router as session_router
from docwriter.app.config import get_settings
from docwriter.app.session.factory import build_session

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build and initialize the editing session; dispose the engine on shutdown."""
    settings = get_settings()
    logging.getLogger("docwriter").setLevel(settings.log_level.upper())

    session, engine = build_session(settings)
    mode = await session.initialize()
    logger.info(f"Document session ready in {mode.value} mode")
    app.state.document_session = session

    try:
        yield
    finally:
        if engine is not None:
            await engine.dispose()


app = FastAPI(title="Document Writer API", version="0.1.0", lifespan=lifespan)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(session_router)
app.include_router(sections_router)
app.include_router(documents_router)
app.include_router(continuous_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Document Writer API", "version": "0.1.0"}
