"""Owner-scoped query helpers."""

from sqlalchemy import Select, select

from docwriter.app.db.context import RequestContext
from docwriter.app.db.models import AppInstallation, DocumentRecord


def select_documents(ctx: RequestContext) -> Select[tuple[DocumentRecord]]:
    """Select from the documents table with owner scoping enforced.

    Args:
        ctx: Request context with the owner's user_id

    Returns:
        Select filtered by user_id
    """
    return select(DocumentRecord).where(DocumentRecord.user_id == ctx.user_id)


def select_installation(ctx: RequestContext, app_id: str) -> Select[tuple[AppInstallation]]:
    """Select the owner's installation row for one app."""
    return select(AppInstallation).where(
        AppInstallation.app_id == app_id, AppInstallation.user_id == ctx.user_id
    )
