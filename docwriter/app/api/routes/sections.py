"""Section editing endpoints.

Every mutation returns the full session snapshot so clients can re-render
from a single response.
"""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field, ValidationError

from docwriter.app.api.deps import get_document_session
from docwriter.app.documents import sections as ops
from docwriter.app.documents.importer import UnsupportedImportFile, decode_import_file
from docwriter.app.llm.generate import GenerationError
from docwriter.app.models.section import (
    GenerationParameters,
    NoteCategory,
    Section,
    create_section,
)
from docwriter.app.models.session import SessionSnapshot
from docwriter.app.session.manager import DocumentSession

router = APIRouter(prefix="/sections", tags=["sections"])


class AddSectionRequest(BaseModel):
    """Request body for POST /sections."""

    title: str = ""
    input: str = ""


class UpdateSectionRequest(BaseModel):
    """Request body for PATCH /sections/{section_id}; omitted fields are left alone."""

    title: str | None = None
    input: str | None = None
    output: str | None = None
    generation: GenerationParameters | None = None


class NoteValueRequest(BaseModel):
    """Request body for PUT /sections/{section_id}/notes/{category}/{index}."""

    value: str


class ImportTextRequest(BaseModel):
    """JSON body for POST /sections/import."""

    text: str = Field(..., min_length=1)


class GenerateResponse(BaseModel):
    """Response for POST /sections/{section_id}/generate."""

    success: bool
    reason: str | None = None
    error: str | None = None
    section: Section | None = None


def _apply(
    session: DocumentSession, change: Callable[[ops.Sections], ops.Sections]
) -> SessionSnapshot:
    try:
        session.mutate_sections(change)
    except ops.SectionNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except IndexError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return session.snapshot()


@router.post("", response_model=SessionSnapshot, status_code=status.HTTP_201_CREATED)
async def add_section(
    request: AddSectionRequest,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Append a section."""
    section = create_section(input=request.input, title=request.title)
    return _apply(session, lambda sections: ops.add_section(sections, section))


@router.post("/import", response_model=SessionSnapshot)
async def import_section_text(
    request: Request,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Import text into section input.

    Accepts a JSON body {"text": ...} or a multipart upload in the "file"
    field (.txt, .md or .rtf).
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if upload is None or isinstance(upload, str):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Expected a file in the 'file' field",
            )
        try:
            text = decode_import_file(upload.filename or "", await upload.read())
        except UnsupportedImportFile as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
            ) from e
    else:
        try:
            text = ImportTextRequest.model_validate(await request.json()).text
        except (ValueError, ValidationError) as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Invalid import body: {e}",
            ) from e

    if not text.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Imported text is empty"
        )

    session.import_text(text)
    return session.snapshot()


@router.patch("/{section_id}", response_model=SessionSnapshot)
async def update_section(
    section_id: str,
    request: UpdateSectionRequest,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Update title, input, output and/or generation parameters of a section."""
    fields = request.model_dump(exclude_none=True, exclude={"generation"})

    def change(sections: ops.Sections) -> ops.Sections:
        ops.find_section(sections, section_id)
        if fields:
            sections = ops.set_fields(sections, section_id, **fields)
        if request.generation is not None:
            sections = ops.set_generation(sections, section_id, request.generation)
        return sections

    return _apply(session, change)


@router.delete("/{section_id}", response_model=SessionSnapshot)
async def delete_section(
    section_id: str,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Delete a section; the last remaining section is kept."""
    return _apply(session, lambda sections: ops.delete_section(sections, section_id))


@router.post("/{section_id}/toggle", response_model=SessionSnapshot)
async def toggle_section(
    section_id: str,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Expand or collapse a section."""
    return _apply(session, lambda sections: ops.toggle_expanded(sections, section_id))


@router.post("/{section_id}/notes/{category}", response_model=SessionSnapshot)
async def add_note(
    section_id: str,
    category: NoteCategory,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Append a blank note to a category."""
    return _apply(session, lambda sections: ops.add_note(sections, section_id, category))


@router.post("/{section_id}/notes/{category}/toggle", response_model=SessionSnapshot)
async def toggle_notes(
    section_id: str,
    category: NoteCategory,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Expand or collapse a note category."""
    return _apply(session, lambda sections: ops.toggle_notes(sections, section_id, category))


@router.put("/{section_id}/notes/{category}/{index}", response_model=SessionSnapshot)
async def update_note(
    section_id: str,
    category: NoteCategory,
    index: int,
    request: NoteValueRequest,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Replace one note."""
    return _apply(
        session,
        lambda sections: ops.update_note(sections, section_id, category, index, request.value),
    )


@router.delete("/{section_id}/notes/{category}/{index}", response_model=SessionSnapshot)
async def remove_note(
    section_id: str,
    category: NoteCategory,
    index: int,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> SessionSnapshot:
    """Remove one note; the last note of a category is kept."""
    return _apply(
        session, lambda sections: ops.remove_note(sections, section_id, category, index)
    )


@router.post("/{section_id}/generate", response_model=GenerateResponse)
async def generate_section(
    section_id: str,
    session: Annotated[DocumentSession, Depends(get_document_session)],
) -> GenerateResponse:
    """Draft a section with the language model.

    Generation failures are reported in the body (and recorded on the
    section), not as HTTP errors.
    """
    try:
        result = await session.generate(section_id)
    except ops.SectionNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    try:
        section: Section | None = ops.find_section(session.sections, section_id)
    except ops.SectionNotFound:
        section = None

    if isinstance(result, GenerationError):
        return GenerateResponse(
            success=False, reason=result.reason, error=result.message, section=section
        )
    return GenerateResponse(success=True, section=section)
