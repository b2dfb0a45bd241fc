"""Pure transformations over an ordered section list.

Every function takes a tuple of sections and returns a new tuple; sections
that are not touched are returned as the same objects.
"""

from collections.abc import Callable

from docwriter.app.models.section import (
    GenerationParameters,
    NoteCategory,
    Section,
    create_section,
)

Sections = tuple[Section, ...]


class SectionNotFound(LookupError):
    """Raised when a section id is not in the current list."""

    def __init__(self, section_id: str) -> None:
        super().__init__(f"Section not found: {section_id}")
        self.section_id = section_id


def default_sections() -> Sections:
    """A fresh document: one default section."""
    return (create_section(),)


def find_section(sections: Sections, section_id: str) -> Section:
    """Return the section with the given id.

    Raises:
        SectionNotFound: If no section has this id
    """
    for section in sections:
        if section.id == section_id:
            return section
    raise SectionNotFound(section_id)


def update_section(
    sections: Sections, section_id: str, change: Callable[[Section], Section]
) -> Sections:
    """Apply change to one section.

    Raises:
        SectionNotFound: If no section has this id
    """
    find_section(sections, section_id)
    return tuple(change(section) if section.id == section_id else section for section in sections)


def add_section(sections: Sections, section: Section | None = None) -> Sections:
    """Append a section (a default one when none is given)."""
    return (*sections, section or create_section())


def delete_section(sections: Sections, section_id: str) -> Sections:
    """Remove a section; deleting the last remaining section is a no-op."""
    if len(sections) <= 1:
        return sections
    find_section(sections, section_id)
    return tuple(section for section in sections if section.id != section_id)


def set_fields(sections: Sections, section_id: str, **fields: object) -> Sections:
    """Replace plain fields (title, input, output) of one section; titles are stripped."""
    if isinstance(fields.get("title"), str):
        fields["title"] = str(fields["title"]).strip()
    return update_section(sections, section_id, lambda s: s.model_copy(update=fields))


def set_generation(
    sections: Sections, section_id: str, parameters: GenerationParameters
) -> Sections:
    """Replace the generation parameters of one section."""
    return update_section(
        sections, section_id, lambda s: s.model_copy(update={"generation": parameters})
    )


def toggle_expanded(sections: Sections, section_id: str) -> Sections:
    """Flip the expand/collapse state of one section."""
    return update_section(
        sections, section_id, lambda s: s.model_copy(update={"expanded": not s.expanded})
    )


def toggle_notes(sections: Sections, section_id: str, category: NoteCategory) -> Sections:
    """Flip the expand/collapse state of one note category."""
    return update_section(
        sections,
        section_id,
        lambda s: s.model_copy(update={"expanded_notes": s.expanded_notes.toggled(category)}),
    )


def _change_notes(
    sections: Sections,
    section_id: str,
    category: NoteCategory,
    change: Callable[[list[str]], list[str]],
) -> Sections:
    def apply(section: Section) -> Section:
        notes = change(section.notes.get(category))
        return section.model_copy(update={"notes": section.notes.replace(category, notes)})

    return update_section(sections, section_id, apply)


def add_note(sections: Sections, section_id: str, category: NoteCategory) -> Sections:
    """Append a blank note row to a category."""
    return _change_notes(sections, section_id, category, lambda notes: [*notes, ""])


def update_note(
    sections: Sections, section_id: str, category: NoteCategory, index: int, value: str
) -> Sections:
    """Replace one note.

    Raises:
        IndexError: If index is out of range
    """

    def change(notes: list[str]) -> list[str]:
        if not 0 <= index < len(notes):
            raise IndexError(f"Note index out of range: {index}")
        return [value if i == index else note for i, note in enumerate(notes)]

    return _change_notes(sections, section_id, category, change)


def remove_note(
    sections: Sections, section_id: str, category: NoteCategory, index: int
) -> Sections:
    """Remove one note; the last note of a category is kept.

    Raises:
        IndexError: If index is out of range
    """

    def change(notes: list[str]) -> list[str]:
        if not 0 <= index < len(notes):
            raise IndexError(f"Note index out of range: {index}")
        if len(notes) == 1:
            return notes
        return [note for i, note in enumerate(notes) if i != index]

    return _change_notes(sections, section_id, category, change)


def import_text(sections: Sections, text: str) -> Sections:
    """Import free text as section input.

    The text fills the last section when its input is blank; otherwise a new
    section seeded with the text is appended.
    """
    last = sections[-1] if sections else None
    if last is not None and not last.input.strip():
        return (*sections[:-1], last.model_copy(update={"input": text}))
    return (*sections, create_section(input=text))
