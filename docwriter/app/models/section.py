"""Section models - the unit of document content."""

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNTITLED_SECTION = "Untitled Section"


class Tone(str, Enum):
    """Writing tone requested from the generator."""

    professional = "professional"
    casual = "casual"
    formal = "formal"
    friendly = "friendly"
    informative = "informative"
    persuasive = "persuasive"


class NoteCategory(str, Enum):
    """Category of a free-text note attached to a section."""

    facts = "facts"
    concepts = "concepts"
    opinions = "opinions"
    examples = "examples"
    other = "other"


class GenerationParameters(BaseModel):
    """Parameters that shape a generation request."""

    model_config = ConfigDict(frozen=True)

    target_word_count: int = Field(100, gt=0, description="Approximate length of the draft")
    tone: Tone = Tone.professional
    extra_instructions: str = ""


class CategorizedNotes(BaseModel):
    """Five ordered note lists; every list keeps at least one (possibly blank) row."""

    model_config = ConfigDict(frozen=True)

    facts: list[str] = Field(default_factory=lambda: [""])
    concepts: list[str] = Field(default_factory=lambda: [""])
    opinions: list[str] = Field(default_factory=lambda: [""])
    examples: list[str] = Field(default_factory=lambda: [""])
    other: list[str] = Field(default_factory=lambda: [""])

    @field_validator("facts", "concepts", "opinions", "examples", "other")
    @classmethod
    def keep_editable_row(cls, value: list[str]) -> list[str]:
        """Normalize an empty list to a single blank entry."""
        return value or [""]

    def get(self, category: NoteCategory) -> list[str]:
        """Return the notes of one category."""
        return list(getattr(self, category.value))

    def replace(self, category: NoteCategory, notes: list[str]) -> "CategorizedNotes":
        """Return a copy with one category replaced."""
        return self.model_copy(update={category.value: notes or [""]})

    def non_empty(self) -> dict[NoteCategory, list[str]]:
        """Return categories that hold at least one non-blank note, blanks dropped."""
        result: dict[NoteCategory, list[str]] = {}
        for category in NoteCategory:
            notes = [note for note in self.get(category) if note.strip()]
            if notes:
                result[category] = notes
        return result


class NoteExpansion(BaseModel):
    """Per-category expand/collapse state (presentation only)."""

    model_config = ConfigDict(frozen=True)

    facts: bool = False
    concepts: bool = False
    opinions: bool = False
    examples: bool = False
    other: bool = False

    def toggled(self, category: NoteCategory) -> "NoteExpansion":
        """Return a copy with one category flipped."""
        return self.model_copy(update={category.value: not getattr(self, category.value)})


class Section(BaseModel):
    """One titled, independently generated unit of a document.

    `expanded`/`expanded_notes` are presentation state: they are kept in local
    storage but never sent to the remote store. `is_loading` and `error` are
    transient and never persisted anywhere.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    input: str = ""
    generation: GenerationParameters = Field(default_factory=GenerationParameters)
    output: str = ""
    notes: CategorizedNotes = Field(default_factory=CategorizedNotes)
    expanded: bool = True
    expanded_notes: NoteExpansion = Field(default_factory=NoteExpansion)
    is_loading: bool = False
    error: str | None = None


TRANSIENT_FIELDS = {"is_loading", "error"}
PRESENTATION_FIELDS = {"expanded", "expanded_notes"}


def new_section_id() -> str:
    """Generate a fresh, never reused section identifier."""
    return uuid.uuid4().hex


def create_section(section_id: str | None = None, input: str = "", title: str = "") -> Section:
    """Create a section with default generation parameters and blank notes.

    Titles are stripped; a blank title defaults to "Section " followed by the
    id prefix.
    """
    section_id = section_id or new_section_id()
    return Section(
        id=section_id,
        title=title.strip() or f"Section {section_id[:4]}",
        input=input,
    )


def is_blank(section: Section) -> bool:
    """True when a section carries neither input nor output."""
    return not section.input and not section.output
