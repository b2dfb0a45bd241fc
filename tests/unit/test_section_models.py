"""Tests for section and document models and the stored sections codec."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from docwriter.app.models.document import (
    SavedDocument,
    UnsupportedSectionsFormat,
    decode_sections,
    dump_documents_for_local,
    dump_sections_for_local,
    encode_sections,
    load_documents,
    sort_by_recency,
)
from docwriter.app.models.section import (
    CategorizedNotes,
    GenerationParameters,
    NoteCategory,
    NoteExpansion,
    Section,
    Tone,
    create_section,
    is_blank,
)


def test_create_section_defaults() -> None:
    """New sections get a fresh id, a derived title and default parameters."""
    section = create_section()

    assert len(section.id) == 32
    assert section.title == f"Section {section.id[:4]}"
    assert section.input == ""
    assert section.output == ""
    assert section.generation.target_word_count == 100
    assert section.generation.tone is Tone.professional
    assert section.expanded is True
    assert section.is_loading is False
    assert section.error is None


def test_create_section_keeps_explicit_title() -> None:
    section = create_section(title="Introduction", input="seed")

    assert section.title == "Introduction"
    assert section.input == "seed"


def test_create_section_strips_title() -> None:
    assert create_section(title=" A ").title == "A"
    assert create_section(section_id="abcd1234", title="   ").title == "Section abcd"


def test_section_ids_are_unique() -> None:
    ids = {create_section().id for _ in range(100)}
    assert len(ids) == 100


def test_every_note_category_has_an_editable_row() -> None:
    notes = CategorizedNotes()

    for category in NoteCategory:
        assert notes.get(category) == [""]


def test_empty_note_list_is_normalized() -> None:
    notes = CategorizedNotes(facts=[], other=["keep"])

    assert notes.facts == [""]
    assert notes.other == ["keep"]
    assert notes.replace(NoteCategory.other, []).other == [""]


def test_non_empty_drops_blank_notes_and_categories() -> None:
    notes = CategorizedNotes(facts=["a", " "], opinions=["", "b"])

    assert notes.non_empty() == {NoteCategory.facts: ["a"], NoteCategory.opinions: ["b"]}


def test_note_expansion_toggle() -> None:
    expansion = NoteExpansion().toggled(NoteCategory.examples)

    assert expansion.examples is True
    assert expansion.toggled(NoteCategory.examples).examples is False


def test_target_word_count_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        GenerationParameters(target_word_count=0)


def test_sections_are_immutable() -> None:
    section = create_section()

    with pytest.raises(ValidationError):
        section.title = "changed"  # type: ignore[misc]


def test_is_blank() -> None:
    assert is_blank(create_section())
    assert not is_blank(create_section(input="x"))


def test_encode_sections_drops_presentation_and_transient_state() -> None:
    section = create_section(input="draft").model_copy(
        update={"is_loading": True, "error": "boom", "expanded": False}
    )

    blob = encode_sections([section])

    assert blob["version"] == 1
    stored = blob["sections"][0]
    assert stored["input"] == "draft"
    for field in ("is_loading", "error", "expanded", "expanded_notes"):
        assert field not in stored


def test_decode_versioned_blob() -> None:
    section = create_section(input="draft")

    decoded = decode_sections(encode_sections([section]))

    assert decoded[0].id == section.id
    assert decoded[0].input == "draft"
    assert decoded[0].expanded is True


def test_decode_accepts_bare_list() -> None:
    decoded = decode_sections([{"id": "abc", "title": "Legacy", "notes": {"facts": []}}])

    assert decoded[0].title == "Legacy"
    assert decoded[0].notes.facts == [""]


def test_decode_rejects_unknown_version() -> None:
    with pytest.raises(UnsupportedSectionsFormat):
        decode_sections({"version": 99, "sections": []})


def test_decode_rejects_unexpected_type() -> None:
    with pytest.raises(UnsupportedSectionsFormat):
        decode_sections("not sections")


def test_local_dump_keeps_presentation_state() -> None:
    section = create_section().model_copy(update={"expanded": False, "is_loading": True})

    dumped = dump_sections_for_local([section])[0]

    assert dumped["expanded"] is False
    assert "is_loading" not in dumped


def test_local_documents_round_trip_sorted_by_recency() -> None:
    now = datetime.now(UTC)
    older = SavedDocument(
        id="1", title="Old", created_at=now, updated_at=now - timedelta(days=1), sections=[]
    )
    newer = SavedDocument(
        id="2", title="New", created_at=now, updated_at=now, sections=[create_section()]
    )

    loaded = load_documents(dump_documents_for_local([older, newer]))

    assert [doc.id for doc in loaded] == ["2", "1"]
    assert loaded[0].sections[0].id == newer.sections[0].id


def test_sort_by_recency() -> None:
    now = datetime.now(UTC)
    docs = [
        SavedDocument(id=str(i), title=str(i), created_at=now, updated_at=now + timedelta(i))
        for i in range(3)
    ]

    assert [doc.id for doc in sort_by_recency(docs)] == ["2", "1", "0"]


def test_summary_counts_sections() -> None:
    now = datetime.now(UTC)
    doc = SavedDocument(
        id="1", title="T", created_at=now, updated_at=now, sections=[create_section()] * 2
    )

    summary = doc.summary()

    assert summary.section_count == 2
    assert summary.title == "T"


def test_section_validates_from_dict() -> None:
    section = Section.model_validate({"id": "x", "generation": {"tone": "casual"}})

    assert section.generation.tone is Tone.casual
