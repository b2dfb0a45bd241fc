"""Continuous view - merge sections into one HTML document and split it back.

Markup convention: a level-2 heading starts a section, a horizontal rule is a
separator. Splitting is a single pass over the top-level nodes of the merged
markup and is validated against the expected section count before anything is
applied.
"""

import html
import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup, NavigableString, Tag

from docwriter.app.models.section import UNTITLED_SECTION, Section

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = "\n<hr>\n"


@dataclass(frozen=True)
class DerivedSection:
    """Title and body recovered from merged markup."""

    title: str
    body_html: str


class StructuralMismatch(ValueError):
    """Raised when the merged markup no longer has one heading per section."""

    def __init__(self, found: int, expected: int) -> None:
        super().__init__(
            f"Parsing resulted in {found} sections, but expected {expected}. "
            "Structure may have been changed too much. Sync aborted."
        )
        self.found = found
        self.expected = expected


def _heading(section: Section) -> str:
    return section.title.strip() or UNTITLED_SECTION


def merge_sections(sections: list[Section] | tuple[Section, ...]) -> str:
    """Concatenate sections into continuous-view markup."""
    return SECTION_SEPARATOR.join(
        f"<h2>{html.escape(_heading(section), quote=False)}</h2>\n{section.output}"
        for section in sections
    )


def _text(node: Tag | NavigableString) -> str:
    return node.get_text() if isinstance(node, Tag) else str(node)


def _serialize(node: Tag | NavigableString) -> str:
    if isinstance(node, Tag):
        return str(node)
    return node.output_ready(formatter="minimal")


def normalize_body(markup: str) -> str:
    """Serialize a section body the way split_sections recovers it."""
    soup = BeautifulSoup(f"<div>{markup}</div>", "html.parser")
    nodes = list(soup.div.children) if soup.div else []
    return "".join(
        _serialize(node) for node in nodes if not (isinstance(node, Tag) and node.name == "hr")
    ).strip()


def split_sections(markup: str, expected_count: int) -> list[DerivedSection]:
    """Re-derive section titles and bodies from merged markup.

    Content found before the first heading is kept in an implicit
    "Untitled Section" instead of being dropped.

    Args:
        markup: Merged (and possibly edited) continuous-view HTML
        expected_count: Number of sections the markup must contain

    Returns:
        Derived sections in document order

    Raises:
        StructuralMismatch: If the derived section count differs from expected_count
    """
    soup = BeautifulSoup(f"<div>{markup}</div>", "html.parser")
    wrapper = soup.div

    titles: list[str] = []
    bodies: list[list[str]] = []

    for node in list(wrapper.children) if wrapper else []:
        name = node.name if isinstance(node, Tag) else None

        if name == "h2":
            titles.append(_text(node).strip() or UNTITLED_SECTION)
            bodies.append([])
        elif name == "hr":
            continue
        elif bodies:
            bodies[-1].append(_serialize(node))
        elif _text(node).strip():
            # TODO: raise StructuralMismatch here instead once stricter validation is wanted
            logger.warning("Content found before the first heading, using an implicit section")
            titles.append(UNTITLED_SECTION)
            bodies.append([_serialize(node)])

    derived = [
        DerivedSection(title=title, body_html="".join(parts).strip())
        for title, parts in zip(titles, bodies, strict=True)
    ]

    if len(derived) != expected_count:
        raise StructuralMismatch(found=len(derived), expected=expected_count)

    return derived


def apply_split(
    sections: tuple[Section, ...], derived: list[DerivedSection]
) -> tuple[Section, ...]:
    """Pair derived titles/bodies with sections by position.

    A title or body that only differs by serialization (escaping, void tags,
    surrounding whitespace, the "Untitled Section" placeholder) counts as
    unchanged. Sections with nothing changed are returned as-is.

    Raises:
        StructuralMismatch: If the lengths differ
    """
    if len(derived) != len(sections):
        raise StructuralMismatch(found=len(derived), expected=len(sections))

    updated: list[Section] = []
    for section, new in zip(sections, derived, strict=True):
        title = section.title if new.title == _heading(section) else new.title
        output = section.output if new.body_html == normalize_body(section.output) else new.body_html

        if title == section.title and output == section.output:
            updated.append(section)
        else:
            updated.append(section.model_copy(update={"title": title, "output": output}))
    return tuple(updated)
