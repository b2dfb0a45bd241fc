"""Prompt construction for section drafting."""

import html
import re

from docwriter.app.models.section import Section

DEFAULT_USER_PROMPT = "Please generate appropriate content based on the instructions."

_BLOCK_TAG = re.compile(r"<(p|h[1-6]|ul|ol|li|blockquote|div|table|pre)\b", re.IGNORECASE)


def build_notes_block(section: Section) -> str:
    """Format non-empty notes as capitalized category headers with bullet items."""
    blocks = []
    for category, notes in section.notes.non_empty().items():
        items = "\n".join(f"- {note}" for note in notes)
        blocks.append(f"{category.value.capitalize()}:\n{items}")
    return "\n\n".join(blocks)


def build_system_prompt(section: Section) -> str:
    """Build the drafting instructions for one section."""
    params = section.generation
    notes_block = build_notes_block(section)

    lines = [
        "You are a professional writer generating a section of a larger document. "
        "Important guidelines:",
        "",
        "1. This is a SECTION of a larger document, not a standalone piece.",
        "2. DO NOT include a conclusion unless explicitly requested in the prompt.",
        "3. Focus on smooth transitions and maintaining narrative flow.",
        f"4. Write approximately {params.target_word_count} words.",
        f"5. Use a {params.tone.value} tone.",
        f'6. Base the content on: "{section.input or "the provided context"}"',
    ]
    if notes_block:
        lines.extend(["", f"7. Incorporate this information:\n{notes_block}"])
    if params.extra_instructions:
        lines.extend(["", f"8. Additional instructions: {params.extra_instructions}"])
    lines.extend(
        [
            "",
            "Remember: This is part of a larger document - focus on content flow and avoid "
            "unnecessary wrapping up or concluding statements unless specifically requested. "
            "Generate only the requested section content.",
        ]
    )
    return "\n".join(lines)


def build_user_prompt(section: Section) -> str:
    """User message: the section input, or a generic request when it is blank."""
    return section.input or DEFAULT_USER_PROMPT


def text_to_html(content: str) -> str:
    """Convert generated text to HTML paragraphs.

    Content that already contains block-level markup is returned unchanged.
    Otherwise paragraphs are split on blank lines, escaped, and single newlines
    become line breaks. The markup is written the way html.parser serializes it,
    so an unedited continuous-view sync leaves it byte-identical.
    """
    if _BLOCK_TAG.search(content):
        return content.strip()

    normalized = content.replace("\r\n", "\n").replace("\r", "\n")
    paragraphs = [p.strip() for p in normalized.split("\n\n") if p.strip()]
    return "".join(
        "<p>"
        + "<br/>".join(html.escape(line, quote=False) for line in paragraph.split("\n"))
        + "</p>"
        for paragraph in paragraphs
    )
