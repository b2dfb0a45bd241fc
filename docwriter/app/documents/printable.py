"""Printable HTML export of a whole document."""

import html

from docwriter.app.models.section import UNTITLED_SECTION, Section

_PRINT_STYLE = """
body { font-family: Georgia, serif; max-width: 48rem; margin: 2rem auto; color: #111; }
h1 { border-bottom: 2px solid #333; padding-bottom: 0.5rem; }
section { page-break-inside: avoid; margin-bottom: 2rem; }
.empty { color: #777; font-style: italic; }
"""


def render_printable(title: str, sections: list[Section] | tuple[Section, ...]) -> str:
    """Render a standalone HTML page for printing.

    Sections without output are rendered with a placeholder so the printed
    page keeps the document structure.
    """
    doc_title = html.escape(title.strip() or "Untitled Document")
    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{doc_title}</title>",
        f"<style>{_PRINT_STYLE}</style>",
        "</head>",
        "<body>",
        f"<h1>{doc_title}</h1>",
    ]

    for section in sections:
        body = section.output or '<p class="empty">No content generated yet.</p>'
        parts.append(
            f"<section>\n<h2>{html.escape(section.title or UNTITLED_SECTION)}</h2>\n{body}\n</section>"
        )

    parts.extend(["</body>", "</html>"])
    return "\n".join(parts)
