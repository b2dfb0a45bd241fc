"""Tests for the printable HTML export."""

from docwriter.app.documents.printable import render_printable
from docwriter.app.models.section import create_section


def test_printable_page_structure() -> None:
    sections = [
        create_section(title="Intro").model_copy(update={"output": "<p>Hello</p>"}),
        create_section(title="Next"),
    ]

    page = render_printable("Annual <Report>", sections)

    assert page.startswith("<!DOCTYPE html>")
    assert "<title>Annual &lt;Report&gt;</title>" in page
    assert "<h1>Annual &lt;Report&gt;</h1>" in page
    assert "<section>\n<h2>Intro</h2>\n<p>Hello</p>\n</section>" in page
    assert "No content generated yet." in page
    assert page.index("Intro") < page.index("Next")


def test_printable_blank_title() -> None:
    page = render_printable("  ", [create_section()])

    assert "<h1>Untitled Document</h1>" in page
