"""Helper functions for UI - document writer API client and display formatting."""

from datetime import datetime
from typing import Any

import httpx
from bs4 import BeautifulSoup

MODE_LABELS = {
    "initializing": "Starting up",
    "remote": "Saving to database",
    "local": "Saving locally",
    "degraded": "Saving disabled",
}


def _request(backend_url: str, method: str, path: str, **kwargs: Any) -> Any:
    """Send one API request.

    Raises:
        httpx.HTTPStatusError: If the API answers with an error status
    """
    response = httpx.request(method, f"{backend_url}{path}", timeout=60.0, **kwargs)
    response.raise_for_status()
    if response.headers.get("content-type", "").startswith("application/json"):
        return response.json()
    return response.text


# --- Session and sections ---


def get_session_state(backend_url: str) -> dict[str, Any]:
    """Fetch mode, open document and sections."""
    result: dict[str, Any] = _request(backend_url, "GET", "/session")
    return result


def add_section(backend_url: str, title: str = "", input: str = "") -> dict[str, Any]:
    """Append a section."""
    result: dict[str, Any] = _request(
        backend_url, "POST", "/sections", json={"title": title, "input": input}
    )
    return result


def update_section(backend_url: str, section_id: str, **fields: Any) -> dict[str, Any]:
    """Update title, input, output or generation parameters of a section."""
    result: dict[str, Any] = _request(backend_url, "PATCH", f"/sections/{section_id}", json=fields)
    return result


def delete_section(backend_url: str, section_id: str) -> dict[str, Any]:
    """Delete a section (the last one is kept by the API)."""
    result: dict[str, Any] = _request(backend_url, "DELETE", f"/sections/{section_id}")
    return result


def toggle_section(backend_url: str, section_id: str) -> dict[str, Any]:
    """Expand or collapse a section."""
    result: dict[str, Any] = _request(backend_url, "POST", f"/sections/{section_id}/toggle")
    return result


def add_note(backend_url: str, section_id: str, category: str) -> dict[str, Any]:
    """Append a blank note to a category."""
    result: dict[str, Any] = _request(backend_url, "POST", f"/sections/{section_id}/notes/{category}")
    return result


def toggle_notes(backend_url: str, section_id: str, category: str) -> dict[str, Any]:
    """Show or hide the notes of one category."""
    result: dict[str, Any] = _request(
        backend_url, "POST", f"/sections/{section_id}/notes/{category}/toggle"
    )
    return result


def update_note(
    backend_url: str, section_id: str, category: str, index: int, value: str
) -> dict[str, Any]:
    """Replace one note."""
    result: dict[str, Any] = _request(
        backend_url,
        "PUT",
        f"/sections/{section_id}/notes/{category}/{index}",
        json={"value": value},
    )
    return result


def remove_note(backend_url: str, section_id: str, category: str, index: int) -> dict[str, Any]:
    """Remove one note."""
    result: dict[str, Any] = _request(
        backend_url, "DELETE", f"/sections/{section_id}/notes/{category}/{index}"
    )
    return result


def generate_section(backend_url: str, section_id: str) -> dict[str, Any]:
    """Draft a section; failures come back in the body, not as HTTP errors."""
    result: dict[str, Any] = _request(backend_url, "POST", f"/sections/{section_id}/generate")
    return result


def import_file(backend_url: str, filename: str, content: bytes) -> dict[str, Any]:
    """Upload a .txt/.md/.rtf file as section input."""
    result: dict[str, Any] = _request(
        backend_url, "POST", "/sections/import", files={"file": (filename, content)}
    )
    return result


# --- Documents ---


def save_document(backend_url: str, title: str) -> dict[str, Any]:
    """Save the current sections under title."""
    result: dict[str, Any] = _request(backend_url, "POST", "/documents", json={"title": title})
    return result


def new_document(backend_url: str) -> dict[str, Any]:
    """Start an unsaved document."""
    result: dict[str, Any] = _request(backend_url, "POST", "/documents/new")
    return result


def open_document(backend_url: str, document_id: str) -> dict[str, Any]:
    """Load a saved document."""
    result: dict[str, Any] = _request(backend_url, "POST", f"/documents/{document_id}/open")
    return result


def delete_document(backend_url: str, document_id: str) -> dict[str, Any]:
    """Delete a saved document."""
    result: dict[str, Any] = _request(backend_url, "DELETE", f"/documents/{document_id}")
    return result


# --- Continuous view ---


def get_continuous(backend_url: str) -> str:
    """Merged HTML of all sections."""
    result: dict[str, Any] = _request(backend_url, "GET", "/continuous")
    return str(result["html"])


def sync_continuous(backend_url: str, html: str) -> dict[str, Any]:
    """Push edited merged HTML back into the sections."""
    result: dict[str, Any] = _request(backend_url, "POST", "/continuous/sync", json={"html": html})
    return result


def get_printable(backend_url: str, title: str | None = None) -> str:
    """Printable HTML page for the current document."""
    params = {"title": title} if title else None
    return str(_request(backend_url, "GET", "/print", params=params))


# --- Display helpers ---


def error_message(error: Exception) -> str:
    """Extract the user-visible message from an API error.

    Args:
        error: Exception raised by one of the client functions

    Returns:
        The API's detail message when present, str(error) otherwise
    """
    if isinstance(error, httpx.HTTPStatusError):
        try:
            detail = error.response.json().get("detail")
        except ValueError:
            detail = None
        if isinstance(detail, dict):
            return str(detail.get("message", detail))
        if detail:
            return str(detail)
    return str(error)


def format_mode(mode: str) -> str:
    """Human-readable persistence mode."""
    return MODE_LABELS.get(mode, mode)


def format_document_label(document: dict[str, Any]) -> str:
    """One-line label for a saved document summary.

    Args:
        document: DocumentSummary dict (title, updated_at, section_count)

    Returns:
        e.g. "Q3 Report - 3 sections, updated 2026-10-16 09:30"
    """
    count = document.get("section_count", 0)
    label = f"{document.get('title', 'Untitled')} - {count} section{'s' if count != 1 else ''}"

    updated_at = document.get("updated_at")
    if updated_at:
        try:
            parsed = datetime.fromisoformat(str(updated_at).replace("Z", "+00:00"))
            label += f", updated {parsed.strftime('%Y-%m-%d %H:%M')}"
        except ValueError:
            label += f", updated {updated_at}"

    return label


def count_words(html: str) -> int:
    """Count words in an HTML fragment's text."""
    if not html:
        return 0
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return len(text.split())


def section_status(section: dict[str, Any]) -> str:
    """Short status of a section: generating, error, drafted or empty."""
    if section.get("is_loading"):
        return "generating"
    if section.get("error"):
        return "error"
    if section.get("output"):
        return "drafted"
    return "empty"
