"""Plain-text import of files into section input."""

from pathlib import PurePath

ALLOWED_EXTENSIONS = (".txt", ".md", ".rtf")


class UnsupportedImportFile(ValueError):
    """Raised for files that cannot be imported as text."""


def decode_import_file(filename: str, content: bytes) -> str:
    """Decode an uploaded file into text.

    Args:
        filename: Original file name, used for the extension check
        content: Raw file bytes

    Returns:
        Decoded text with normalized line endings

    Raises:
        UnsupportedImportFile: If the extension is not allowed or the bytes are not UTF-8
    """
    suffix = PurePath(filename).suffix.lower()
    if suffix not in ALLOWED_EXTENSIONS:
        raise UnsupportedImportFile(
            f"Unsupported file type '{suffix or filename}'. Allowed: {', '.join(ALLOWED_EXTENSIONS)}"
        )

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise UnsupportedImportFile(f"File '{filename}' is not valid UTF-8 text") from e

    return text.replace("\r\n", "\n").replace("\r", "\n")
