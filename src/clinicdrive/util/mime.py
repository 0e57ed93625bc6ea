from __future__ import annotations

import mimetypes

FOLDER_MIME: str = "application/vnd.google-apps.folder"
DEFAULT_MIME: str = "application/octet-stream"


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def guess_mime_type(file_name: str) -> str:
    """Guess a MIME type from a file name, falling back to octet-stream."""
    guessed, _ = mimetypes.guess_type(file_name)
    return guessed or DEFAULT_MIME


def file_extension(file_name: str) -> str:
    """
    Return the text after the last dot of file_name ("" if there is none).

    Examples:
      - "scan.final.PNG" -> "PNG"
      - "README" -> ""
    """
    base = file_name.rsplit("/", 1)[-1]
    if "." not in base:
        return ""
    return base.rsplit(".", 1)[-1]
