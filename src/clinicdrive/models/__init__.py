"""Public model exports for clinicdrive."""

from __future__ import annotations

from .file_record import FilePage, FileRecord, UploadOptions

__all__ = [
    "FileRecord",
    "FilePage",
    "UploadOptions",
]
