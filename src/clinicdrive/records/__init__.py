"""Record-attachment exports for clinicdrive."""

from __future__ import annotations

from .record_file import RecordFile
from .service import RecordFileService

__all__ = ["RecordFile", "RecordFileService"]
