"""Data models for Drive objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from clinicdrive.util.mime import is_folder


@dataclass(slots=True)
class FileRecord:
    """
    A Drive file (or folder) as returned by the API.

    Notes:
        - Never cached: every operation fetches a fresh copy.
        - `properties` holds the domain metadata used for searching
          (recordId, recordType, patientId, ...).
    """

    id: str
    name: str
    mime_type: str

    size: Optional[int] = None
    created_time: Optional[datetime] = None
    modified_time: Optional[datetime] = None
    web_view_link: Optional[str] = None
    web_content_link: Optional[str] = None
    thumbnail_link: Optional[str] = None
    description: Optional[str] = None
    properties: dict[str, str] = field(default_factory=dict)
    parents: list[str] = field(default_factory=list)

    @property
    def is_folder(self) -> bool:
        return is_folder(self.mime_type)


@dataclass(slots=True)
class FilePage:
    """One page of a files.list call."""

    files: list[FileRecord]
    next_page_token: Optional[str] = None


@dataclass(slots=True, frozen=True)
class UploadOptions:
    """Metadata sent along with an upload."""

    file_name: str
    mime_type: str
    folder_id: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[dict[str, str]] = None
