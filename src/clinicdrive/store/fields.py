"""Field definitions for Google Drive API responses."""

from __future__ import annotations

FILE_FIELDS: str = (
    "id,"
    "name,"
    "mimeType,"
    "parents,"
    "size,"
    "createdTime,"
    "modifiedTime,"
    "webViewLink,"
    "webContentLink,"
    "thumbnailLink,"
    "properties,"
    "description"
)

LIST_FIELDS: str = f"nextPageToken,files({FILE_FIELDS})"
