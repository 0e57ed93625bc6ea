"""Drive file store exports."""

from __future__ import annotations

from .drive_store import DriveFileStore

__all__ = ["DriveFileStore"]
