"""clinicdrive public API."""

from __future__ import annotations

from clinicdrive.auth import (
    AccessToken,
    AccessTokenManager,
    DriveCredentials,
    TokenState,
    obtain_refresh_token,
)
from clinicdrive.config import DriveSettings
from clinicdrive.errors import (
    AccessDeniedError,
    AuthError,
    BadRequestError,
    ConfigError,
    ConflictError,
    DriveStoreError,
    HttpErrorInfo,
    InvalidArgumentError,
    NetworkError,
    NotFoundError,
    QuotaExceededError,
    RateLimitError,
    RemoteError,
    SharingError,
    map_http_error,
)
from clinicdrive.models import FilePage, FileRecord, UploadOptions
from clinicdrive.records import RecordFile, RecordFileService
from clinicdrive.store import DriveFileStore

__all__ = [
    # High-level
    "DriveFileStore",
    "RecordFileService",
    "DriveSettings",
    # Auth
    "DriveCredentials",
    "AccessToken",
    "AccessTokenManager",
    "TokenState",
    "obtain_refresh_token",
    # Models
    "FileRecord",
    "FilePage",
    "UploadOptions",
    "RecordFile",
    # Errors
    "DriveStoreError",
    "ConfigError",
    "InvalidArgumentError",
    "AuthError",
    "NetworkError",
    "RemoteError",
    "BadRequestError",
    "AccessDeniedError",
    "QuotaExceededError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "SharingError",
    "HttpErrorInfo",
    "map_http_error",
]
