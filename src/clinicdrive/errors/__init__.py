"""Public error exports for clinicdrive."""

from __future__ import annotations

from .exceptions import (
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

__all__ = [
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
