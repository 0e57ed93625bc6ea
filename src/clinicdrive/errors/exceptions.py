"""Exception hierarchy and HTTP error mapping for clinicdrive."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class DriveStoreError(Exception):
    """
    Base exception for clinicdrive.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause


class ConfigError(DriveStoreError):
    """Raised when required configuration is missing or invalid."""


class InvalidArgumentError(DriveStoreError):
    """Raised when a caller passes an invalid argument (checked locally)."""


class AuthError(DriveStoreError):
    """Raised when the refresh-token exchange or OAuth flow fails (or HTTP 401)."""


class NetworkError(DriveStoreError):
    """Raised when network/timeout issues prevent the request."""


class RemoteError(DriveStoreError):
    """Raised for a non-2xx answer from the Drive API."""

    @property
    def status_code(self) -> int:
        value = self.details.get("status_code")
        return value if isinstance(value, int) else 0

    @property
    def reason(self) -> Optional[str]:
        return self.details.get("reason")


class BadRequestError(RemoteError):
    """Raised when Drive rejects the request arguments (HTTP 400)."""


class AccessDeniedError(RemoteError):
    """Raised when access is denied (HTTP 403 non-quota)."""


class QuotaExceededError(RemoteError):
    """Raised when quota is exceeded (HTTP 403 with quota-related reason)."""


class NotFoundError(RemoteError):
    """Raised when a Drive resource is not found (HTTP 404)."""


class ConflictError(RemoteError):
    """Raised when a conflict occurs (HTTP 409/412)."""


class RateLimitError(RemoteError):
    """Raised when rate-limited (HTTP 429)."""


class SharingError(RemoteError):
    """
    Raised when an upload succeeded but granting its permission failed.

    details["rolled_back"] tells whether the uploaded object was deleted again.
    """


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to clinicdrive exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_QUOTA_REASON_KEYWORDS: tuple[str, ...] = (
    "quota",
    "dailyLimitExceeded",
    "usageLimits",
    "storageQuotaExceeded",
)

_RATE_LIMIT_REASONS: tuple[str, ...] = (
    "rateLimitExceeded",
    "userRateLimitExceeded",
)


def _is_quota_reason(reason: str | None) -> bool:
    if not reason:
        return False
    return any(key.lower() in reason.lower() for key in _QUOTA_REASON_KEYWORDS)


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> DriveStoreError:
    """
    Map an HTTP error to a clinicdrive exception.

    Policy:
        - 400 -> BadRequestError
        - 401 -> AuthError
        - 403 -> AccessDeniedError (default), RateLimitError for
          rate-limit reasons, QuotaExceededError if quota-related
        - 404 -> NotFoundError
        - 409/412 -> ConflictError
        - 429 -> RateLimitError
        - otherwise -> RemoteError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return BadRequestError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        # Drive reports per-user rate limiting as 403.
        if info.reason in _RATE_LIMIT_REASONS:
            return RateLimitError(message, details=details, cause=cause)
        if _is_quota_reason(info.reason):
            return QuotaExceededError(message, details=details, cause=cause)
        return AccessDeniedError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return ConflictError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return RemoteError(message, details=details, cause=cause)
