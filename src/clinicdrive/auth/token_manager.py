"""Access-token lifecycle on top of a long-lived refresh token."""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from clinicdrive.errors import AuthError, NetworkError
from clinicdrive.util.time import ensure_utc, now_utc

from .credentials import DriveCredentials

logger = logging.getLogger(__name__)


class TokenState(str, enum.Enum):
    ABSENT = "absent"
    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(slots=True, frozen=True)
class AccessToken:
    token: str
    expiry: Optional[datetime]

    def usable_at(self, now: datetime, margin: timedelta) -> bool:
        # No expiry reported: good for the call that fetched it only.
        if self.expiry is None:
            return False
        return now < self.expiry - margin


class AccessTokenManager:
    """
    Owns the cached access token and refreshes it on demand.

    State machine:
        ABSENT -> VALID -> EXPIRED -> VALID -> ...
        any -> INVALID when the refresh grant is rejected. INVALID is terminal:
        every later call raises AuthError without contacting the token
        endpoint; build a new manager from corrected configuration.

    Check-and-refresh runs under a lock, so concurrent callers that all see
    an expired token trigger a single refresh.
    """

    SAFETY_MARGIN: timedelta = timedelta(seconds=60)

    def __init__(
        self,
        oauth_credentials: Any,
        *,
        request_factory: Callable[[], Any] = Request,
        clock: Callable[[], datetime] = now_utc,
        safety_margin: timedelta = SAFETY_MARGIN,
    ) -> None:
        self._oauth = oauth_credentials
        self._request_factory = request_factory
        self._clock = clock
        self._margin = safety_margin
        self._lock = threading.Lock()
        self._token: Optional[AccessToken] = None
        self._rejected: Optional[BaseException] = None

    @classmethod
    def from_credentials(
        cls,
        credentials: DriveCredentials,
        **kwargs: Any,
    ) -> "AccessTokenManager":
        """Create a manager backed by google-auth user credentials."""
        oauth = Credentials(
            token=None,
            refresh_token=credentials.refresh_token,
            token_uri=credentials.token_uri,
            client_id=credentials.client_id,
            client_secret=credentials.client_secret,
            scopes=list(credentials.scopes),
        )
        return cls(oauth, **kwargs)

    @property
    def state(self) -> TokenState:
        with self._lock:
            if self._rejected is not None:
                return TokenState.INVALID
            if self._token is None:
                return TokenState.ABSENT
            if self._token.usable_at(self._clock(), self._margin):
                return TokenState.VALID
            return TokenState.EXPIRED

    def get_access_token(self) -> str:
        """
        Return a currently valid access token, refreshing when needed.

        Raises:
            AuthError: if the refresh grant is (or was earlier) rejected.
            NetworkError: if the token endpoint could not be reached.
        """
        with self._lock:
            if self._rejected is not None:
                raise AuthError(
                    "Refresh token was rejected; configuration must be corrected",
                    cause=self._rejected,
                )

            if self._token is not None and self._token.usable_at(self._clock(), self._margin):
                return self._token.token

            self._token = self._refresh()
            return self._token.token

    def invalidate(self) -> None:
        """Drop the cached token so the next call refreshes it."""
        with self._lock:
            self._token = None

    def _refresh(self) -> AccessToken:
        token_uri = getattr(self._oauth, "token_uri", None)
        logger.info("Refreshing Google Drive access token")
        try:
            self._oauth.refresh(self._request_factory())
        except RefreshError as exc:
            # Transient token-endpoint failures do not poison the manager.
            if not getattr(exc, "retryable", False):
                self._rejected = exc
                logger.error("Refresh token rejected by %s", token_uri)
            raise AuthError(
                "Failed to refresh Google Drive access token",
                details={"token_uri": token_uri},
                cause=exc,
            ) from exc
        except TransportError as exc:
            raise NetworkError(
                "Token endpoint unreachable",
                details={"token_uri": token_uri},
                cause=exc,
            ) from exc

        token = getattr(self._oauth, "token", None)
        if not isinstance(token, str) or not token:
            raise AuthError(
                "Token endpoint returned no access token",
                details={"token_uri": token_uri},
            )

        expiry = getattr(self._oauth, "expiry", None)
        if expiry is not None:
            expiry = ensure_utc(expiry)
        logger.debug("Access token refreshed (expiry=%s)", expiry)
        return AccessToken(token=token, expiry=expiry)
