"""Public auth exports for clinicdrive."""

from __future__ import annotations

from .credentials import DEFAULT_SCOPES, GOOGLE_TOKEN_URI, DriveCredentials
from .flow import obtain_refresh_token
from .token_manager import AccessToken, AccessTokenManager, TokenState

__all__ = [
    "DriveCredentials",
    "DEFAULT_SCOPES",
    "GOOGLE_TOKEN_URI",
    "AccessToken",
    "AccessTokenManager",
    "TokenState",
    "obtain_refresh_token",
]
