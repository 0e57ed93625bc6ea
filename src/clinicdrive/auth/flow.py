"""One-shot consent flow that yields the long-lived refresh token."""

from __future__ import annotations

import logging
from typing import Sequence

from google_auth_oauthlib.flow import InstalledAppFlow

from clinicdrive.errors import AuthError, InvalidArgumentError

from .credentials import DEFAULT_SCOPES

logger = logging.getLogger(__name__)


def obtain_refresh_token(
    client_id: str,
    client_secret: str,
    *,
    scopes: Sequence[str] = DEFAULT_SCOPES,
    port: int = 0,
) -> str:
    """
    Run the installed-app OAuth consent flow and return the refresh token.

    Opens a browser and listens on localhost:port for the redirect. Offline
    access and a forced consent prompt make Google issue a refresh token
    even when the account granted access before.

    Raises:
        InvalidArgumentError: if client_id/client_secret/scopes are empty.
        AuthError: if the flow fails or no refresh token is issued.
    """
    if not client_id or not client_secret:
        raise InvalidArgumentError("client_id and client_secret are required")
    if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
        raise InvalidArgumentError("scopes must be a non-empty sequence of strings")

    client_config = {
        "installed": {
            "client_id": client_id,
            "client_secret": client_secret,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost"],
        }
    }

    try:
        flow = InstalledAppFlow.from_client_config(client_config, scopes=list(scopes))
        creds = flow.run_local_server(port=port, access_type="offline", prompt="consent")
    except Exception as exc:
        raise AuthError("OAuth authorization flow failed", cause=exc) from exc

    refresh_token = getattr(creds, "refresh_token", None)
    if not refresh_token:
        raise AuthError(
            "OAuth flow completed without a refresh token",
            details={"hint": "Revoke the app's access and run the flow again"},
        )

    logger.info("Obtained Google Drive refresh token")
    return refresh_token
