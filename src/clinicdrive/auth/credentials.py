"""OAuth client credentials for clinicdrive."""

from __future__ import annotations

from dataclasses import dataclass, field

from clinicdrive.errors import ConfigError

GOOGLE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"
DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive.file",)


@dataclass(slots=True, frozen=True)
class DriveCredentials:
    """
    Process-wide OAuth configuration, immutable once built.

    client_id, client_secret and refresh_token are required; the refresh
    token is the long-lived grant obtained once through the consent flow
    (see clinicdrive.auth.flow).
    """

    client_id: str
    client_secret: str
    refresh_token: str
    redirect_uri: str = ""
    token_uri: str = GOOGLE_TOKEN_URI
    scopes: tuple[str, ...] = field(default=DEFAULT_SCOPES)

    def __post_init__(self) -> None:
        for key in ("client_id", "client_secret", "refresh_token", "token_uri"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"DriveCredentials.{key} must be a non-empty string")

        if not self.scopes or not all(isinstance(s, str) and s.strip() for s in self.scopes):
            raise ConfigError("DriveCredentials.scopes must be a non-empty sequence of strings")

    def __repr__(self) -> str:
        return (
            f"DriveCredentials(client_id={self.client_id!r}, client_secret='***', "
            f"refresh_token='***', token_uri={self.token_uri!r})"
        )
