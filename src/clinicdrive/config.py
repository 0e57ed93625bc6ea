"""Environment-driven configuration for clinicdrive."""

from __future__ import annotations

from typing import Annotated, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from clinicdrive.auth.credentials import DEFAULT_SCOPES, GOOGLE_TOKEN_URI, DriveCredentials
from clinicdrive.errors import ConfigError


class DriveSettings(BaseSettings):
    """
    Settings read from GOOGLE_DRIVE_* environment variables (or a .env file).

    GOOGLE_DRIVE_SCOPES is a comma-separated list.
    """

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_DRIVE_",
        env_file=".env",
        extra="ignore",
    )

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    refresh_token: str = ""
    root_folder: str = ""
    token_uri: str = GOOGLE_TOKEN_URI
    scopes: Annotated[tuple[str, ...], NoDecode] = DEFAULT_SCOPES

    share_uploads_publicly: bool = True
    max_retries: int = 0
    page_size: int = 100
    http_timeout: Optional[float] = None

    @field_validator("scopes", mode="before")
    @classmethod
    def split_scopes(cls, v):
        if isinstance(v, str):
            return tuple(s.strip() for s in v.split(",") if s.strip())
        return v

    @field_validator("max_retries")
    @classmethod
    def check_max_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_retries must be >= 0")
        return v

    @field_validator("page_size")
    @classmethod
    def check_page_size(cls, v: int) -> int:
        if not 1 <= v <= 1000:
            raise ValueError("page_size must be between 1 and 1000")
        return v

    def to_credentials(self) -> DriveCredentials:
        """Build DriveCredentials; raises ConfigError when a value is missing."""
        missing = [
            f"GOOGLE_DRIVE_{name.upper()}"
            for name in ("client_id", "client_secret", "refresh_token")
            if not getattr(self, name).strip()
        ]
        if missing:
            raise ConfigError(
                "Google Drive credentials are not configured",
                details={"missing": missing},
            )

        return DriveCredentials(
            client_id=self.client_id,
            client_secret=self.client_secret,
            refresh_token=self.refresh_token,
            redirect_uri=self.redirect_uri,
            token_uri=self.token_uri,
            scopes=tuple(self.scopes),
        )

    def require_root_folder(self) -> str:
        if not self.root_folder.strip():
            raise ConfigError(
                "Google Drive root folder is not configured",
                details={"missing": ["GOOGLE_DRIVE_ROOT_FOLDER"]},
            )
        return self.root_folder
