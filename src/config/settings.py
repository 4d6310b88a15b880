"""
Configuration settings for FileMaker MCP Server
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


DATA_API_PATH = "/fmi/data/v1/databases"


class MatchMode(str, Enum):
    """How search text is turned into a find expression."""

    exact = "exact"  # prepend "=" to the search text
    raw = "raw"  # forward the search text unmodified


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Service
    service_name: str = "filemaker-mcp-server"
    service_version: str = "1.0.0"
    log_level: str = "INFO"

    # FileMaker Data API
    filemaker_server_url: str = Field(
        default="",
        description="FileMaker Server base URL, e.g. https://fms.example.com",
    )
    filemaker_database: str = "default_database"
    filemaker_layout: str = "default_layout"
    filemaker_account: str = ""
    filemaker_password: SecretStr = SecretStr("")

    # Find
    filemaker_find_mode: MatchMode = MatchMode.exact

    # HTTP
    filemaker_request_timeout: float = 30.0


class FileMakerConfig(BaseModel):
    """Immutable connection defaults handed to every FileMaker operation.

    Built once at startup from :class:`Settings`. Call sites override single
    values through :meth:`resolve`, which returns a copy.
    """

    model_config = ConfigDict(frozen=True)

    server_url: str = ""
    database: str = "default_database"
    layout: str = "default_layout"
    account: str = ""
    password: SecretStr = SecretStr("")
    find_mode: MatchMode = MatchMode.exact
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "FileMakerConfig":
        return cls(
            server_url=settings.filemaker_server_url,
            database=settings.filemaker_database,
            layout=settings.filemaker_layout,
            account=settings.filemaker_account,
            password=settings.filemaker_password,
            find_mode=settings.filemaker_find_mode,
            timeout=settings.filemaker_request_timeout,
        )

    def resolve(self, **overrides: Optional[Any]) -> "FileMakerConfig":
        """Return a copy with every non-None override applied."""
        update = {key: value for key, value in overrides.items() if value is not None}
        if "password" in update and not isinstance(update["password"], SecretStr):
            update["password"] = SecretStr(str(update["password"]))
        if not update:
            return self
        return self.model_copy(update=update)

    def check(self) -> None:
        """Raise ValueError when the server URL or database is missing."""
        if not self.server_url.strip():
            raise ValueError("FileMaker server URL is not configured (FILEMAKER_SERVER_URL)")
        if not self.database:
            raise ValueError("FileMaker database is not configured (FILEMAKER_DATABASE)")

    @property
    def database_url(self) -> str:
        """Data API base URL for the configured database"""
        server_url = self.server_url.strip().rstrip("/")
        return f"{server_url}{DATA_API_PATH}/{quote(self.database, safe='')}"

    def endpoint(self, *segments: str) -> str:
        """Data API URL below the database; each segment is percent-encoded."""
        return "/".join([self.database_url, *(quote(segment, safe="") for segment in segments)])


# Global settings instance
settings = Settings()
