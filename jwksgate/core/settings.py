"""Service settings loaded from environment variables and an optional .env file."""

from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from jwksgate.verify.verifier import LEEWAY_DEFAULT

PROVIDER_URL_DEFAULT = "https://api.workos.com"
FETCH_TIMEOUT_DEFAULT = 10.0
HTTP_PORT_DEFAULT = 8080

LogLevel = Literal["debug", "info", "warning", "error", "critical"]


class VerifierSettings(BaseSettings):
    """JWKS source, verification and HTTP server settings."""

    model_config = SettingsConfigDict(
        env_prefix="JWKS_",
        env_file=".env",
        extra="ignore",
    )

    client_id: str
    provider_url: str = PROVIDER_URL_DEFAULT
    cache_dir: Path = Path(".")
    fetch_timeout: float = FETCH_TIMEOUT_DEFAULT
    leeway: int = LEEWAY_DEFAULT
    host: str = "0.0.0.0"
    port: int = HTTP_PORT_DEFAULT
    log_level: LogLevel = "info"
    log_json: bool = True

    @field_validator("log_level", mode="before")
    @classmethod
    def _lower_log_level(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @property
    def cache_path(self) -> Path:
        """Local JWKS cache file, named after the client id."""
        return self.cache_dir / f"{self.client_id}-jwks.json"
