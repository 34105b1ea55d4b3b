"""Runtime configuration loaded from the environment / .env file."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

here = Path(__file__).parent.parent


class Settings(BaseSettings):
    # --- NPI registry ---
    npi_api_url: str = "https://npiregistry.cms.hhs.gov/api/"
    npi_api_version: str = "2.1"
    npi_request_timeout: float = 5.0  # seconds, per lookup
    npi_max_per_request: int = 10

    # --- HTTP API ---
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=here / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


def get_settings() -> Settings:
    """Build settings from environment variables, falling back to defaults."""
    return Settings()
