"""Application settings and configuration."""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from patrimony.domain.models.enums import StakeholderRole


def get_default_data_dir() -> Path:
    """Return the default data directory."""
    return Path.home() / ".fleet-patrimony"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Fleet Patrimony"
    app_version: str = "0.1.0"

    # Data directory (the default SQLite file lives here)
    data_dir: Optional[Path] = None

    # Database URL (derived from data_dir if not set explicitly)
    database_url: Optional[str] = None

    log_level: str = "INFO"

    # Reference price source
    price_source_base_url: str = "https://fipe.parallelum.com.br/api/v2"
    price_source_token: Optional[str] = None
    price_reference_period: Optional[str] = None
    default_fuel_code: str = "G"
    price_fetch_timeout_seconds: float = Field(default=10.0, gt=0)
    use_stub_price_source: bool = False

    # Batch refresh throttle
    refresh_delay_seconds: float = Field(default=1.5, gt=0)

    # Role whose active members share collective assets equally
    collective_group_role: StakeholderRole = StakeholderRole.PARTNER

    @field_validator("default_fuel_code")
    @classmethod
    def _upper_fuel_code(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("default_fuel_code cannot be empty")
        return value

    @field_validator("price_source_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def get_data_dir(self) -> Path:
        """Get the data directory, creating it if needed."""
        data_dir = self.data_dir or get_default_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_database_url(self) -> str:
        """Get database URL, deriving from data_dir if not set."""
        if self.database_url:
            return self.database_url
        db_path = self.get_data_dir() / "patrimony.db"
        return f"sqlite:///{db_path}"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Replace the current settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
