"""
Engine configuration management using Pydantic Settings.
All settings can be overridden via environment variables.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Bid Form Import Engine"
    VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Workbook layout contract (see bidform.services.layout.LAYOUTS)
    BID_FORM_LAYOUT: str = "base_v1"

    # Cell-level diagnostics
    RECORD_CELL_WARNINGS: bool = True
    MAX_CELL_WARNINGS: int = 200  # Per parse; keeps a garbage workbook from flooding results

    @field_validator("MAX_CELL_WARNINGS", mode="after")
    @classmethod
    def validate_warning_cap(cls, v: int) -> int:
        """Warning cap cannot be negative."""
        if v < 0:
            raise ValueError("MAX_CELL_WARNINGS must be zero or positive")
        return v


settings = Settings()
