"""Configuration management for excel-records.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
EXCEL_RECORDS_ prefix, or via a .env file in the working directory.

Environment Variables:
    EXCEL_RECORDS_SHEET_NAME: Name of the sheet written on export (default: Sheet1)
    EXCEL_RECORDS_VALIDATE_HEADER_OVERRIDE: Reject header overrides whose length
        differs from the exported field count (default: false)
    EXCEL_RECORDS_LOG_LEVEL: Logging level (default: INFO)
    EXCEL_RECORDS_DEBUG: Enable debug mode (default: false)
"""

import logging
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Characters Excel refuses in a worksheet title.
INVALID_SHEET_CHARACTERS = frozenset("[]:*?/\\")
MAX_SHEET_NAME_LENGTH = 31


class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    Example .env file:
        EXCEL_RECORDS_SHEET_NAME=People
        EXCEL_RECORDS_VALIDATE_HEADER_OVERRIDE=true
        EXCEL_RECORDS_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="EXCEL_RECORDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Workbook Settings
    # =========================================================================

    sheet_name: str = "Sheet1"
    """Title of the single worksheet produced on export."""

    # =========================================================================
    # Mapping Settings
    # =========================================================================

    validate_header_override: bool = False
    """Reject header overrides whose length differs from the exported fields."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional logging."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("sheet_name")
    @classmethod
    def validate_sheet_name(cls, v: str) -> str:
        """Validate the sheet name against Excel's worksheet title rules."""
        if not v or len(v) > MAX_SHEET_NAME_LENGTH:
            raise ValueError(
                f"sheet_name must be 1-{MAX_SHEET_NAME_LENGTH} characters, got {v!r}"
            )
        invalid = sorted(set(v) & INVALID_SHEET_CHARACTERS)
        if invalid:
            raise ValueError(
                f"sheet_name contains invalid characters: {''.join(invalid)}"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a plain dictionary for logging.

        Returns:
            Dictionary representation of all settings.
        """
        return {
            "sheet_name": self.sheet_name,
            "validate_header_override": self.validate_header_override,
            "log_level": self.log_level,
            "debug": self.debug,
        }


# Create the global settings instance
settings = Settings()
