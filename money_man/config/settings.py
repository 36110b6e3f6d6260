"""
Configuration Management for Money Man

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The project directory itself is normally handed over by the shell layer
(a single positional argument); everything else comes from the environment.

The account and tag list file names keep their historical environment
names (ACC_FILE, TAG_FILE) so existing setups keep working.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Flat-file storage layout inside a project directory."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    account_file: str = Field(
        default="accounts.dat",
        validation_alias=AliasChoices("ACC_FILE", "account_file"),
        description="Name of the account list file"
    )
    tag_file: str = Field(
        default="tags.dat",
        validation_alias=AliasChoices("TAG_FILE", "tag_file"),
        description="Name of the tag list file"
    )
    table_suffix: str = Field(
        default=".csv",
        description="File suffix of ledger table files"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of every ledger file"
    )

    @field_validator('account_file', 'tag_file')
    @classmethod
    def validate_list_file_name(cls, v: str) -> str:
        """List files live flat in the project directory."""
        v = v.strip()
        if not v:
            raise ValueError("List file name cannot be empty")
        if "/" in v or "\\" in v:
            raise ValueError(f"List file name must not contain a path separator: {v}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MONEY_MAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    project_dir: Path = Field(
        default=Path(".money_man_data"),
        description="Default project directory when none is given"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level of emitted log records"
    )
    log_json: bool = Field(
        default=True,
        description="Render log records as JSON (console rendering otherwise)"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the failing ones.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
