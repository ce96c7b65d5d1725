"""Configuration management for the state scanner."""

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Scanner settings.

    Values come from the environment (``STATESCAN_*``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="STATESCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    debug: bool = False
    json_logs: bool = False

    # Timeouts (seconds)
    scan_timeout: float = 30.0  # Whole-scan budget, partial results are discarded

    # Filesystem traversal
    max_search_depth: int = 3  # Depth for recursive manifest search (.NET projects)
    max_walk_files: int = 5000  # Cap on files visited by pattern/metrics walks

    # Output shaping
    important_dependency_limit: int = 10
    description_max_chars: int = 200
    max_features: int = 5

    # Optional YAML file with extra registry rows
    registry_file: Path | None = None

    @field_validator("scan_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Timeout must be positive."""
        if v <= 0:
            raise ValueError("scan_timeout must be greater than 0")
        return v

    @field_validator("max_search_depth", "max_walk_files", "important_dependency_limit", "max_features")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator("description_max_chars")
    @classmethod
    def validate_description_length(cls, v: int) -> int:
        """Descriptions shorter than a sentence are useless."""
        if v < 20:
            raise ValueError("description_max_chars must be at least 20")
        return v

    @field_validator("registry_file")
    @classmethod
    def validate_registry_file(cls, v: Path | None) -> Path | None:
        if v is not None:
            v = v.expanduser()
            if v.suffix.lower() not in (".yml", ".yaml"):
                raise ValueError("registry_file must be a .yml or .yaml file")
        return v


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings


def validate_settings(current: Settings | None = None) -> None:
    """Log warnings for settings that are valid but likely mistakes."""
    current = current or settings

    if current.registry_file is not None and not current.registry_file.exists():
        logger.warning(
            f"STATESCAN_REGISTRY_FILE points to {current.registry_file}, which does not exist. "
            "The built-in registries will be used."
        )

    if current.scan_timeout < 1:
        logger.warning(
            f"scan_timeout={current.scan_timeout}s is very short; "
            "large projects will time out and return nothing."
        )

    if current.json_logs and current.debug:
        logger.warning("json_logs is ignored while debug is enabled.")
