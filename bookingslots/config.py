"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator


class EngineSettings(BaseModel):
    """Tuning knobs of the slot calculation."""
    grid_minutes: int = 15
    default_duration_minutes: int = 30
    min_lead_minutes: int = 0
    include_block_ends_in_gap_fill: bool = True

    @field_validator("grid_minutes")
    @classmethod
    def validate_grid(cls, value: int) -> int:
        """Ensure the grid step is positive and tiles an hour."""
        if value <= 0 or 60 % value != 0:
            raise ValueError(f"grid_minutes must be a positive divisor of 60, got {value}")
        return value

    @field_validator("default_duration_minutes")
    @classmethod
    def validate_default_duration(cls, value: int) -> int:
        """Ensure the fallback duration is positive."""
        if value <= 0:
            raise ValueError("default_duration_minutes must be greater than zero")
        return value

    @field_validator("min_lead_minutes")
    @classmethod
    def validate_lead(cls, value: int) -> int:
        """Lead time cannot be negative."""
        if value < 0:
            raise ValueError("min_lead_minutes must not be negative")
        return value


class AppConfig(BaseModel):
    """Application configuration."""
    api_base_url: str | None = None
    request_timeout_seconds: float = 10.0
    engine: EngineSettings = Field(default_factory=EngineSettings)

    @field_validator("api_base_url")
    @classmethod
    def normalize_base_url(cls, value: str | None) -> str | None:
        """Strip the trailing slash so paths can be appended."""
        if value is None:
            return None
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"api_base_url must be an http(s) URL, got {value!r}")
        return value

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout_seconds must be greater than zero")
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def load_or_default(cls, config_path: Path | None) -> "AppConfig":
        """Load the given file, or the default path if it exists, or fall back to defaults."""
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)
        return cls()


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
