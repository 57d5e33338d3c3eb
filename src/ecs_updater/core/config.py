"""Configuration management for the ECS image updater."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from ecs_updater.core.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = "~/.ecs-updater/config.yaml"


class AWSConfig(BaseModel):
    """AWS configuration."""

    region: str = "us-east-1"
    profile: str | None = None


class WaiterConfig(BaseModel):
    """Rollout stability polling configuration."""

    poll_interval_seconds: int = Field(default=5, ge=1)
    initial_delay_seconds: float = Field(default=2.0, ge=0)
    timeout_seconds: float | None = Field(default=None, ge=0)  # None polls until terminal


class RateLimitsConfig(BaseModel):
    """Rate limiting configuration."""

    ecs_api: int = Field(default=100, ge=1)  # requests per minute
    max_wait_seconds: float = 120.0


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "console"
    output: str = "stderr"


class UpdaterConfig(BaseModel):
    """Main updater configuration."""

    aws: AWSConfig = Field(default_factory=AWSConfig)
    waiter: WaiterConfig = Field(default_factory=WaiterConfig)
    rate_limits: RateLimitsConfig = Field(default_factory=RateLimitsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: str | Path) -> "UpdaterConfig":
        """Load configuration from YAML file.

        Args:
            path: Path to configuration file

        Returns:
            UpdaterConfig instance

        Raises:
            ConfigurationError: If file cannot be loaded or parsed
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        try:
            return cls(**(data or {}))
        except Exception as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def load(cls, path: str | Path | None = None) -> "UpdaterConfig":
        """Load from ``path``, or from the default location if it exists.

        An explicitly given path must exist; the default one is optional.
        """
        if path is not None:
            return cls.from_file(path)

        default_path = Path(DEFAULT_CONFIG_PATH).expanduser()
        if default_path.exists():
            return cls.from_file(default_path)
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
