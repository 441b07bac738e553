"""Configuration Management with Pydantic.

This module implements the ``.prtrc`` configuration model using Pydantic for
parsing and validation of JSON/YAML configuration files with environment
variable overrides.
"""

import os
import threading
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field, field_validator

from prt.errors import ConfigNotFoundError

# Initialize logger
logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_FILES = (".prtrc.json", ".prtrc.yaml", ".prtrc.yml")
DEFAULT_ROADMAP_PATH = "prt.json"


class ProjectMetadata(BaseModel):
    """Descriptive project settings.

    Attributes:
        name: Project name
        description: Short project description
    """

    name: str = Field(default="", description="Project name")
    description: str = Field(default="", description="Project description")

    model_config = {"str_strip_whitespace": True}


class ValidationSettings(BaseModel):
    """Dependency validation settings.

    Attributes:
        strict_consistency: Treat blocks/depends-on asymmetry as an error
    """

    strict_consistency: bool = Field(
        default=False,
        description="Fail validation on blocks/depends-on asymmetry",
    )


class PrtConfig(BaseModel):
    """Main configuration combining all settings.

    Attributes:
        path: Path to the roadmap JSON file
        metadata: Project metadata
        validation: Dependency validation settings
        logging_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    path: str = Field(
        default=DEFAULT_ROADMAP_PATH,
        description="Roadmap file path",
        min_length=1,
    )
    metadata: ProjectMetadata = Field(default_factory=ProjectMetadata)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    logging_level: str = Field(
        default="INFO",
        description="Logging level",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )

    @field_validator("logging_level", mode="before")
    @classmethod
    def normalize_logging_level(cls, v: str) -> str:
        """Accept logging levels in any case.

        Args:
            v: The level value to normalize

        Returns:
            The upper-cased level
        """
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @classmethod
    def from_file(cls, path: str | Path) -> "PrtConfig":
        """Load configuration from a JSON or YAML file.

        Args:
            path: Path to the configuration file

        Returns:
            Parsed and validated PrtConfig instance

        Raises:
            ConfigNotFoundError: If configuration file doesn't exist
            ValueError: If configuration is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            raise ConfigNotFoundError(str(config_path))

        logger.info("loading_configuration", path=str(config_path))

        try:
            with config_path.open() as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.exception("config_parse_error", error=str(e), path=str(config_path))
            msg = f"Invalid configuration file {config_path}: {e}"
            raise ValueError(msg) from e

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            msg = f"Configuration file {config_path} must contain a mapping"
            raise ValueError(msg)

        # Apply environment variable overrides
        config_data = cls._apply_env_overrides(config_data)

        config = cls(**config_data)
        logger.info(
            "configuration_loaded",
            roadmap_path=config.path,
            logging_level=config.logging_level,
        )
        return config

    @classmethod
    def _apply_env_overrides(cls, config_data: dict) -> dict:
        """Apply environment variable overrides to configuration.

        Environment variables follow the pattern: PRT_<KEY>
        Example: PRT_ROADMAP_PATH, PRT_STRICT_CONSISTENCY

        Args:
            config_data: Base configuration dictionary from file

        Returns:
            Configuration dictionary with environment overrides applied
        """
        env_overrides = {
            ("path",): "PRT_ROADMAP_PATH",
            ("logging_level",): "PRT_LOGGING_LEVEL",
            ("validation", "strict_consistency"): "PRT_STRICT_CONSISTENCY",
        }

        for path, env_var in env_overrides.items():
            value = os.environ.get(env_var)
            if value is None:
                continue

            # Navigate to nested config section
            current = config_data
            for key in path[:-1]:
                if not isinstance(current.get(key), dict):
                    current[key] = {}
                current = current[key]

            if env_var.endswith("_CONSISTENCY"):
                value = value.lower() in ("true", "1", "yes")

            current[path[-1]] = value
            logger.debug(
                "env_override_applied",
                env_var=env_var,
                config_path=".".join(path),
            )

        return config_data


class ConfigManager:
    """Configuration manager using singleton pattern."""

    _instance: PrtConfig | None = None
    _init_lock: threading.Lock = threading.Lock()

    @classmethod
    def load_config(cls, config_path: str | Path | None = None) -> PrtConfig:
        """Load configuration from file.

        Args:
            config_path: Path to configuration file. If None, looks for .prtrc.json,
                        .prtrc.yaml or .prtrc.yml in current directory.

        Returns:
            Loaded PrtConfig instance

        Raises:
            ConfigNotFoundError: If config file not found
            ValueError: If config file is invalid
        """
        if config_path is None:
            for default_name in DEFAULT_CONFIG_FILES:
                default_path = Path(default_name)
                if default_path.exists():
                    config_path = default_path
                    break
            else:
                raise ConfigNotFoundError(DEFAULT_CONFIG_FILES[0])

        return PrtConfig.from_file(config_path)

    @classmethod
    def get_config(
        cls,
        config_path: str | Path | None = None,
        reload: bool = False,
    ) -> PrtConfig:
        """Get configuration instance (singleton pattern).

        Uses double-checked locking so concurrent callers load the file once.

        Args:
            config_path: Path to configuration file. Only used on first call or when reload=True.
            reload: If True, force reload configuration from file.

        Returns:
            PrtConfig instance
        """
        if cls._instance is not None and not reload:
            return cls._instance

        with cls._init_lock:
            if cls._instance is None or reload:
                cls._instance = cls.load_config(config_path)

            return cls._instance

    @classmethod
    def reset_config(cls) -> None:
        """Reset the configuration instance."""
        cls._instance = None


def load_config(config_path: str | Path | None = None) -> PrtConfig:
    """Load configuration from file."""
    return ConfigManager.load_config(config_path)


def get_config(config_path: str | Path | None = None, reload: bool = False) -> PrtConfig:
    """Get configuration instance (singleton pattern)."""
    return ConfigManager.get_config(config_path, reload)


def reset_config() -> None:
    """Reset the configuration instance."""
    ConfigManager.reset_config()


__all__ = [
    "ConfigManager",
    "PrtConfig",
    "ProjectMetadata",
    "ValidationSettings",
    "get_config",
    "load_config",
    "reset_config",
]
