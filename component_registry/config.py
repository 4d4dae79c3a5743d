"""
Configuration management for the component registry.

Settings come from dataclass defaults, an optional JSON file and
COMPONENT_REGISTRY_* environment variables (a .env file is honoured), in that
order of precedence.
"""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Any, Optional, List

from dotenv import load_dotenv

from component_registry.custom_logging import VALID_LEVELS, get_logger

logger = get_logger("config")

ENV_PREFIX = "COMPONENT_REGISTRY_"

# Mirrors DefaultLogger.LEVELS; kept here so config has no component imports.
LOGGER_LEVELS = ("silent", "error", "warn", "info", "verbose", "debug", "silly")


@dataclass
class LoggingConfig:
    """Settings for the registry's own diagnostic logging."""
    level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class DefaultLoggerConfig:
    """Settings for the built-in logger component."""
    name: str = "logger"
    level: str = "debug"
    source: str = "unknown"


@dataclass
class RegistryConfig:
    """Main configuration class for a component manager."""

    logging: LoggingConfig = None
    default_logger: DefaultLoggerConfig = None

    config_file: Optional[str] = None

    def __post_init__(self):
        """Initialize mutable defaults and validate."""
        if self.logging is None:
            self.logging = LoggingConfig()
        if self.default_logger is None:
            self.default_logger = DefaultLoggerConfig()

        self._validate_config()

    def _validate_config(self):
        """Validate configuration values."""
        validation_errors = []

        if str(self.logging.level).upper() not in VALID_LEVELS:
            validation_errors.append(f"Invalid log level: {self.logging.level}")

        level = self.default_logger.level
        if isinstance(level, str) and level.isdigit():
            level = int(level)
        if isinstance(level, int) and not isinstance(level, bool) and 0 <= level < len(LOGGER_LEVELS):
            self.default_logger.level = LOGGER_LEVELS[level]

        if not isinstance(self.default_logger.name, str) or not self.default_logger.name:
            validation_errors.append("Default logger name must be a non-empty string")
        if self.default_logger.level not in LOGGER_LEVELS:
            validation_errors.append(f"Invalid default logger level: {self.default_logger.level}")
        if not isinstance(self.default_logger.source, str):
            validation_errors.append("Default logger source must be a string")

        if validation_errors:
            for error in validation_errors:
                logger.error(f"Config validation error: {error}")
            raise ValueError(f"Configuration validation failed: {validation_errors}")


class ConfigManager:
    """Loads RegistryConfig from defaults, file and environment."""

    def __init__(self):
        self.logger = get_logger("config_manager")
        load_dotenv()
        self.logger.debug("Loaded environment variables from .env")

    def load_config(self,
                    config_file: Optional[str] = None,
                    env_prefix: str = ENV_PREFIX) -> RegistryConfig:
        """
        Load configuration from file and environment variables.

        Args:
            config_file: Path to JSON configuration file
            env_prefix: Prefix for environment variables

        Returns:
            RegistryConfig instance
        """
        self.logger.debug("Loading component registry configuration")

        config_dict = asdict(RegistryConfig())

        if config_file and Path(config_file).exists():
            self.logger.info(f"Loading config from file: {config_file}")
            with open(config_file, 'r') as f:
                file_config = json.load(f)
            config_dict = self._deep_merge(config_dict, file_config)
        elif config_file:
            self.logger.warning(f"Config file not found, using defaults: {config_file}")

        env_config = self._load_from_env(env_prefix)
        config_dict = self._deep_merge(config_dict, env_config)

        try:
            config = RegistryConfig(
                logging=LoggingConfig(**config_dict.get('logging', {})),
                default_logger=DefaultLoggerConfig(**config_dict.get('default_logger', {})),
                config_file=config_file,
            )
        except (TypeError, ValueError) as e:
            self.logger.error(f"Failed to load configuration: {e}")
            raise

        self.logger.debug("Configuration loaded successfully")
        return config

    def _load_from_env(self, prefix: str) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config = {}

        mappings = {
            f"{prefix}LOG_LEVEL": ["logging", "level"],
            f"{prefix}LOG_FILE": ["logging", "log_file"],
            f"{prefix}DEFAULT_LOGGER_NAME": ["default_logger", "name"],
            f"{prefix}DEFAULT_LOGGER_LEVEL": ["default_logger", "level"],
            f"{prefix}DEFAULT_LOGGER_SOURCE": ["default_logger", "source"],
        }

        for env_var, path in mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                self._set_nested_value(env_config, path, value)

        return env_config

    def _set_nested_value(self, dictionary: Dict[str, Any], path: List[str], value: Any):
        """Set a nested dictionary value using a path."""
        current = dictionary
        for key in path[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]
        current[path[-1]] = value

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def save_config(self, config: RegistryConfig, config_file: str):
        """Save configuration to JSON file."""
        self.logger.info(f"Saving configuration to: {config_file}")

        with open(config_file, 'w') as f:
            json.dump(asdict(config), f, indent=2)


# Global configuration instance
_config_instance: Optional[RegistryConfig] = None


def get_config() -> RegistryConfig:
    """Get the global configuration instance."""
    global _config_instance
    if _config_instance is None:
        _config_instance = ConfigManager().load_config()
    return _config_instance


def init_config(config_file: Optional[str] = None) -> RegistryConfig:
    """Initialize configuration with optional config file."""
    global _config_instance
    _config_instance = ConfigManager().load_config(config_file)
    return _config_instance


def reset_config():
    """Drop the global configuration so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
