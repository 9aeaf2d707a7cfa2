"""
Configuration management for the package verifier.

Loads settings from a YAML file, deep-merges them over built-in defaults,
and provides convenient access with dot notation.
"""

import os
import shlex
import sys
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from .errors import ConfigError

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Config:
    """Configuration manager for the package verifier."""

    # Default configuration
    DEFAULTS = {
        "archive": {
            "suffix": ".tgz",
            "package_dir": "package",
            "manifest": "package.json",
            "required_files": [
                "package.json",
                "arith/__init__.py",
                "arith/operations.py",
            ],
            "manifest_fields": ["name", "version", "main"],
        },
        "scratch": {
            "dir_name": "temp-verify",
        },
        "execution": {
            "test_command": None,
            "test_timeout": None,
            "extract_command": ["tar", "-xzf", "{archive}", "-C", "{dest}"],
        },
        "logging": {
            "level": "INFO",
            "format": "%(message)s",
            "file": None,
        },
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file.
                        If None, standard locations are searched.

        Raises:
            ConfigError: If an explicit path is missing, a file is invalid,
                or a value fails validation
        """
        self.source: Optional[Path] = None
        self._config = self._load_config(config_path)
        self.validate()

    def _load_config(self, config_path: Optional[str]) -> Dict[str, Any]:
        """Load configuration from YAML file with fallback to defaults."""
        if config_path is not None:
            path = Path(config_path).expanduser()
            if not path.is_file():
                raise ConfigError(f"Config file not found: {path}")
        else:
            path = None
            possible_paths = [
                Path("pkgverify.yaml"),
                Path("config") / "pkgverify.yaml",
                Path.home() / ".config" / "pkgverify" / "config.yaml",
            ]
            for candidate in possible_paths:
                if candidate.is_file():
                    path = candidate
                    break

        if path is None:
            logger.debug("No config file found, using defaults")
            return self._deep_merge(self.DEFAULTS, {})

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Config file {path} must contain a mapping at top level")

        self.source = path
        logger.debug(f"Loaded configuration from: {path}")
        return self._deep_merge(self.DEFAULTS, config)

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dictionaries without mutating either."""
        result = {}
        for key, value in base.items():
            if isinstance(value, dict):
                value = self._deep_merge(value, {})
            elif isinstance(value, list):
                value = list(value)
            result[key] = value
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path (e.g., "archive.suffix")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value = self._config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default
        return value

    def set(self, key_path: str, value: Any):
        """
        Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path (e.g., "archive.suffix")
            value: Value to set
        """
        keys = key_path.split(".")
        config = self._config
        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]
        config[keys[-1]] = value

    @property
    def archive_suffix(self) -> str:
        """Get the file-name suffix that identifies an archive."""
        return self.get("archive.suffix", ".tgz")

    @property
    def package_dir(self) -> str:
        """Get the subdirectory the archive unpacks into."""
        return self.get("archive.package_dir", "package")

    @property
    def manifest_name(self) -> str:
        """Get the manifest file name, relative to the package directory."""
        return self.get("archive.manifest", "package.json")

    @property
    def required_files(self) -> List[str]:
        """Get the ordered list of files every archive must contain."""
        return list(self.get("archive.required_files", []))

    @property
    def manifest_fields(self) -> List[str]:
        """Get the manifest fields reported after a successful parse."""
        return list(self.get("archive.manifest_fields", []))

    @property
    def scratch_dir_name(self) -> str:
        """Get the scratch directory name."""
        return self.get("scratch.dir_name", "temp-verify")

    @property
    def extract_command(self) -> List[str]:
        """Get the extraction command template."""
        return self._as_argv(self.get("execution.extract_command"))

    @property
    def test_command(self) -> List[str]:
        """
        Get the embedded test command.

        Falls back to running pytest with the current interpreter.
        """
        command = self.get("execution.test_command")
        if not command:
            return [sys.executable, "-m", "pytest", "-q"]
        return self._as_argv(command)

    @property
    def test_timeout(self) -> Optional[float]:
        """Get the embedded test timeout in seconds (None = no timeout)."""
        timeout = self.get("execution.test_timeout")
        if timeout is None:
            return None
        if isinstance(timeout, bool):
            raise ConfigError(f"Invalid execution.test_timeout: {timeout!r}")
        try:
            seconds = float(timeout)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid execution.test_timeout: {timeout!r}") from e
        if seconds <= 0:
            raise ConfigError(f"execution.test_timeout must be positive, got {timeout!r}")
        return seconds

    @property
    def log_level(self) -> str:
        level = str(self.get("logging.level", "INFO")).upper()
        if level not in LOG_LEVELS:
            raise ConfigError(
                f"Invalid logging.level {level!r}, expected one of {', '.join(LOG_LEVELS)}"
            )
        return level

    @property
    def log_format(self) -> str:
        return self.get("logging.format", "%(message)s")

    @property
    def log_file(self) -> Optional[str]:
        log_file = self.get("logging.file")
        return os.path.expanduser(log_file) if log_file else None

    def validate(self) -> None:
        """
        Check every value the verifier reads lazily.

        Raises:
            ConfigError: For the first invalid value
        """
        self.extract_command
        self.test_command
        self.test_timeout
        self.log_level

    @staticmethod
    def _as_argv(command: Any) -> List[str]:
        argv: List[str] = []
        if isinstance(command, str):
            try:
                argv = shlex.split(command)
            except ValueError as e:
                raise ConfigError(f"Invalid command in configuration: {command!r} ({e})") from e
        elif isinstance(command, (list, tuple)):
            argv = [str(part) for part in command]
        if not argv:
            raise ConfigError(f"Invalid command in configuration: {command!r}")
        return argv

    def to_dict(self) -> Dict[str, Any]:
        """Get configuration as dictionary."""
        return self._deep_merge(self._config, {})

    def __repr__(self) -> str:
        """String representation."""
        origin = self.source or "defaults"
        return f"Config({len(self._config)} sections loaded from {origin})"
