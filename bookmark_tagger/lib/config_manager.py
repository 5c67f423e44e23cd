"""Configuration manager with hierarchy: .env → environment → defaults.

Usage:
    from bookmark_tagger.lib.config_manager import config

    model = config.get("TAGGER_MODEL")
    timeout = config.get("TAGGER_REQUEST_TIMEOUT")  # coerced to float
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from bookmark_tagger.lib.defaults import DEFAULTS, get_default, is_sensitive

logger = logging.getLogger(__name__)


def _find_git_root(start_path: Optional[Path] = None) -> Path:
    """Walk up directory tree to find .git/ folder."""
    current = start_path or Path.cwd()
    current = current.resolve()

    while current != current.parent:
        if (current / ".git").exists():
            return current
        current = current.parent

    raise FileNotFoundError("No .git directory found in any parent directory")


def _coerce_type(value: str, default: Any) -> Any:
    """Coerce string value to match the type of the default.

    Args:
        value: String value from the environment
        default: Default value (determines target type)

    Returns:
        Value coerced to appropriate type
    """
    if default is None:
        return value

    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes", "on")
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            return default
    if isinstance(default, float):
        try:
            return float(value)
        except ValueError:
            return default
    return value


class ConfigManager:
    """Manages configuration with .env → environment → defaults hierarchy.

    The manager loads .env lazily, on first access, so importing the
    package never touches the filesystem.
    """

    def __init__(self, env_path: Optional[Path] = None):
        """Initialize the config manager.

        Args:
            env_path: Explicit .env file. If None, uses .env at the git root.
        """
        self._env_path = env_path
        self._env_loaded = False

    def _load_env(self) -> None:
        """Load .env file once."""
        if self._env_loaded:
            return
        self._env_loaded = True

        env_path = self._env_path
        if env_path is None:
            try:
                env_path = _find_git_root() / ".env"
            except FileNotFoundError:
                logger.debug("Could not find git root, .env not loaded")
                return

        if env_path.exists():
            # Real environment variables win over .env entries
            load_dotenv(dotenv_path=env_path, override=False)
            logger.debug(f"Loaded .env from {env_path}")
        else:
            logger.debug(f"No .env file found at {env_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value (.env / environment → defaults).

        Args:
            key: Configuration key
            default: Override default (uses DEFAULTS if not provided)

        Returns:
            Configuration value
        """
        self._load_env()

        env_value = os.getenv(key)
        if env_value is not None:
            default_val = default if default is not None else get_default(key)
            return _coerce_type(env_value, default_val)

        if default is not None:
            return default
        return get_default(key)

    def get_all(self, mask_sensitive: bool = True) -> dict[str, Any]:
        """Get all configuration values.

        Args:
            mask_sensitive: Replace non-empty secrets with "***"

        Returns:
            Dictionary of all config keys and their resolved values
        """
        result = {}
        for key in DEFAULTS:
            value = self.get(key)
            if mask_sensitive and is_sensitive(key) and value:
                value = "***"
            result[key] = value
        return result


config = ConfigManager()


def get_config(key: str, default: Any = None) -> Any:
    """Get a configuration value from the shared manager."""
    return config.get(key, default)
