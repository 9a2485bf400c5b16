"""Configuration management for prockiller.

Handles timeouts, update checks and logging settings from prockiller.toml.

PUBLIC API:
  - ConfigManager: Typed access to the [default] table
  - get_config_manager: Get or create the global config manager
  - DEFAULT_SCAN_TIMEOUT: Default deadline for scanning commands (seconds)
  - DEFAULT_KILL_TIMEOUT: Default deadline for kill commands (seconds)
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "prockiller.toml"

DEFAULT_SCAN_TIMEOUT = 10.0
DEFAULT_KILL_TIMEOUT = 5.0


def _find_config_file() -> Optional[Path]:
    """Find prockiller.toml in current or parent directories."""
    current = Path.cwd()

    for parent in [current] + list(current.parents):
        config_file = parent / CONFIG_FILENAME
        if config_file.exists():
            return config_file

    return None


def _load_config(path: Optional[Path] = None) -> dict:
    """Load raw configuration from file."""
    if path is None:
        path = _find_config_file()

    if path is None or not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Ignoring invalid config {path}: {e}")
        return {}


class ConfigManager:
    """Manages configuration for prockiller.

    Args:
        path: Explicit config file. Searches cwd and parents if None.
    """

    def __init__(self, path: Optional[Path] = None):
        self._config_file = path or _find_config_file()
        self.data = _load_config(self._config_file)
        default = self.data.get("default", {})
        self._default_config: dict[str, Any] = default if isinstance(default, dict) else {}

    @property
    def config_file(self) -> Optional[Path]:
        return self._config_file

    def _get(self, key: str, types: tuple[type, ...], default: Any) -> Any:
        value = self._default_config.get(key, default)
        # bool is an int subclass; never accept it for numeric settings
        if isinstance(value, bool) and bool not in types:
            value = None
        if value is None or not isinstance(value, types):
            if key in self._default_config:
                logger.warning(f"Config {key}={value!r} has wrong type, using {default!r}")
            return default
        return value

    def _get_timeout(self, key: str, default: float) -> float:
        value = float(self._get(key, (int, float), default))
        if value <= 0:
            logger.warning(f"Config {key}={value} must be positive, using {default}")
            return default
        return value

    @property
    def scan_timeout(self) -> float:
        """Deadline for scanning commands in seconds."""
        return self._get_timeout("scan_timeout", DEFAULT_SCAN_TIMEOUT)

    @property
    def kill_timeout(self) -> float:
        """Deadline for kill commands in seconds."""
        return self._get_timeout("kill_timeout", DEFAULT_KILL_TIMEOUT)

    @property
    def check_updates(self) -> bool:
        return self._get("check_updates", (bool,), True)

    @property
    def log_level(self) -> str:
        return self._get("log_level", (str,), "INFO").upper()

    @property
    def log_file(self) -> Optional[Path]:
        value = self._get("log_file", (str,), None)
        return Path(value).expanduser() if value else None


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
