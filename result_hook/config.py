"""Configuration loading for Result Hook.

Reads a JSON config file once at startup.  The resulting ``Config`` is
read-only for the lifetime of the process; there is no reload.
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"

DEFAULT_CONFIG: dict[str, Any] = {
    "username": "",
    "webhook": "",
    "watch_path": "",
    # ---- watching ----
    "create_delay_seconds": 2.0,  # wait after a file is created
    # ---- delivery ----
    "request_timeout_seconds": None,  # None = wait forever
    # ---- duplicate suppression ----
    "dedupe_max_entries": 1,  # 1 = only an immediate repeat is dropped
    "dedupe_window_seconds": None,  # None = entries never expire
    # ---- logging ----
    "log_level": "INFO",
    "log_file": "",  # blank = stderr only
    "max_log_size_mb": 10,
    "log_backup_count": 3,
}


class ConfigError(Exception):
    """Raised when the config file is missing, undecodable or holds bad values."""


# key -> whether null is allowed
_NUMERIC_KEYS: dict[str, bool] = {
    "create_delay_seconds": False,
    "request_timeout_seconds": True,
    "dedupe_max_entries": False,
    "dedupe_window_seconds": True,
    "max_log_size_mb": False,
    "log_backup_count": False,
}


def _check_numbers(stored: dict[str, Any]) -> None:
    """Raise ``ConfigError`` if a numeric setting holds a non-number."""
    for key, nullable in _NUMERIC_KEYS.items():
        if key not in stored:
            continue
        value = stored[key]
        if value is None and nullable:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"Config key '{key}' must be a number, got {value!r}")


def get_config_path() -> Path:
    """Return the path to the configuration file in the working directory."""
    return Path.cwd() / CONFIG_FILENAME


class Config:
    """Read-only configuration record backed by a JSON document."""

    def __init__(self, data: dict[str, Any] | None = None):
        """Build a config from *data*, filling defaults for missing keys.

        Raises ``ConfigError`` if a numeric setting is not a number.
        """
        stored = {k: v for k, v in (data or {}).items() if k in DEFAULT_CONFIG}
        _check_numbers(stored)
        self._data: dict[str, Any] = {**DEFAULT_CONFIG, **stored}

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Load configuration from *path* (default ``./config.json``).

        Raises ``ConfigError`` if the file is missing, unreadable, not
        valid JSON, or not a JSON object.  No partial config is accepted.
        """
        path = path or get_config_path()
        try:
            with open(path, encoding="utf-8") as fh:
                stored = json.load(fh)
        except FileNotFoundError as exc:
            raise ConfigError(f"Config file not found: {path}") from exc
        except OSError as exc:
            raise ConfigError(f"Could not read config {path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Malformed config {path}: {exc}") from exc
        if not isinstance(stored, dict):
            raise ConfigError(f"Config {path} must contain a JSON object")
        logger.info("Configuration loaded from %s", path)
        return cls(stored)

    # ---- required keys ----

    @property
    def username(self) -> str:
        """Return the configured player name."""
        return str(self._data["username"] or "")

    @property
    def webhook(self) -> str:
        """Return the destination webhook URL."""
        return str(self._data["webhook"] or "")

    @property
    def watch_path(self) -> str:
        """Return the screenshot folder to watch."""
        return str(self._data["watch_path"] or "")

    # ---- watching ----

    @property
    def create_delay(self) -> float:
        """Return seconds to wait after a file creation event."""
        return max(0.0, float(self._data["create_delay_seconds"]))

    # ---- delivery ----

    @property
    def request_timeout(self) -> float | None:
        """Return the webhook request timeout, or None for no timeout."""
        value = self._data["request_timeout_seconds"]
        return None if value is None else float(value)

    # ---- duplicate suppression ----

    @property
    def dedupe_max_entries(self) -> int:
        """Return how many recently sent paths are remembered (minimum 1)."""
        return max(1, int(self._data["dedupe_max_entries"]))

    @property
    def dedupe_window(self) -> float | None:
        """Return how long a sent path is remembered, or None for no expiry."""
        value = self._data["dedupe_window_seconds"]
        return None if value is None else float(value)

    # ---- logging ----

    @property
    def log_level(self) -> str:
        """Return the logging level name."""
        return str(self._data["log_level"] or "INFO")

    @property
    def log_file(self) -> str:
        """Return the rotating log file path (blank = none)."""
        return str(self._data["log_file"] or "")

    @property
    def max_log_size_mb(self) -> int:
        """Return the maximum log file size in MB before rotation."""
        return max(1, int(self._data["max_log_size_mb"]))

    @property
    def log_backup_count(self) -> int:
        """Return the number of rotated log backups to keep."""
        return max(0, int(self._data["log_backup_count"]))
