"""Persisted application configuration.

The configuration is a small JSON object stored in the per-user config
directory. Reading never fails: a missing or broken file yields defaults.
Writing goes through a temporary file and an atomic rename so a crash
mid-write leaves the previous document intact.
"""
import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict

from timetracker.errors import ConfigReadError, ConfigWriteError

logger = logging.getLogger(__name__)

DEFAULT_HOTKEY = "ctrl+alt+q"
DEFAULT_SHEET_NAME = "Sheet1"


@dataclass
class Config:
    """User configuration shared by the popup, tray and configure dialog."""
    spreadsheet_id: str = ""
    sheet_name: str = DEFAULT_SHEET_NAME
    hotkey: str = DEFAULT_HOTKEY

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Build from a decoded JSON object, ignoring unknown or mistyped keys."""
        values = {}
        for item in fields(cls):
            value = data.get(item.name)
            if isinstance(value, str):
                values[item.name] = value
            elif value is not None:
                logger.warning(f"Config: ignoring non-string value for '{item.name}'")
        return cls(**values)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class ConfigStore:
    """
    Loads and saves Config at a fixed path.

    Args:
        config_file: Location of the JSON document
    """

    def __init__(self, config_file: Path):
        self._config_file = config_file

    @property
    def path(self) -> Path:
        return self._config_file

    def load(self) -> Config:
        """
        Return the persisted configuration, or defaults.

        Missing files and unreadable files both produce the default
        configuration; the latter is logged.
        """
        if not self._config_file.exists():
            logger.info(f"ConfigStore: no config at {self._config_file}, using defaults")
            return Config()

        try:
            data = self._read()
        except ConfigReadError as e:
            logger.warning(f"ConfigStore: {e}; using defaults")
            return Config()

        return Config.from_dict(data)

    def _read(self) -> Dict[str, Any]:
        try:
            text = self._config_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigReadError(f"cannot read {self._config_file}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigReadError(f"invalid JSON in {self._config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigReadError(f"{self._config_file} does not contain a JSON object")

        return data

    def save(self, config: Config) -> None:
        """
        Persist config, replacing the previous document atomically.

        Raises:
            ConfigWriteError: If the directory or file cannot be written
        """
        directory = self._config_file.parent
        payload = json.dumps(config.to_dict(), indent=2)

        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=".config-",
                suffix=".tmp",
                delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self._config_file)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ConfigWriteError(f"cannot write {self._config_file}: {e}") from e

        logger.info(f"ConfigStore: saved config to {self._config_file}")
