# PathResolver.py
"""
Path resolution for the per-user configuration directory.

Encapsulates the platform conventions for where the configuration document,
OAuth2 files and logs live, so the rest of the application only deals with
a ResolvedPaths instance.
"""
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Mapping, Optional

PlatformFamily = Literal["windows", "macos", "unix"]

APP_NAME = "time-tracker"


@dataclass(frozen=True)
class ResolvedPaths:
    """Immutable container for all resolved application paths."""
    config_dir: Path
    config_file: Path
    credentials_file: Path
    token_file: Path
    logs_dir: Path
    platform: PlatformFamily


class PathResolver:
    """
    Resolves application paths for the current platform.

    Platforms:
    - windows: %APPDATA%\\time-tracker
    - macos: ~/Library/Application Support/time-tracker
    - unix: $XDG_CONFIG_HOME/time-tracker, falling back to ~/.config/time-tracker
    """

    def __init__(
        self,
        app_name: str = APP_NAME,
        platform_name: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        home: Optional[Path] = None
    ):
        self._app_name = app_name
        self._platform_name = platform_name if platform_name is not None else sys.platform
        self._environ = environ if environ is not None else os.environ
        self._home = home if home is not None else Path.home()
        self._platform = self._detect_platform()
        self._paths = self._resolve_paths()

    @property
    def paths(self) -> ResolvedPaths:
        """Returns resolved paths for current platform."""
        return self._paths

    @property
    def platform(self) -> PlatformFamily:
        """Returns detected platform family."""
        return self._platform

    def _detect_platform(self) -> PlatformFamily:
        if self._platform_name.startswith("win"):
            return "windows"
        if self._platform_name == "darwin":
            return "macos"
        return "unix"

    def _user_config_dir(self) -> Path:
        """Base directory for per-user configuration, without the app folder."""
        if self._platform == "windows":
            appdata = self._environ.get("APPDATA")
            if appdata:
                return Path(appdata)
            # APPDATA is always set on a regular Windows login
            return self._home / "AppData" / "Roaming"

        if self._platform == "macos":
            return self._home / "Library" / "Application Support"

        xdg = self._environ.get("XDG_CONFIG_HOME")
        # XDG spec: relative paths are invalid and must be ignored
        if xdg and Path(xdg).is_absolute():
            return Path(xdg)
        return self._home / ".config"

    def _resolve_paths(self) -> ResolvedPaths:
        config_dir = self._user_config_dir() / self._app_name

        return ResolvedPaths(
            config_dir=config_dir,
            config_file=config_dir / "config.json",
            credentials_file=config_dir / "credentials.json",
            token_file=config_dir / "token.json",
            logs_dir=config_dir / "logs",
            platform=self._platform,
        )

    def ensure_local_dir_structure(self) -> None:
        """Ensures the config and logs directories exist."""
        self._paths.config_dir.mkdir(parents=True, exist_ok=True)
        self._paths.logs_dir.mkdir(parents=True, exist_ok=True)
        logging.debug(f"PathResolver: using config dir {self._paths.config_dir}")
