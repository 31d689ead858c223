"""Per-user directories for config and downloaded attachments."""

from __future__ import annotations

import os
import sys
from pathlib import Path

APP_NAME = "botin"


def _user_dir(
    override_env: str,
    windows: tuple[str, str],
    xdg: tuple[str, str],
) -> Path:
    """Resolve an app directory, letting ``override_env`` win everywhere."""
    override = os.environ.get(override_env)
    if override:
        return Path(override)

    home = Path.home()
    windows_env, windows_default = windows
    xdg_env, xdg_default = xdg
    if sys.platform == "win32":
        return Path(os.environ.get(windows_env) or home / "AppData" / windows_default) / APP_NAME
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / APP_NAME
    return Path(os.environ.get(xdg_env) or home / xdg_default) / APP_NAME


def get_config_dir() -> Path:
    return _user_dir("BOTIN_CONFIG_DIR", ("APPDATA", "Roaming"), ("XDG_CONFIG_HOME", ".config"))


def get_data_dir() -> Path:
    return _user_dir("BOTIN_DATA_DIR", ("LOCALAPPDATA", "Local"), ("XDG_DATA_HOME", ".local/share"))


def get_resources_dir() -> Path:
    """Directory holding the images bundled with the package."""
    return Path(__file__).resolve().parent.parent / "resources"
