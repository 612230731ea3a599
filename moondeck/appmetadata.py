"""Names and filesystem locations used by the applications."""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path

from moondeck.logsettings import get_logger

_log = get_logger("shared")


class App(Enum):
    """The applications in the suite."""

    BUDDY = "MoonDeckBuddy"
    STREAM = "MoonDeckStream"


def _is_windows() -> bool:
    return sys.platform == "win32"


def _clean(*parts: str) -> str:
    return os.path.normpath(os.path.join(*parts))


def config_dir() -> str:
    """Return the user configuration directory (XDG_CONFIG_HOME or ~/.config)."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config and Path(xdg_config).is_dir():
        return str(Path(xdg_config).absolute())
    return _clean(str(Path.home()), ".config")


def _application_file_path() -> str:
    if sys.argv and sys.argv[0]:
        return str(Path(sys.argv[0]).resolve())
    return sys.executable


class AppMetadata:
    """Application name and derived log, settings and autostart paths."""

    def __init__(self, app: App) -> None:
        self.app = app
        _log.debug("app_name() >> %s", self.app_name())
        _log.debug("log_path() >> %s", self.log_path())
        _log.debug("settings_path() >> %s", self.settings_path())
        _log.debug("autostart_path() >> %s", self.autostart_path())

    def app_name(self, app: App | None = None) -> str:
        """Name of ``app``, or of the current application when omitted."""
        return (app or self.app).value

    def log_dir(self) -> str:
        if _is_windows():
            return str(Path(_application_file_path()).parent)
        return "/tmp"

    def log_name(self) -> str:
        return self.app_name().lower() + ".log"

    def log_path(self) -> str:
        return _clean(self.log_dir(), self.log_name())

    def settings_dir(self) -> str:
        if _is_windows():
            return str(Path(_application_file_path()).parent)
        return _clean(config_dir(), self.app_name(App.BUDDY).lower())

    def settings_name(self) -> str:
        return "settings.json"

    def settings_path(self) -> str:
        return _clean(self.settings_dir(), self.settings_name())

    def autostart_dir(self) -> str:
        if _is_windows():
            appdata = os.environ.get("APPDATA") or str(Path.home() / "AppData" / "Roaming")
            return _clean(appdata, "Microsoft", "Windows", "Start Menu", "Programs", "Startup")
        return _clean(config_dir(), "autostart")

    def autostart_name(self) -> str:
        if _is_windows():
            return self.app_name() + ".lnk"
        return self.app_name().lower() + ".desktop"

    def autostart_path(self) -> str:
        return _clean(self.autostart_dir(), self.autostart_name())

    def autostart_exec(self) -> str:
        """Path of the executable an autostart entry should launch."""
        if not _is_windows():
            app_image = os.environ.get("APPIMAGE", "")
            if app_image:
                return app_image
        return _application_file_path()