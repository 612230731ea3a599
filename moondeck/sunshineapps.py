"""Reading the names of the applications configured in Sunshine."""

from __future__ import annotations

import json
import os
import sys

from moondeck.appmetadata import config_dir
from moondeck.logsettings import get_logger

_log = get_logger("os")

_REGISTRY_SUBKEY = r"Software\LizardByte\Sunshine"


def _registry_install_dir() -> str:
    import winreg

    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, _REGISTRY_SUBKEY) as key:
            value, _kind = winreg.QueryValueEx(key, "")
    except OSError:
        return ""
    return value if isinstance(value, str) else ""


def default_apps_path() -> str:
    """Where Sunshine keeps its apps file, or an empty string if unknown."""
    if sys.platform == "win32":
        install_dir = _registry_install_dir()
        if not install_dir:
            return ""
        return os.path.normpath(os.path.join(install_dir, "config", "apps.json"))
    return os.path.normpath(os.path.join(config_dir(), "sunshine", "apps.json"))


class SunshineApps:
    """Loads app names from a Sunshine apps file (the default location if none is given)."""

    def __init__(self, filepath: str | os.PathLike[str] | None) -> None:
        self.filepath = str(filepath) if filepath else ""

    def load(self) -> set[str] | None:
        """Return the app names, or None if the file cannot be read or parsed."""
        filepath = self.filepath or default_apps_path()
        _log.debug("selected filepath for Sunshine apps: %s", filepath)
        if not filepath:
            _log.warning("filepath for Sunshine apps is empty!")
            return None

        try:
            with open(filepath, "rb") as file:
                data = file.read()
        except OSError as error:
            _log.warning("file %s could not be opened! Reason: %s", filepath, error)
            return None

        try:
            document = json.loads(data)
        except (ValueError, UnicodeDecodeError) as error:
            _log.warning("failed to decode JSON data! Reason: %s | data: %r", error, data)
            return None

        _log.debug("Sunshine apps file content:\n%s", json.dumps(document, indent=4))
        apps = document.get("apps") if isinstance(document, dict) else None
        if not isinstance(apps, list):
            _log.warning("file %s could not be parsed!", filepath)
            return None

        if not apps:
            _log.debug("there are no Sunshine apps to parse.")
            return set()

        parsed: set[str] = set()
        for app in apps:
            if not isinstance(app, dict):
                _log.debug("skipping entry as it's not an object: %r", app)
                continue
            if "name" not in app:
                _log.debug('skipping entry as it does not contain "name" field: %r', app)
                continue
            name = app["name"]
            if not isinstance(name, str):
                _log.debug('skipping entry as the "name" field does not contain a string: %r', name)
                continue
            parsed.add(name)

        _log.debug("parsed the following Sunshine apps: %s", sorted(parsed))
        return parsed