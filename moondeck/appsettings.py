"""Application settings stored as a JSON object, with defaults written on demand."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any

from moondeck.enums import SslProtocol
from moondeck.logsettings import get_logger

_log = get_logger("utils")

DEFAULT_PORT = 59999
_PORT_MIN = 0
_PORT_MAX = 65535
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1
_COMMON_ENTRIES = 9
_LINUX_ENTRIES = 2


class SettingsError(Exception):
    """The settings file could not be read, decoded, validated or written."""


def _is_linux() -> bool:
    return sys.platform.startswith("linux")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _port_value(value: int | float) -> int:
    # Non-integral numbers and numbers outside the int range are treated as -1.
    if isinstance(value, float):
        if not value.is_integer():
            return -1
        value = int(value)
    return value if _INT_MIN <= value <= _INT_MAX else -1


class AppSettings:
    """Settings loaded from ``filepath``.

    If the file is missing, empty or incomplete, a complete file holding the
    current values (defaults for anything not read) is written and read back.
    """

    def __init__(self, filepath: str | os.PathLike[str]) -> None:
        self.filepath = Path(filepath)
        self.port: int = DEFAULT_PORT
        self.logging_rules = ""
        self.handled_displays: set[str] = set()
        self.sunshine_apps_filepath = ""
        self.prefer_hibernation = False
        self.ssl_protocol = SslProtocol.SECURE_PROTOCOLS
        self.force_big_picture = True
        self.close_steam_before_sleep = True
        self.registry_file_override = ""
        self.steam_binary_override = ""
        self.mac_address_override = ""

        if not self._parse_settings_file():
            _log.info("Saving default settings to %s", self.filepath)
            self._save_default_file()
            if not self._parse_settings_file():
                raise SettingsError(f'Failed to parse "{self.filepath}"!')

    def _read_document(self) -> Any:
        try:
            data = self.filepath.read_bytes()
        except OSError as error:
            raise SettingsError(f'File exists, but could not be opened: "{self.filepath}"') from error
        try:
            return json.loads(data)
        except (ValueError, UnicodeDecodeError) as error:
            raise SettingsError(f"Failed to decode JSON data! Reason: {error}. Read data: {data!r}") from error

    def _parse_settings_file(self) -> bool:
        if not self.filepath.exists():
            return False

        obj = self._read_document()
        if not isinstance(obj, dict) or not obj:
            return False

        expected = _COMMON_ENTRIES + (_LINUX_ENTRIES if _is_linux() else 0)
        valid = 0

        port = obj.get("port")
        if _is_number(port):
            number = _port_value(port)
            if not _PORT_MIN <= number <= _PORT_MAX:
                raise SettingsError(f"Port value ({number}) is out of range!")
            self.port = number
            valid += 1

        logging_rules = obj.get("logging_rules")
        if isinstance(logging_rules, str):
            self.logging_rules = logging_rules
            valid += 1

        displays = obj.get("handled_displays")
        if isinstance(displays, list):
            self.handled_displays.clear()
            skipped = False
            for entry in displays:
                name = entry if isinstance(entry, str) else ""
                if not name or name in self.logging_rules:
                    skipped = True
                    continue
                self.handled_displays.add(name)
            if not skipped:
                valid += 1

        sunshine_apps = obj.get("sunshine_apps_filepath")
        if isinstance(sunshine_apps, str):
            self.sunshine_apps_filepath = sunshine_apps
            valid += 1

        prefer_hibernation = obj.get("prefer_hibernation")
        if isinstance(prefer_hibernation, bool):
            self.prefer_hibernation = prefer_hibernation
            valid += 1

        protocol = SslProtocol.from_name(obj.get("ssl_protocol"))
        if protocol is not None:
            _log.debug("Mapped %s to %s", protocol.value, protocol)
            self.ssl_protocol = protocol
            valid += 1

        force_big_picture = obj.get("force_big_picture")
        if isinstance(force_big_picture, bool):
            self.force_big_picture = force_big_picture
            valid += 1

        close_steam = obj.get("close_steam_before_sleep")
        if isinstance(close_steam, bool):
            self.close_steam_before_sleep = close_steam
            valid += 1

        mac_address = obj.get("mac_address_override")
        if isinstance(mac_address, str):
            self.mac_address_override = mac_address.strip()
            valid += 1

        if _is_linux():
            registry_file = obj.get("registry_file_override")
            if isinstance(registry_file, str):
                self.registry_file_override = registry_file
                valid += 1

            steam_binary = obj.get("steam_binary_override")
            if isinstance(steam_binary, str):
                self.steam_binary_override = steam_binary
                valid += 1

        return valid == expected

    def _save_default_file(self) -> None:
        obj: dict[str, Any] = {
            "port": self.port,
            "logging_rules": self.logging_rules,
            "handled_displays": sorted(self.handled_displays),
            "sunshine_apps_filepath": self.sunshine_apps_filepath,
            "prefer_hibernation": self.prefer_hibernation,
            "ssl_protocol": SslProtocol.SECURE_PROTOCOLS.value,
            "force_big_picture": self.force_big_picture,
            "close_steam_before_sleep": self.close_steam_before_sleep,
            "mac_address_override": self.mac_address_override,
        }
        if _is_linux():
            obj["registry_file_override"] = self.registry_file_override
            obj["steam_binary_override"] = self.steam_binary_override

        if not self.filepath.exists():
            try:
                self.filepath.absolute().parent.mkdir(parents=True, exist_ok=True)
            except OSError as error:
                raise SettingsError(f'Failed at mkpath: "{self.filepath}".') from error

        text = json.dumps(obj, indent=4, sort_keys=True) + "\n"
        try:
            self.filepath.write_text(text, encoding="utf-8")
        except OSError as error:
            raise SettingsError(f'File could not be opened for writing: "{self.filepath}".') from error