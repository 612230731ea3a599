"""Logging categories, message format, log file and filter rules."""

from __future__ import annotations

import logging
import os
import re
import sys
import time
from dataclasses import dataclass
from pathlib import Path

CATEGORIES = {
    "buddy_main": "buddy.main",
    "stream_main": "buddy.stream",
    "server": "buddy.server",
    "shared": "buddy.shared",
    "utils": "buddy.utils",
    "os": "buddy.os",
}

_RULE_LEVELS = ("debug", "info", "warning", "critical")

_LEVEL_LABELS = (
    (logging.CRITICAL, "FATAL    "),
    (logging.ERROR, "CRITICAL "),
    (logging.WARNING, "WARNING  "),
    (logging.INFO, "INFO     "),
)


@dataclass(frozen=True)
class _Rule:
    pattern: str
    level: str | None
    enabled: bool


_rules: list[_Rule] = []


def _rule_level(levelno: int) -> str:
    if levelno < logging.INFO:
        return "debug"
    if levelno < logging.WARNING:
        return "info"
    if levelno < logging.ERROR:
        return "warning"
    return "critical"


def _matches(pattern: str, name: str) -> bool:
    if pattern == "*":
        return True
    starts, ends = pattern.startswith("*"), pattern.endswith("*")
    core = pattern.strip("*")
    if starts and ends:
        return core in name
    if starts:
        return name.endswith(core)
    if ends:
        return name.startswith(core)
    return name == pattern


def _category_enabled(name: str, levelno: int) -> bool:
    if levelno >= logging.CRITICAL:
        return True
    level = _rule_level(levelno)
    enabled = levelno >= logging.INFO
    for rule in _rules:
        if (rule.level is None or rule.level == level) and _matches(rule.pattern, name):
            enabled = rule.enabled
    return enabled


def _parse_rules(rules: str) -> list[_Rule]:
    parsed = []
    for line in re.split(r"[;\n]", rules):
        line = line.strip()
        if not line or line.startswith("["):
            continue
        key, sep, value = line.partition("=")
        value = value.strip().lower()
        if not sep or value not in ("true", "false"):
            continue
        key = key.strip()
        level = None
        prefix, dot, suffix = key.rpartition(".")
        if dot and suffix in _RULE_LEVELS:
            key, level = prefix, suffix
        parsed.append(_Rule(key, level, value == "true"))
    return parsed


class _CategoryFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return _category_enabled(record.name, record.levelno)


_FILTER = _CategoryFilter()


def get_logger(category: str) -> logging.Logger:
    """Logger for a category key (e.g. ``"server"``) or a full category name."""
    logger = logging.getLogger(CATEGORIES.get(category, category))
    if _FILTER not in logger.filters:
        logger.setLevel(logging.DEBUG)
        logger.addFilter(_FILTER)
    return logger


def error_string(code: int) -> str:
    """Human readable message for an operating-system error code."""
    return os.strerror(code)


class _MessageFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        stamp = time.strftime("%H:%M:%S", time.localtime(record.created))
        stamp += f".{int(record.msecs):03d}"
        label = next((text for level, text in _LEVEL_LABELS if record.levelno >= level), "DEBUG    ")
        category = "" if record.name == "root" else f"{record.name}: "
        message = record.getMessage()
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return f"[{stamp}] {label}{category}{message}"


class LogSettings:
    """Installs the message format and, optionally, a log file."""

    def __init__(self) -> None:
        self.filepath = ""
        self._handlers: list[logging.Handler] = []

    def init(self, filepath: str | os.PathLike[str] | None) -> None:
        """Install the handlers; with a path, the old log file is replaced."""
        self.close()
        if filepath:
            self.filepath = str(filepath)
            Path(filepath).unlink(missing_ok=True)
            handlers: list[logging.Handler] = [
                logging.StreamHandler(sys.stdout),
                logging.FileHandler(filepath, mode="a", encoding="utf-8"),
            ]
        else:
            handlers = [logging.StreamHandler(sys.stderr)]

        formatter = _MessageFormatter()
        root = logging.getLogger()
        for handler in handlers:
            handler.setFormatter(formatter)
            root.addHandler(handler)
        self._handlers = handlers

        if filepath:
            get_logger("utils").info("Log location: %s", self.filepath)

    def close(self) -> None:
        """Remove and close the handlers installed by init."""
        root = logging.getLogger()
        for handler in self._handlers:
            root.removeHandler(handler)
            handler.close()
        self._handlers = []

    def set_logging_rules(self, rules: str) -> None:
        """Replace the category filter rules; an empty string leaves them unchanged."""
        if rules:
            _rules[:] = _parse_rules(rules)


_instance = LogSettings()


def get_log_settings() -> LogSettings:
    """The process-wide LogSettings instance."""
    return _instance