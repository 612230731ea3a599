"""Entry point of the stream helper that keeps a heartbeat while it runs."""

from __future__ import annotations

import argparse
import signal
import threading
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Callable, Sequence

from moondeck.appmetadata import App, AppMetadata
from moondeck.heartbeat import Heartbeat
from moondeck.logsettings import get_log_settings, get_logger
from moondeck.singleinstance import SingleInstanceGuard

_log = get_logger("stream_main")

_QUIT_POLL_SECONDS = 0.5


def _version() -> str:
    try:
        return version("moondeck")
    except PackageNotFoundError:
        return "unknown"


def install_signal_handler(quit_callback: Callable[[], Any]) -> dict[int, Any]:
    """Call ``quit_callback`` once on SIGINT or SIGTERM; return the previous handlers."""

    def handler(signum: int, _frame: object) -> None:
        signal.signal(signum, signal.SIG_DFL)
        quit_callback()

    return {signum: signal.signal(signum, handler) for signum in (signal.SIGINT, signal.SIGTERM)}


def main(argv: Sequence[str] | None = None) -> int:
    """Run the stream helper until asked to terminate; return the exit code."""
    app_version = _version()
    parser = argparse.ArgumentParser(prog=App.STREAM.value, description="Stream helper heartbeat.")
    parser.add_argument("--version", action="version", version=app_version)
    parser.parse_args(argv)

    meta = AppMetadata(App.STREAM)
    app_name = meta.app_name()
    guard = SingleInstanceGuard(app_name)
    if not guard.try_to_run():
        _log.warning("another instance of %s is already running!", app_name)
        return 1

    quit_event = threading.Event()
    previous_handlers = install_signal_handler(quit_event.set)
    log_settings = get_log_settings()
    try:
        log_settings.init(meta.log_path())
        _log.info("startup. Version: %s", app_version)

        with Heartbeat(app_name) as heartbeat:
            heartbeat.should_terminate.connect(quit_event.set)
            heartbeat.start_beating()
            _log.info("startup finished.")
            while not quit_event.wait(_QUIT_POLL_SECONDS):
                pass
            _log.info("shutdown.")
    finally:
        for signum, previous in previous_handlers.items():
            if previous is not None:
                signal.signal(signum, previous)
        log_settings.close()
        guard.release()
    return 0