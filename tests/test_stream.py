import signal
import threading
from pathlib import Path

from moondeck.appmetadata import App, AppMetadata
from moondeck.heartbeat import Heartbeat
from moondeck.singleinstance import SingleInstanceGuard
from moondeck.stream import install_signal_handler, main


def test_signal_handler_calls_quit_and_resets_to_default():
    calls = []
    previous = install_signal_handler(lambda: calls.append("quit"))
    try:
        signal.raise_signal(signal.SIGINT)
        assert calls == ["quit"]
        assert signal.getsignal(signal.SIGINT) == signal.SIG_DFL
        assert signal.getsignal(signal.SIGTERM) not in (signal.SIG_DFL, signal.SIG_IGN)
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


def test_second_instance_exits_with_failure():
    guard = SingleInstanceGuard(App.STREAM.value)
    try:
        assert guard.try_to_run() is True
        assert main([]) == 1
    finally:
        guard.release()


def test_runs_until_heartbeat_is_terminated():
    previous_int = signal.getsignal(signal.SIGINT)

    def request_termination():
        with Heartbeat(App.STREAM.value) as remote:
            remote.terminate()

    timer = threading.Timer(0.6, request_termination)
    timer.start()
    try:
        assert main([]) == 0
    finally:
        timer.cancel()

    assert signal.getsignal(signal.SIGINT) == previous_int
    log_text = Path(AppMetadata(App.STREAM).log_path()).read_text(encoding="utf-8")
    assert "startup finished." in log_text
    assert "shutdown." in log_text

    guard = SingleInstanceGuard(App.STREAM.value)
    try:
        assert guard.try_to_run() is True
    finally:
        guard.release()