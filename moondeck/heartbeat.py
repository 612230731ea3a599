"""Liveness signalling between two processes through a small shared file."""

from __future__ import annotations

import hashlib
import struct
import tempfile
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator

from filelock import FileLock

from moondeck.events import Signal

HEARTBEAT_INTERVAL_MS = 250
HEARTBEAT_TIMEOUT_MS = 2000

_LAYOUT = struct.Struct("<qq")
_DAY_MS = 24 * 60 * 60 * 1000


class HeartbeatError(Exception):
    """The shared heartbeat block could not be used, or was used the wrong way."""


def _key_hash(key: str, salt: str) -> str:
    return hashlib.sha1((key + salt).encode("utf-8")).hexdigest()


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class _SharedBlock:
    """Two 64-bit fields (last beat in ms since epoch, terminate flag) in a locked file."""

    def __init__(self, name: str) -> None:
        self.path = Path(tempfile.gettempdir()) / f"{name}.heartbeat"
        self._file_lock = FileLock(str(self.path) + ".lock")
        self._mutex = threading.Lock()

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._mutex, self._file_lock:
            yield

    def is_valid(self) -> bool:
        return self.path.is_file() and self.path.stat().st_size == _LAYOUT.size

    def read(self) -> tuple[int, bool]:
        data = self.path.read_bytes()
        if len(data) != _LAYOUT.size:
            raise HeartbeatError(f"Shared heartbeat block {self.path} is corrupted")
        time_ms, terminate = _LAYOUT.unpack(data)
        return time_ms, bool(terminate)

    def write(self, time_ms: int, terminate: bool) -> None:
        self.path.write_bytes(_LAYOUT.pack(time_ms, int(terminate)))


class Heartbeat:
    """Either beats (periodically stamps the time) or listens for another's beat.

    ``should_terminate`` is emitted on the beating side when the listener asked
    it to stop; ``state_changed`` is emitted on the listening side when the
    beat appears or disappears.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        self.should_terminate = Signal()
        self.state_changed = Signal()
        self._block = _SharedBlock(_key_hash(key, "_heartbeat_key"))
        self._beating = False
        self._listening = False
        self._alive = False
        self._closed = False
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

        try:
            with self._block.locked():
                if not self._block.is_valid():
                    self._block.write(_now_ms() - _DAY_MS, False)
        except OSError as error:
            raise HeartbeatError(
                f"Failed to create shared memory for {key} ({self._block.path}). Reason: {error}"
            ) from error

    def __enter__(self) -> Heartbeat:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def start_beating(self) -> None:
        if self._listening:
            raise HeartbeatError("You cannot start heartbeating if you're a listener!")
        if not self._beating:
            self._beating = True
            if self._beat(fresh_start=True):
                self._start_timer(lambda: self._beat(fresh_start=False))

    def start_listening(self) -> None:
        if self._beating:
            raise HeartbeatError("You cannot start listening if you're the heartbeat!")
        if not self._listening:
            self._listening = True
            self._listen()
            self._start_timer(self._listen)

    def terminate(self) -> None:
        """Ask the beating side to terminate."""
        with self._block.locked():
            time_ms, _ = self._block.read()
            self._block.write(time_ms, True)

    def is_alive(self) -> bool:
        return self._beating or self._alive

    def close(self) -> None:
        """Stop the timer; a beating side leaves a stamp that expires quickly."""
        if self._closed:
            return
        self._closed = True
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        if self._beating:
            with self._block.locked():
                _, terminate = self._block.read()
                final = _now_ms() - HEARTBEAT_TIMEOUT_MS + HEARTBEAT_INTERVAL_MS
                self._block.write(final, terminate)

    def _start_timer(self, tick: Callable[[], bool]) -> None:
        self._thread = threading.Thread(target=self._run, args=(tick,), daemon=True)
        self._thread.start()

    def _run(self, tick: Callable[[], bool]) -> None:
        while not self._stop.wait(HEARTBEAT_INTERVAL_MS / 1000):
            if not tick():
                break

    def _beat(self, fresh_start: bool) -> bool:
        with self._block.locked():
            _, terminate = self._block.read()
            should_stop = not fresh_start and terminate
            if not should_stop:
                self._block.write(_now_ms(), False)
        if should_stop:
            self.should_terminate.emit()
            return False
        return True

    def _listen(self) -> bool:
        with self._block.locked():
            last_beat, _ = self._block.read()
        alive = _now_ms() - last_beat <= HEARTBEAT_TIMEOUT_MS
        if alive != self._alive:
            self._alive = alive
            self.state_changed.emit()
        return True