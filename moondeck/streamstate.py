"""Tracking of the streaming helper process through its heartbeat."""

from __future__ import annotations

import threading

from moondeck.enums import StreamState
from moondeck.events import Signal
from moondeck.heartbeat import Heartbeat


class StreamStateHandler:
    """Follows the stream helper's heartbeat; ``state_changed`` fires on transitions."""

    def __init__(self, heartbeat_key: str) -> None:
        self.state_changed = Signal()
        self._state = StreamState.NOT_STREAMING
        self._lock = threading.Lock()
        self._heartbeat = Heartbeat(heartbeat_key)
        self._heartbeat.state_changed.connect(self._handle_process_state_changes)
        self._heartbeat.start_listening()

    def __enter__(self) -> StreamStateHandler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def state(self) -> StreamState:
        return self._state

    def end_stream(self) -> bool:
        """Ask a running stream to end; always succeeds."""
        with self._lock:
            changed = self._state is StreamState.STREAMING
            if changed:
                self._heartbeat.terminate()
                self._state = StreamState.STREAM_ENDING
        if changed:
            self.state_changed.emit()
        return True

    def close(self) -> None:
        self._heartbeat.close()

    def _handle_process_state_changes(self) -> None:
        alive = self._heartbeat.is_alive()
        with self._lock:
            if self._state is StreamState.NOT_STREAMING:
                changed = alive
                new_state = StreamState.STREAMING
            else:
                changed = not alive
                new_state = StreamState.NOT_STREAMING
            if changed:
                self._state = new_state
        if changed:
            self.state_changed.emit()