"""A minimal observer signal for notifying listeners of state changes."""

from __future__ import annotations

from typing import Any, Callable


class Signal:
    """Holds callbacks and calls them, in connection order, on emit."""

    def __init__(self) -> None:
        self._callbacks: list[Callable[..., Any]] = []

    def connect(self, callback: Callable[..., Any]) -> None:
        """Register ``callback`` to be called on every emit."""
        self._callbacks.append(callback)

    def disconnect(self, callback: Callable[..., Any]) -> None:
        """Remove one registration of ``callback``; raise ValueError if absent."""
        try:
            self._callbacks.remove(callback)
        except ValueError:
            raise ValueError("callback is not connected") from None

    def emit(self, *args: Any) -> None:
        """Call every connected callback with ``args``."""
        for callback in list(self._callbacks):
            callback(*args)

    def __len__(self) -> int:
        return len(self._callbacks)