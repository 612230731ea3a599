"""Guard that lets only one process per key run at a time."""

from __future__ import annotations

import hashlib
import tempfile
from pathlib import Path

from filelock import FileLock, Timeout


def _key_hash(key: str, salt: str) -> str:
    return hashlib.sha1((key + salt).encode("utf-8")).hexdigest()


class SingleInstanceGuard:
    """Holds a system-wide lock for ``key`` while this instance runs."""

    def __init__(self, key: str) -> None:
        self.key = key
        name = _key_hash(key, "_shared_mem_key")
        self._lock = FileLock(str(Path(tempfile.gettempdir()) / f"{name}.instance.lock"))

    def __enter__(self) -> SingleInstanceGuard:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def is_another_running(self) -> bool:
        if self._lock.is_locked:
            return False
        try:
            self._lock.acquire(timeout=0)
        except Timeout:
            return True
        self._lock.release(force=True)
        return False

    def try_to_run(self) -> bool:
        """Claim the key; return False if another instance holds it."""
        if self.is_another_running():
            return False
        try:
            self._lock.acquire(timeout=0)
        except Timeout:
            self.release()
            return False
        return True

    def release(self) -> None:
        if self._lock.is_locked:
            self._lock.release(force=True)