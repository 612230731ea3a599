"""Persistent set of client ids that completed pairing."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Iterator

from moondeck.logsettings import get_logger

_log = get_logger("server")


class ClientIdsError(Exception):
    """The client ids file could not be read, decoded or written."""


class ClientIds:
    """Set of paired client ids backed by a JSON array on disk."""

    def __init__(self, filepath: str | os.PathLike[str]) -> None:
        self.filepath = Path(filepath)
        self._ids: set[str] = set()

    def load(self) -> None:
        """Replace the ids in memory with those from the file, if it exists."""
        self._ids.clear()

        if not self.filepath.exists():
            return

        try:
            data = self.filepath.read_bytes()
        except OSError as error:
            raise ClientIdsError(f'File exists, but could not be opened: "{self.filepath}"') from error

        try:
            document = json.loads(data)
        except (ValueError, UnicodeDecodeError) as error:
            raise ClientIdsError(
                f"Failed to decode JSON data! Reason: {error}. Read data: {data!r}"
            ) from error

        if document == [] or document == {}:
            return

        if not isinstance(document, list):
            raise ClientIdsError("Client Ids file contains invalid JSON data!")

        valid = {entry for entry in document if isinstance(entry, str) and entry}
        if len(valid) != len(document) and any(not isinstance(e, str) or not e for e in document):
            _log.warning("Client Ids file contained ids that were skipped!")
        self._ids.update(valid)

    def save(self) -> None:
        """Write the ids, sorted, as an indented JSON array."""
        if not self.filepath.exists():
            try:
                self.filepath.absolute().parent.mkdir(parents=True, exist_ok=True)
            except OSError as error:
                raise ClientIdsError(f'Failed at mkpath: "{self.filepath}".') from error

        text = json.dumps(sorted(self._ids), indent=4) + "\n"
        try:
            self.filepath.write_text(text, encoding="utf-8")
        except OSError as error:
            raise ClientIdsError(f'File could not be opened for writing: "{self.filepath}".') from error

        _log.info("Finished saving: %s", self.filepath)

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def add(self, client_id: str) -> None:
        self._ids.add(client_id)

    def remove(self, client_id: str) -> None:
        """Forget ``client_id``; absent ids are ignored."""
        self._ids.discard(client_id)