"""Pairing of new clients confirmed by a PIN entered on this machine."""

from __future__ import annotations

import base64
from dataclasses import dataclass

from moondeck.clientids import ClientIds
from moondeck.events import Signal
from moondeck.logsettings import get_logger

_log = get_logger("server")


@dataclass(frozen=True)
class _PairingData:
    client_id: str
    hashed_id: str


class PairingManager:
    """Tracks a single in-progress pairing and records successful ones.

    ``user_input_requested`` is emitted when a PIN should be asked for and
    ``pairing_aborted`` when the client abandons the pairing.
    """

    def __init__(self, client_ids: ClientIds) -> None:
        self.client_ids = client_ids
        self.user_input_requested = Signal()
        self.pairing_aborted = Signal()
        self._pairing: _PairingData | None = None

    def is_paired(self, client_id: str) -> bool:
        return client_id in self.client_ids

    def is_pairing(self, client_id: str | None = None) -> bool:
        """Whether any pairing, or the pairing of ``client_id``, is in progress."""
        if self._pairing is None:
            return False
        return client_id is None or self._pairing.client_id == client_id

    def start_pairing(self, client_id: str, hashed_id: str) -> bool:
        if self._pairing is not None:
            _log.warning(
                "Cannot start pairing as %s is currently being paired!", self._pairing.client_id
            )
            return False

        if not client_id or not hashed_id:
            _log.warning("Invalid id or hashed_id provided for pairing!")
            return False

        if client_id in self.client_ids:
            _log.warning("Id %s is already paired!", client_id)
            return False

        self._pairing = _PairingData(client_id, hashed_id)
        self.user_input_requested.emit()
        return True

    def abort_pairing(self, client_id: str) -> bool:
        if not self.is_pairing():
            return True

        if not self.is_pairing(client_id):
            _log.warning("Cannot abort pairing for other id than %s", client_id)
            return False

        _log.debug("Aborting pairing for %s", client_id)
        self.pairing_aborted.emit()
        self._pairing = None
        return True

    def finish_pairing(self, pin: int) -> bool:
        """Complete the pairing if ``pin`` matches; return whether it was recorded."""
        if self._pairing is None:
            _log.warning("Pairing is not in progress!")
            return False

        expected = base64.b64encode((self._pairing.client_id + str(pin)).encode("utf-8")).decode("ascii")
        if expected != self._pairing.hashed_id:
            _log.warning("Pairing code does not match.")
            return False

        self.client_ids.add(self._pairing.client_id)
        self.client_ids.save()
        self._pairing = None
        return True

    def reject_pairing(self) -> None:
        _log.debug("Pairing was rejected.")
        self._pairing = None