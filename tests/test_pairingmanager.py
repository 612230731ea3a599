import base64

import pytest

from moondeck.clientids import ClientIds
from moondeck.pairingmanager import PairingManager


def _hash(client_id, pin):
    return base64.b64encode(f"{client_id}{pin}".encode()).decode()


@pytest.fixture
def client_ids(tmp_path):
    return ClientIds(tmp_path / "clients.json")


@pytest.fixture
def manager(client_ids):
    return PairingManager(client_ids)


def test_start_pairing_emits_request(manager):
    calls = []
    manager.user_input_requested.connect(lambda: calls.append(True))
    assert manager.start_pairing("deck", _hash("deck", 1234)) is True
    assert calls == [True]
    assert manager.is_pairing() is True
    assert manager.is_pairing("deck") is True
    assert manager.is_pairing("other") is False


def test_only_one_pairing_at_a_time(manager):
    assert manager.start_pairing("deck", "hash")
    assert manager.start_pairing("second", "hash") is False
    assert manager.is_pairing("second") is False


@pytest.mark.parametrize("client_id, hashed_id", [("", "hash"), ("deck", ""), ("", "")])
def test_start_pairing_rejects_empty_values(manager, client_id, hashed_id):
    assert manager.start_pairing(client_id, hashed_id) is False
    assert manager.is_pairing() is False


def test_start_pairing_rejects_already_paired(manager, client_ids):
    client_ids.add("deck")
    assert manager.is_paired("deck") is True
    assert manager.start_pairing("deck", "hash") is False


def test_finish_pairing_with_correct_pin_saves(manager, client_ids):
    manager.start_pairing("deck", _hash("deck", 4321))
    assert manager.finish_pairing(4321) is True
    assert manager.is_pairing() is False
    assert manager.is_paired("deck") is True

    reloaded = ClientIds(client_ids.filepath)
    reloaded.load()
    assert "deck" in reloaded


def test_finish_pairing_matches_known_encoding(manager):
    manager.start_pairing("client", "Y2xpZW50MTIzNA==")
    assert manager.finish_pairing(1234) is True


def test_finish_pairing_with_wrong_pin_keeps_pairing(manager):
    manager.start_pairing("deck", _hash("deck", 1111))
    assert manager.finish_pairing(2222) is False
    assert manager.is_pairing("deck") is True
    assert manager.is_paired("deck") is False


def test_finish_without_pairing(manager):
    assert manager.finish_pairing(1234) is False


def test_abort_pairing(manager):
    aborted = []
    manager.pairing_aborted.connect(lambda: aborted.append(True))
    assert manager.abort_pairing("deck") is True
    assert aborted == []

    manager.start_pairing("deck", "hash")
    assert manager.abort_pairing("other") is False
    assert manager.is_pairing("deck") is True

    assert manager.abort_pairing("deck") is True
    assert aborted == [True]
    assert manager.is_pairing() is False


def test_reject_pairing_clears_state(manager):
    manager.start_pairing("deck", "hash")
    manager.reject_pairing()
    assert manager.is_pairing() is False
    assert manager.start_pairing("other", "hash") is True