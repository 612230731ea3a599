import uuid

import pytest

from moondeck.singleinstance import SingleInstanceGuard


@pytest.fixture
def key():
    return f"test-guard-{uuid.uuid4()}"


def test_first_instance_runs(key):
    guard = SingleInstanceGuard(key)
    try:
        assert guard.try_to_run() is True
        assert guard.is_another_running() is False
    finally:
        guard.release()


def test_second_instance_is_refused(key):
    first = SingleInstanceGuard(key)
    second = SingleInstanceGuard(key)
    try:
        assert first.try_to_run() is True
        assert second.is_another_running() is True
        assert second.try_to_run() is False
    finally:
        first.release()
        second.release()


def test_release_lets_another_run(key):
    first = SingleInstanceGuard(key)
    second = SingleInstanceGuard(key)
    try:
        assert first.try_to_run() is True
        first.release()
        assert second.is_another_running() is False
        assert second.try_to_run() is True
        assert first.try_to_run() is False
    finally:
        first.release()
        second.release()


def test_different_keys_are_independent(key):
    with SingleInstanceGuard(key) as first, SingleInstanceGuard(key + "-other") as second:
        assert first.try_to_run() is True
        assert second.try_to_run() is True


def test_try_to_run_twice_is_harmless(key):
    with SingleInstanceGuard(key) as guard, SingleInstanceGuard(key) as other:
        assert guard.try_to_run() is True
        assert guard.try_to_run() is True
        guard.release()
        assert other.try_to_run() is True