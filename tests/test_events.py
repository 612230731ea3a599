import pytest

from moondeck.events import Signal


def test_emit_calls_callbacks_in_order_with_args():
    signal = Signal()
    calls = []
    signal.connect(lambda *a: calls.append(("first", a)))
    signal.connect(lambda *a: calls.append(("second", a)))
    signal.emit(1, "x")
    assert calls == [("first", (1, "x")), ("second", (1, "x"))]


def test_disconnect_stops_delivery():
    signal = Signal()
    calls = []

    def callback():
        calls.append(True)

    signal.connect(callback)
    signal.disconnect(callback)
    signal.emit()
    assert calls == []
    assert len(signal) == 0


def test_disconnect_unknown_raises():
    signal = Signal()
    with pytest.raises(ValueError):
        signal.disconnect(print)


def test_callback_disconnecting_during_emit_does_not_skip_others():
    signal = Signal()
    calls = []

    def first():
        calls.append("first")
        signal.disconnect(first)

    signal.connect(first)
    signal.connect(lambda: calls.append("second"))
    signal.emit()
    signal.emit()
    assert calls == ["first", "second", "second"]