import pytest

from moondeck.enums import StreamState
from moondeck.jsonvalues import (
    INT_MAX,
    Nullable,
    convert_bool,
    convert_enum,
    convert_int,
    convert_str,
    convert_uint,
    get_json_value,
    get_nullable_json_value,
)


def test_convert_str():
    assert convert_str("abc") == "abc"
    assert convert_str(1) is None


def test_convert_bool_rejects_numbers():
    assert convert_bool(True) is True
    assert convert_bool(1) is None


def test_convert_int_accepts_integral_numbers():
    assert convert_int(42) == 42
    assert convert_int(7.0) == 7


def test_convert_int_rejects_bool_and_strings():
    assert convert_int(True) is None
    assert convert_int("5") is None


def test_convert_int_fractional_becomes_zero():
    assert convert_int(3.5) == 0
    assert convert_int(3.5, 1, 10) is None


def test_convert_int_range():
    assert convert_int(5, 0, 3) is None
    assert convert_int(3, 0, 3) == 3


def test_convert_int_out_of_int32_becomes_zero():
    assert convert_int(INT_MAX + 1) == 0


def test_convert_uint():
    assert convert_uint(10) == 10
    assert convert_uint(-1) is None
    assert convert_uint(5, 0, INT_MAX + 1) is None


def test_convert_enum_by_name_and_value():
    assert convert_enum("Streaming", StreamState) is StreamState.STREAMING
    assert convert_enum("STREAM_ENDING", StreamState) is StreamState.STREAM_ENDING
    assert convert_enum("nope", StreamState) is None
    assert convert_enum(1, StreamState) is None


def test_get_json_value_dispatch():
    obj = {"port": 80, "name": "x", "flag": False, "state": "NotStreaming"}
    assert get_json_value(obj, "port", int, 0, 100) == 80
    assert get_json_value(obj, "name", str) == "x"
    assert get_json_value(obj, "flag", bool) is False
    assert get_json_value(obj, "state", StreamState) is StreamState.NOT_STREAMING
    assert get_json_value(obj, "port", convert_uint) == 80


def test_get_json_value_missing_field():
    assert get_json_value({}, "port", int) is None


def test_get_json_value_unsupported_kind():
    with pytest.raises(TypeError):
        get_json_value({"a": 1}, "a", list)


def test_nullable_null_and_valid():
    obj = {"a": None, "b": 3, "c": "x"}
    assert get_nullable_json_value(obj, "a", int) == Nullable(None)
    assert get_nullable_json_value(obj, "b", int) == Nullable(3)
    assert get_nullable_json_value(obj, "c", int) is None
    assert get_nullable_json_value(obj, "missing", int) is None