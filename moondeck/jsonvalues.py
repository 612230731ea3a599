"""Typed, validated extraction of values from decoded JSON objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1

_UNDEFINED = object()


@dataclass(frozen=True)
class Nullable:
    """A field that was present and valid; ``value`` is None when it was JSON null."""

    value: Any


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_int(value: int | float) -> int:
    # Numbers that are not integral or do not fit a 32-bit int become 0.
    if isinstance(value, float):
        if not value.is_integer():
            return 0
        value = int(value)
    return value if INT_MIN <= value <= INT_MAX else 0


def convert_enum(value: object, enum_type: type[Enum]) -> Enum | None:
    """Member of ``enum_type`` whose name or value equals the string ``value``."""
    if not isinstance(value, str):
        return None
    try:
        return enum_type[value]
    except KeyError:
        pass
    try:
        return enum_type(value)
    except ValueError:
        return None


def convert_str(value: object) -> str | None:
    return value if isinstance(value, str) else None


def convert_bool(value: object) -> bool | None:
    return value if isinstance(value, bool) else None


def convert_int(value: object, minimum: int = INT_MIN, maximum: int = INT_MAX) -> int | None:
    """Integer within ``[minimum, maximum]``, or None."""
    if not _is_number(value):
        return None
    number = _to_int(value)
    return number if minimum <= number <= maximum else None


def convert_uint(value: object, minimum: int = 0, maximum: int = INT_MAX) -> int | None:
    """Non-negative integer within ``[minimum, maximum]``; bounds must fit a signed int."""
    if not (0 <= minimum <= INT_MAX and 0 <= maximum <= INT_MAX):
        return None
    return convert_int(value, minimum, maximum)


_BY_TYPE: dict[Any, Callable[..., Any]] = {
    str: convert_str,
    bool: convert_bool,
    int: convert_int,
}


def _converter_for(kind: Any) -> Callable[..., Any]:
    if isinstance(kind, type) and issubclass(kind, Enum):
        return lambda value, *args: convert_enum(value, kind)
    if isinstance(kind, type):
        try:
            return _BY_TYPE[kind]
        except KeyError:
            raise TypeError(f"unsupported value kind: {kind!r}") from None
    if callable(kind):
        return kind
    raise TypeError(f"unsupported value kind: {kind!r}")


def get_json_value(obj: Mapping[str, Any], field: str, kind: Any, *args: Any) -> Any:
    """Convert ``obj[field]`` to ``kind`` (str, bool, int, an Enum or a converter).

    Returns None if the field is missing or invalid.
    """
    return _converter_for(kind)(obj.get(field, _UNDEFINED), *args)


def get_nullable_json_value(obj: Mapping[str, Any], field: str, kind: Any, *args: Any) -> Nullable | None:
    """Like get_json_value, but an explicit JSON null yields ``Nullable(None)``."""
    if field in obj and obj[field] is None:
        return Nullable(None)
    converted = get_json_value(obj, field, kind, *args)
    return None if converted is None else Nullable(converted)