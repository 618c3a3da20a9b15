"""
Check functions.

Each check evaluates exactly one condition. On success it returns None
with no side effects. On violation it builds a diagnostic ``details``
string and calls ``abort(message, details)``, which runs the registered
failure handlers and raises ``InvariantViolation``.

Every check takes the caller's ``message`` as its last argument.
"""

import os
import stat
from collections.abc import Hashable, Mapping, Sequence
from types import UnionType
from typing import Any, Union, get_args, get_origin

from must.refs import dereference, is_absent_reference, reference_type_name, type_name
from must.registry import abort

__all__ = [
    "not_nil",
    "no_error",
    "error",
    "equal",
    "not_equal",
    "true",
    "false",
    "not_zero",
    "greater_than",
    "less_than",
    "greater_or_equal",
    "less_or_equal",
    "not_empty",
    "empty",
    "contains",
    "not_contains",
    "slice_has",
    "slice_not_has",
    "is_nil",
    "is_not_nil",
    "file_exists",
    "dir_exists",
    "type_of",
    "type_of_not",
    "points_to_same",
    "points_to_not_same",
    "map_has",
    "map_not_has",
    "map_empty",
    "map_not_empty",
    "is_empty",
]


def _expected_type_name(expected_type: Any) -> str:
    if isinstance(expected_type, tuple):
        return " | ".join(_expected_type_name(t) for t in expected_type)
    if get_origin(expected_type) in (UnionType, Union):
        return " | ".join(_expected_type_name(t) for t in get_args(expected_type))
    return type_name(expected_type)


def _container_kind(value: Any) -> str | None:
    """'string', 'map' or 'sequence'; None for unsupported kinds."""
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "map"
    if isinstance(value, Sequence):
        return "sequence"
    return None


# ---------------------------------------------------------------------------
# Nilness and errors
# ---------------------------------------------------------------------------


def not_nil(value: Any, message: str) -> None:
    """
    Fail if ``value`` is None or a reference bound to no target.

    Unlike ``is_not_nil`` this looks through typed references: an unbound
    ``Ref``, a dead weak reference and a NULL ctypes pointer all fail.
    """
    if value is None:
        abort(message, "expected a non-None value, got None")
    if is_absent_reference(value):
        abort(
            message,
            f"expected a non-None value, got empty reference of type {reference_type_name(value)}",
        )


def no_error(err: BaseException | None, message: str) -> None:
    """Fail if ``err`` is an exception."""
    if err is not None:
        abort(message, f"expected no error, got: {err}")


def error(err: BaseException | None, message: str) -> None:
    """Fail if ``err`` is None."""
    if err is None:
        abort(message, "expected an error, got None")


def is_nil(value: Any, message: str) -> None:
    if value is not None:
        abort(message, "expected None, got non-None")


def is_not_nil(value: Any, message: str) -> None:
    if value is None:
        abort(message, "expected non-None, got None")


# ---------------------------------------------------------------------------
# Equality and booleans
# ---------------------------------------------------------------------------


def equal(expected: Any, value: Any, message: str) -> None:
    if expected != value:
        abort(message, f"expected {expected!r} to be equal to {value!r}")


def not_equal(expected: Any, value: Any, message: str) -> None:
    if expected == value:
        abort(message, f"expected {expected!r} to not be equal to {value!r}")


def true(value: bool, message: str) -> None:
    if not value:
        abort(message, "expected true, got false")


def false(value: bool, message: str) -> None:
    if value:
        abort(message, "expected false, got true")


# ---------------------------------------------------------------------------
# Numeric comparisons
# ---------------------------------------------------------------------------


def not_zero(value: Any, message: str) -> None:
    if value == 0:
        abort(message, "expected non-zero value, got zero")


def greater_than(value: Any, threshold: Any, message: str) -> None:
    if not value > threshold:
        abort(message, f"expected {value} to be greater than {threshold}")


def less_than(value: Any, threshold: Any, message: str) -> None:
    if not value < threshold:
        abort(message, f"expected {value} to be less than {threshold}")


def greater_or_equal(value: Any, threshold: Any, message: str) -> None:
    if not value >= threshold:
        abort(message, f"expected {value} to be greater than or equal to {threshold}")


def less_or_equal(value: Any, threshold: Any, message: str) -> None:
    if not value <= threshold:
        abort(message, f"expected {value} to be less than or equal to {threshold}")


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


def not_empty(value: Any, message: str) -> None:
    """Fail if a map, sequence or string is empty. Any other kind fails too."""
    kind = _container_kind(value)
    if kind is None:
        abort(message, f"expected a map, sequence or string, got {reference_type_name(value)}")
    if len(value) == 0:
        abort(message, f"expected a non-empty {kind}, got empty")


def empty(value: Any, message: str) -> None:
    """Fail if a map, sequence or string is non-empty. Any other kind fails too."""
    kind = _container_kind(value)
    if kind is None:
        abort(message, f"expected a map, sequence or string, got {reference_type_name(value)}")
    if len(value) != 0:
        abort(message, f"expected an empty {kind}, got non-empty")


def contains(seq: Sequence[Any], value: Any, message: str) -> None:
    if value not in seq:
        abort(message, f"expected sequence to contain {value!r}, but it does not")


def not_contains(seq: Sequence[Any], value: Any, message: str) -> None:
    if value in seq:
        abort(message, f"expected sequence to not contain {value!r}, but it does")


def slice_has(seq: Sequence[Any], value: Any, message: str) -> None:
    if value not in seq:
        abort(message, f"expected sequence to have {value!r}, but it does not")


def slice_not_has(seq: Sequence[Any], value: Any, message: str) -> None:
    if value in seq:
        abort(message, f"expected sequence to not have {value!r}, but it does")


def is_empty(seq: Sequence[Any], message: str) -> None:
    if len(seq) != 0:
        abort(message, "expected sequence to be empty, but it is not")


def map_has(mapping: Mapping[Hashable, Any], key: Hashable, message: str) -> None:
    if key not in mapping:
        abort(message, f"expected map to have key {key!r}, but it does not")


def map_not_has(mapping: Mapping[Hashable, Any], key: Hashable, message: str) -> None:
    if key in mapping:
        abort(message, f"expected map to not have key {key!r}, but it does")


def map_empty(mapping: Mapping[Hashable, Any], message: str) -> None:
    if len(mapping) != 0:
        abort(message, "expected map to be empty, but it is not")


def map_not_empty(mapping: Mapping[Hashable, Any], message: str) -> None:
    if len(mapping) == 0:
        abort(message, "expected map to be non-empty, but it is empty")


# ---------------------------------------------------------------------------
# Filesystem
# ---------------------------------------------------------------------------


def _stat(path: str | os.PathLike[str]) -> tuple[os.stat_result | None, OSError | None]:
    """``(info, None)``, ``(None, None)`` when nothing is there, or ``(None, error)``."""
    try:
        return os.stat(path), None
    except (FileNotFoundError, NotADirectoryError):
        return None, None
    except OSError as exc:
        return None, exc


def _stat_failure(exc: OSError) -> str:
    return f"{exc.strerror} (errno {exc.errno})"


def file_exists(path: str | os.PathLike[str], message: str) -> None:
    """Fail if nothing exists at ``path`` or it cannot be stat'ed. Any kind of entry passes."""
    info, exc = _stat(path)
    if exc is not None:
        abort(
            message,
            f"expected file {os.fspath(path)} to exist, but stat failed: {_stat_failure(exc)}",
        )
    if info is None:
        abort(message, f"expected file {os.fspath(path)} to exist, but it does not")


def dir_exists(path: str | os.PathLike[str], message: str) -> None:
    """Fail if ``path`` is missing, cannot be stat'ed or is not a directory."""
    info, exc = _stat(path)
    if exc is not None:
        abort(
            message,
            f"expected directory {os.fspath(path)} to exist, but stat failed: {_stat_failure(exc)}",
        )
    if info is None:
        abort(message, f"expected directory {os.fspath(path)} to exist, but it does not")
    if not stat.S_ISDIR(info.st_mode):
        abort(message, f"expected {os.fspath(path)} to be a directory, but it is not")


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


def type_of(value: Any, expected_type: type | UnionType | tuple[type, ...], message: str) -> None:
    if not isinstance(value, expected_type):
        abort(
            message,
            f"expected value of type {_expected_type_name(expected_type)}, "
            f"got {reference_type_name(value)}",
        )


def type_of_not(value: Any, expected_type: type | UnionType | tuple[type, ...], message: str) -> None:
    if isinstance(value, expected_type):
        abort(
            message,
            f"expected value not of type {_expected_type_name(expected_type)}, "
            f"got {reference_type_name(value)}",
        )


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------


def points_to_same(a: Any, b: Any, message: str) -> None:
    """Fail unless both references are present and their targets are equal."""
    a_present, a_value = dereference(a)
    b_present, b_value = dereference(b)
    if not (a_present and b_present):
        abort(message, "expected non-None references, got None")
    if a_value != b_value:
        abort(
            message,
            f"expected references to point to the same value, got {a_value!r} and {b_value!r}",
        )


def points_to_not_same(a: Any, b: Any, message: str) -> None:
    """Fail unless both references are present and their targets differ."""
    a_present, a_value = dereference(a)
    b_present, b_value = dereference(b)
    if not (a_present and b_present):
        abort(message, "expected non-None references, got None")
    if a_value == b_value:
        abort(
            message,
            f"expected references to point to different values, got {a_value!r} and {b_value!r}",
        )
