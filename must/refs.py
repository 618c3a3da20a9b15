"""
Typed references and absent-reference detection.

A Python name is never "a pointer to nothing" -- it is either ``None`` or
bound to an object. Code that needs an explicit, typed, possibly-empty
reference uses ``Ref``. A few standard-library reference kinds can also
exist while pointing at nothing:

    - ``Ref(str)``                 typed reference bound to no target
    - ``weakref.ref(obj)``         once ``obj`` has been collected
    - ``ctypes.POINTER(T)()``      NULL pointer
    - ``ctypes.c_void_p(None)``    NULL void pointer

``not_nil`` and the ``points_to_*`` checks treat all of these as absent,
distinct from a plain ``None``.
"""

import ctypes
import weakref
from typing import Any, Generic, TypeVar

from must.exceptions import EmptyReferenceError

T = TypeVar("T")

_UNSET: Any = object()


def type_name(tp: type) -> str:
    """``int`` for builtins, ``module.Qualname`` otherwise."""
    if not hasattr(tp, "__qualname__"):
        return repr(tp)
    if tp.__module__ == "builtins":
        return tp.__qualname__
    return f"{tp.__module__}.{tp.__qualname__}"


class Ref(Generic[T]):
    """A reference to a value of ``target_type`` that may be bound to nothing."""

    __slots__ = ("_target_type", "_target")

    def __init__(self, target_type: type[T], target: T = _UNSET):
        self._target_type = target_type
        self._target = target

    @classmethod
    def to(cls, target: T) -> "Ref[T]":
        """Reference bound to ``target``, typed after it."""
        return cls(type(target), target)

    @property
    def target_type(self) -> type[T]:
        return self._target_type

    @property
    def is_bound(self) -> bool:
        return self._target is not _UNSET

    def get(self) -> T:
        if self._target is _UNSET:
            raise EmptyReferenceError(f"Ref[{type_name(self._target_type)}]")
        return self._target

    def bind(self, target: T) -> None:
        self._target = target

    def clear(self) -> None:
        self._target = _UNSET

    def __repr__(self) -> str:
        name = type_name(self._target_type)
        if self._target is _UNSET:
            return f"Ref[{name}](<unbound>)"
        return f"Ref[{name}]({self._target!r})"


def _is_null_ctypes_pointer(value: Any) -> bool:
    # ctypes pointer instances are falsy when NULL
    if isinstance(value, ctypes._Pointer):
        return not value
    if isinstance(value, (ctypes.c_void_p, ctypes.c_char_p, ctypes.c_wchar_p)):
        return value.value is None
    return False


def is_absent_reference(value: Any) -> bool:
    """True for a reference object that exists but points at nothing."""
    if isinstance(value, Ref):
        return not value.is_bound
    if isinstance(value, weakref.ref):
        return value() is None
    return _is_null_ctypes_pointer(value)


def dereference(value: Any) -> tuple[bool, Any]:
    """
    Follow ``value`` to the object it refers to.

    Returns ``(present, pointee)``. ``None`` and absent references are not
    present. Bound ``Ref`` and live weak references yield their target;
    ctypes pointers yield the pointed-to simple value. Any other object is
    its own pointee.
    """
    if value is None or is_absent_reference(value):
        return False, None
    if isinstance(value, Ref):
        return True, value.get()
    if isinstance(value, weakref.ref):
        target = value()
        return target is not None, target
    if isinstance(value, ctypes._Pointer):
        contents = value.contents
        return True, getattr(contents, "value", contents)
    if isinstance(value, (ctypes.c_void_p, ctypes.c_char_p, ctypes.c_wchar_p)):
        return True, value.value
    return True, value


def reference_type_name(value: Any) -> str:
    """Display name of a value's type for diagnostics (``Ref[int]``, ``LP_c_int``, ...)."""
    if isinstance(value, Ref):
        return f"Ref[{type_name(value.target_type)}]"
    return type_name(type(value))
