"""
must - runtime invariant checks.

Assertion-style checks for conditions that must always hold in running
code:
- Nilness, including typed references bound to nothing
- Equality, booleans and numeric comparisons
- Emptiness and membership of maps, sequences and strings
- Filesystem existence and type identity

A failed check runs every registered failure handler, in registration
order, then raises ``InvariantViolation``. Violations are bugs, not
recoverable conditions.
"""

from must.checks import (
    contains,
    dir_exists,
    empty,
    equal,
    error,
    false,
    file_exists,
    greater_or_equal,
    greater_than,
    is_empty,
    is_nil,
    is_not_nil,
    less_or_equal,
    less_than,
    map_empty,
    map_has,
    map_not_empty,
    map_not_has,
    no_error,
    not_contains,
    not_empty,
    not_equal,
    not_nil,
    not_zero,
    points_to_not_same,
    points_to_same,
    slice_has,
    slice_not_has,
    true,
    type_of,
    type_of_not,
)
from must.exceptions import InvariantViolation, MustError
from must.refs import Ref
from must.registry import (
    FailureEvent,
    FailureHandler,
    FailureRegistry,
    abort,
    get_default_registry,
    register_failure_handler,
)

__version__ = "0.1.0"

__all__ = [
    "FailureEvent",
    "FailureHandler",
    "FailureRegistry",
    "InvariantViolation",
    "MustError",
    "Ref",
    "abort",
    "contains",
    "dir_exists",
    "empty",
    "equal",
    "error",
    "false",
    "file_exists",
    "get_default_registry",
    "greater_or_equal",
    "greater_than",
    "is_empty",
    "is_nil",
    "is_not_nil",
    "less_or_equal",
    "less_than",
    "map_empty",
    "map_has",
    "map_not_empty",
    "map_not_has",
    "no_error",
    "not_contains",
    "not_empty",
    "not_equal",
    "not_nil",
    "not_zero",
    "points_to_not_same",
    "points_to_same",
    "register_failure_handler",
    "slice_has",
    "slice_not_has",
    "true",
    "type_of",
    "type_of_not",
]
