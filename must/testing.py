"""
Test-harness helpers. FOR TESTING ONLY.

Production code never traps ``InvariantViolation``; a test suite needs to,
and needs to start each test from a known handler list. These helpers
give it both without touching the registry's internals.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from must.exceptions import InvariantViolation
from must.registry import FailureRegistry, get_default_registry


@dataclass
class Recovered:
    """Outcome of a ``recover()`` block."""

    violation: InvariantViolation | None = None

    def __bool__(self) -> bool:
        return self.violation is not None

    @property
    def message(self) -> str | None:
        return self.violation.message if self.violation else None

    @property
    def details(self) -> str | None:
        return self.violation.details if self.violation else None

    @property
    def payload(self) -> str | None:
        return str(self.violation) if self.violation else None


@contextmanager
def recover() -> Iterator[Recovered]:
    """Trap an ``InvariantViolation`` raised inside the block."""
    result = Recovered()
    try:
        yield result
    except InvariantViolation as exc:
        result.violation = exc


@contextmanager
def isolated_registry(
    registry: FailureRegistry | None = None,
) -> Iterator[FailureRegistry]:
    """Run the block with an empty handler list; restore the previous one on exit."""
    if registry is None:
        registry = get_default_registry()
    previous = registry._swap(())
    try:
        yield registry
    finally:
        registry._swap(previous)


@dataclass
class RecordingHandler:
    """Failure handler that records each ``(message, details)`` call in order."""

    calls: list[tuple[str, str]] = field(default_factory=list)

    def __call__(self, message: str, details: str) -> None:
        self.calls.append((message, details))

    @property
    def call_count(self) -> int:
        return len(self.calls)
