"""
FailureRegistry -- Ordered failure handlers and the abort path.

Responsibility:
    Holds the process-wide sequence of failure handlers and provides the
    single choke point through which every check-function violation is
    reported before the current execution path is terminated.

Architecture position:
    Kernel -- zero dependencies besides the standard library and
    ``must.exceptions`` / ``must.logging_config``.

Invariants enforced:
    - Handlers are append-only: never reordered, never removed (tests
      may swap the list through ``must.testing``).
    - Every violation invokes each handler once, in registration order,
      then raises ``InvariantViolation``.

Concurrency:
    Registration builds a new tuple under ``_lock`` and rebinds it.
    ``abort`` reads the current tuple once without the lock and iterates
    that snapshot, so a handler registered while a dispatch is running is
    only seen by later dispatches.

Failure modes:
    - A handler that raises propagates its own exception. The remaining
      handlers are skipped and ``InvariantViolation`` is not raised.
"""

import threading
from dataclasses import dataclass
from typing import Callable, NoReturn

from must.exceptions import InvariantViolation
from must.logging_config import LogContext, get_logger

logger = get_logger("registry")

FailureHandler = Callable[[str, str], None]
"""Signature of a failure handler: ``handler(message, details)``."""


@dataclass(frozen=True)
class FailureEvent:
    """Transient (message, details) pair built at the point of violation."""

    message: str
    details: str

    @property
    def payload(self) -> str:
        return f"{self.message}: {self.details}"


def _handler_name(handler: FailureHandler) -> str:
    module = getattr(handler, "__module__", None)
    name = getattr(handler, "__qualname__", None) or type(handler).__qualname__
    return f"{module}.{name}" if module else name


class FailureRegistry:
    """Append-only, thread-safe registry of failure handlers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: tuple[FailureHandler, ...] = ()

    def __len__(self) -> int:
        return len(self._handlers)

    @property
    def handlers(self) -> tuple[FailureHandler, ...]:
        """Current handler snapshot, in registration order."""
        return self._handlers

    def register(self, handler: FailureHandler) -> None:
        """Append ``handler``; it runs on every later violation."""
        with self._lock:
            self._handlers = self._handlers + (handler,)
            count = len(self._handlers)

        logger.debug(
            "failure_handler_registered",
            extra={"handler": _handler_name(handler), "handler_count": count},
        )

    def abort(self, message: str, details: str) -> NoReturn:
        """Run every handler with ``(message, details)``, then raise."""
        event = FailureEvent(message=message, details=details)
        handlers = self._handlers

        with LogContext.bind(component="registry"):
            logger.error(
                "invariant_violated",
                extra={
                    "invariant_message": event.message,
                    "details": event.details,
                    "handler_count": len(handlers),
                },
            )

            for handler in handlers:
                handler(event.message, event.details)

        raise InvariantViolation(event.message, event.details)

    def _swap(self, handlers: tuple[FailureHandler, ...]) -> tuple[FailureHandler, ...]:
        """Replace the handler tuple and return the previous one. Harness use only."""
        with self._lock:
            previous = self._handlers
            self._handlers = tuple(handlers)
        return previous


_default_registry = FailureRegistry()


def get_default_registry() -> FailureRegistry:
    """The process-wide registry used by the module-level check functions."""
    return _default_registry


def register_failure_handler(handler: FailureHandler) -> None:
    """
    Register a function to be called when a check fails.

    Handlers run synchronously, in registration order, before the
    ``InvariantViolation`` is raised. Keep them fast and non-throwing.
    """
    _default_registry.register(handler)


def abort(message: str, details: str) -> NoReturn:
    """Report a violation to the default registry's handlers and raise."""
    _default_registry.abort(message, details)
