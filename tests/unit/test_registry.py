"""
Unit tests for the failure registry and the abort path.

Verifies:
- Handlers run in registration order, exactly once each, then the
  violation is raised
- The violation payload is "<message>: <details>"
- A raising handler propagates and stops the dispatch
- Module-level helpers use the default registry
"""

import logging

import pytest

import must
from must.exceptions import InvariantViolation
from must.registry import (
    FailureEvent,
    FailureRegistry,
    abort,
    get_default_registry,
    register_failure_handler,
)
from must.testing import RecordingHandler


class TestRegister:
    """Tests for handler registration."""

    def test_starts_empty(self):
        assert len(FailureRegistry()) == 0

    def test_register_appends_in_order(self):
        registry = FailureRegistry()
        first, second = RecordingHandler(), RecordingHandler()
        registry.register(first)
        registry.register(second)
        assert registry.handlers == (first, second)

    def test_same_handler_twice_is_called_twice(self):
        registry = FailureRegistry()
        handler = RecordingHandler()
        registry.register(handler)
        registry.register(handler)

        with pytest.raises(InvariantViolation):
            registry.abort("m", "d")
        assert handler.calls == [("m", "d"), ("m", "d")]

    def test_module_level_register_uses_default_registry(self, registry):
        handler = RecordingHandler()
        register_failure_handler(handler)
        assert get_default_registry() is registry
        assert registry.handlers == (handler,)

    def test_registration_is_logged(self, caplog):
        registry = FailureRegistry()
        with caplog.at_level(logging.DEBUG, logger="must"):
            registry.register(RecordingHandler())

        record = next(r for r in caplog.records if r.message == "failure_handler_registered")
        assert record.handler_count == 1


class TestAbort:
    """Tests for dispatch-and-abort."""

    def test_raises_with_joined_payload(self):
        registry = FailureRegistry()
        with pytest.raises(InvariantViolation) as exc_info:
            registry.abort("test message", "test details")

        assert str(exc_info.value) == "test message: test details"
        assert exc_info.value.message == "test message"
        assert exc_info.value.details == "test details"
        assert exc_info.value.payload == "test message: test details"
        assert exc_info.value.code == "INVARIANT_VIOLATION"

    def test_handlers_called_in_order_exactly_once(self):
        registry = FailureRegistry()
        order: list[str] = []
        for name in ("h1", "h2", "h3"):
            registry.register(lambda m, d, name=name: order.append(name))

        with pytest.raises(InvariantViolation):
            registry.abort("m", "d")
        assert order == ["h1", "h2", "h3"]

    def test_handlers_run_before_raise(self):
        registry = FailureRegistry()
        seen: list[bool] = []

        def handler(message, details):
            seen.append(True)

        registry.register(handler)
        with pytest.raises(InvariantViolation):
            registry.abort("m", "d")
        assert seen == [True]

    def test_raising_handler_propagates_and_skips_the_rest(self):
        registry = FailureRegistry()
        after = RecordingHandler()

        def broken(message, details):
            raise RuntimeError("handler broke")

        registry.register(broken)
        registry.register(after)

        with pytest.raises(RuntimeError, match="handler broke"):
            registry.abort("m", "d")
        assert after.calls == []

    def test_handler_registered_during_dispatch_is_not_seen(self):
        registry = FailureRegistry()
        late = RecordingHandler()

        def registers_another(message, details):
            registry.register(late)

        registry.register(registers_another)
        with pytest.raises(InvariantViolation):
            registry.abort("m", "d")
        assert late.calls == []

        with pytest.raises(InvariantViolation):
            registry.abort("again", "d")
        assert late.calls == [("again", "d")]

    def test_violation_is_not_an_exception(self):
        """Ordinary ``except Exception`` blocks must not swallow a violation."""
        registry = FailureRegistry()
        with pytest.raises(InvariantViolation):
            try:
                registry.abort("m", "d")
            except Exception:  # pragma: no cover
                pytest.fail("InvariantViolation was caught as Exception")

    def test_abort_is_logged(self, caplog):
        registry = FailureRegistry()
        with caplog.at_level(logging.ERROR, logger="must"):
            with pytest.raises(InvariantViolation):
                registry.abort("cache warm", "expected true, got false")

        record = next(r for r in caplog.records if r.message == "invariant_violated")
        assert record.invariant_message == "cache warm"
        assert record.details == "expected true, got false"
        assert record.handler_count == 0

    def test_module_level_abort(self, recorder):
        with pytest.raises(InvariantViolation, match="^m: d$"):
            abort("m", "d")
        assert recorder.calls == [("m", "d")]


class TestEndToEnd:
    """Counting handler + a failing check."""

    def test_true_false_reports_then_raises(self):
        calls: list[tuple[str, str]] = []
        must.register_failure_handler(lambda m, d: calls.append((m, d)))

        with pytest.raises(must.InvariantViolation) as exc_info:
            must.true(False, "x")

        assert calls == [("x", "expected true, got false")]
        assert str(exc_info.value) == "x: expected true, got false"

    def test_passing_check_does_not_call_handlers(self, recorder):
        must.true(True, "x")
        assert recorder.call_count == 0


class TestFailureEvent:
    def test_payload(self):
        assert FailureEvent("m", "d").payload == "m: d"

    def test_frozen(self):
        event = FailureEvent("m", "d")
        with pytest.raises(AttributeError):
            event.message = "other"
