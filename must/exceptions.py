"""
Typed Exception Hierarchy for must.

===============================================================================
TWO KINDS OF FAILURE
===============================================================================

must separates a broken invariant from an ordinary error:

  - InvariantViolation is the fatal signal raised by every check function
    after the registered failure handlers have run. It derives from
    BaseException, next to SystemExit and KeyboardInterrupt, so generic
    ``except Exception`` recovery code does not swallow it.

  - MustError and its subclasses are ordinary, recoverable errors raised
    by the library's own APIs (typed references, configuration loading).

Every class carries a ``code`` class attribute for machine-readable
identification, and stores its context as attributes.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    BaseException
    |
    +-- InvariantViolation            INVARIANT_VIOLATION

    Exception
    |
    +-- MustError                     MUST_ERROR
        |
        +-- EmptyReferenceError       EMPTY_REFERENCE
        |
        +-- ConfigurationError        CONFIGURATION_ERROR
            +-- HandlerImportError    HANDLER_IMPORT_ERROR

===============================================================================
HANDLING PATTERNS
===============================================================================

1. DO NOT CATCH InvariantViolation IN PRODUCTION CODE. Register a failure
   handler instead; it runs before the violation is raised:

    register_failure_handler(lambda message, details: alert(message))

2. TRAP VIOLATIONS ONLY IN TEST HARNESSES:

    with must.testing.recover() as result:
        must.true(False, "flag")
    assert result.details == "expected true, got false"

3. USE STRUCTURED DATA (not message parsing):

    except ConfigurationError as e:
        return {"error": e.code, "path": e.path}
"""


class InvariantViolation(BaseException):
    """
    Fatal signal raised when a check function's condition is not met.

    ``str(exc)`` is exactly ``"<message>: <details>"``.
    """

    code: str = "INVARIANT_VIOLATION"

    def __init__(self, message: str, details: str):
        self.message = message
        self.details = details
        super().__init__(f"{message}: {details}")

    @property
    def payload(self) -> str:
        return f"{self.message}: {self.details}"


class MustError(Exception):
    """
    Base exception for all recoverable must errors.

    All subclasses must have a `code` class attribute.
    """

    code: str = "MUST_ERROR"


class EmptyReferenceError(MustError):
    """A typed reference bound to no target was dereferenced."""

    code: str = "EMPTY_REFERENCE"

    def __init__(self, target_type: str):
        self.target_type = target_type
        super().__init__(f"Reference of type {target_type} is bound to no target")


# Configuration exceptions


class ConfigurationError(MustError):
    """Base exception for settings file errors."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, reason: str, path: str | None = None):
        self.reason = reason
        self.path = path
        if path is not None:
            super().__init__(f"Invalid configuration in {path}: {reason}")
        else:
            super().__init__(f"Invalid configuration: {reason}")


class HandlerImportError(ConfigurationError):
    """A configured failure handler could not be imported or is not callable."""

    code: str = "HANDLER_IMPORT_ERROR"

    def __init__(self, dotted_path: str, reason: str):
        self.dotted_path = dotted_path
        super().__init__(f"cannot load failure handler {dotted_path!r}: {reason}")
