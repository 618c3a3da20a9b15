"""
Settings schema.

Frozen dataclasses the YAML settings file is parsed into by the loader.
"""

from __future__ import annotations

from dataclasses import dataclass, field

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LoggingSettings:
    """How ``must.logging_config`` is initialized."""

    level: str = "INFO"
    enabled: bool = True


@dataclass(frozen=True)
class MustSettings:
    """Parsed settings file."""

    logging: LoggingSettings = field(default_factory=LoggingSettings)
    handlers: tuple[str, ...] = ()  # dotted import paths, registration order
    source: str | None = None  # file the settings came from, if any
