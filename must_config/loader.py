"""
Settings Loader (``must_config.loader``).

Responsibility
--------------
Loads the YAML settings file and parses it into the frozen
``must_config.schema`` dataclasses, and resolves configured failure
handlers from their dotted import paths.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys, wrong shapes, unknown level names  -> ``ConfigurationError``.
* Handler path that cannot be imported or is not callable
  -> ``HandlerImportError``.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any

import yaml

from must.exceptions import ConfigurationError, HandlerImportError
from must.registry import FailureHandler
from must_config.schema import LOG_LEVELS, LoggingSettings, MustSettings

_TOP_LEVEL_KEYS = frozenset({"logging", "handlers"})
_LOGGING_KEYS = frozenset({"level", "enabled"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"expected a mapping at top level, got {type(data).__name__}", str(path)
        )
    return data


def parse_logging(data: Any, source: str | None = None) -> LoggingSettings:
    """Parse the ``logging`` section."""
    if data is None:
        return LoggingSettings()
    if not isinstance(data, dict):
        raise ConfigurationError("'logging' must be a mapping", source)

    unknown = set(data) - _LOGGING_KEYS
    if unknown:
        raise ConfigurationError(f"unknown logging keys: {sorted(unknown)}", source)

    level = str(data.get("level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"unknown log level {data.get('level')!r}, expected one of {list(LOG_LEVELS)}",
            source,
        )

    enabled = data.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ConfigurationError("'logging.enabled' must be a boolean", source)

    return LoggingSettings(level=level, enabled=enabled)


def parse_settings(data: dict[str, Any], source: str | None = None) -> MustSettings:
    """
    Parse a ``MustSettings`` from a dict.

    Handler order in the file is registration order.
    """
    unknown = set(data) - _TOP_LEVEL_KEYS
    if unknown:
        raise ConfigurationError(f"unknown keys: {sorted(unknown)}", source)

    handlers = data.get("handlers") or []
    if not isinstance(handlers, list):
        raise ConfigurationError("'handlers' must be a list of dotted paths", source)
    for entry in handlers:
        if not isinstance(entry, str) or not entry.strip():
            raise ConfigurationError(
                f"handler entries must be non-empty strings, got {entry!r}", source
            )

    return MustSettings(
        logging=parse_logging(data.get("logging"), source),
        handlers=tuple(h.strip() for h in handlers),
        source=source,
    )


def load_settings(path: Path) -> MustSettings:
    """Load and parse a settings file."""
    return parse_settings(load_yaml_file(path), source=str(path))


def resolve_handler(dotted_path: str) -> FailureHandler:
    """
    Import a failure handler from ``package.module:attr`` or
    ``package.module.attr``.

    Raises:
        HandlerImportError: if the module or attribute cannot be found,
            or the attribute is not callable.
    """
    if ":" in dotted_path:
        module_name, _, attr_path = dotted_path.partition(":")
    else:
        module_name, _, attr_path = dotted_path.rpartition(".")
    if not module_name or not attr_path:
        raise HandlerImportError(dotted_path, "expected 'module:attr' or 'module.attr'")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise HandlerImportError(dotted_path, f"cannot import {module_name!r}: {exc}") from exc

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise HandlerImportError(
                dotted_path, f"{module_name!r} has no attribute {attr_path!r}"
            ) from exc

    if not callable(target):
        raise HandlerImportError(dotted_path, "target is not callable")
    return target
