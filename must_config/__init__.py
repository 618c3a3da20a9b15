"""
must_config -- single public entrypoint for must settings.

Responsibility:
    ``configure()`` reads the YAML settings file, initializes
    ``must.logging_config`` and registers the configured failure handlers
    with a registry (the default one unless told otherwise).

Architecture position:
    Configuration -- sits above ``must``. The kernel MUST NEVER import
    from ``must_config``.

Failure modes:
    - ``FileNotFoundError`` -- the settings path does not exist.
    - ``ConfigurationError`` -- structural validation failures.
    - ``HandlerImportError`` -- a handler path cannot be resolved. No
      handler is registered when any of them fails to resolve.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from must.logging_config import LogContext, configure_logging, get_logger
from must.registry import FailureRegistry, get_default_registry
from must_config.loader import load_settings, resolve_handler
from must_config.schema import LoggingSettings, MustSettings

__all__ = [
    "CONFIG_ENV_VAR",
    "LoggingSettings",
    "MustSettings",
    "configure",
]

CONFIG_ENV_VAR = "MUST_CONFIG"

_logger = get_logger("config")


def configure(
    path: Path | str | None = None,
    registry: FailureRegistry | None = None,
) -> MustSettings:
    """Load settings, configure logging, register failure handlers.

    Args:
        path: Settings file. Defaults to ``$MUST_CONFIG``; with neither,
            built-in defaults apply (logging at INFO, no handlers).
        registry: Registry to register handlers with. Defaults to the
            process-wide registry used by the check functions.

    Returns:
        The applied ``MustSettings``.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None

    settings = load_settings(Path(path)) if path is not None else MustSettings()

    if settings.logging.enabled:
        configure_logging(level=getattr(logging, settings.logging.level))

    # Resolve everything before registering anything
    handlers = [resolve_handler(dotted) for dotted in settings.handlers]
    target = registry if registry is not None else get_default_registry()
    for handler in handlers:
        target.register(handler)

    with LogContext.bind(component="config"):
        _logger.info(
            "MUST_CONFIG_TRACE",
            extra={
                "trace_type": "MUST_CONFIG_TRACE",
                "config_source": settings.source,
                "log_level": settings.logging.level,
                "handler_paths": list(settings.handlers),
                "handler_count": len(target),
            },
        )

    return settings
