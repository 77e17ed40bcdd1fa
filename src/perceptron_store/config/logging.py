"""Opt-in log output for perceptron_store.

Library modules log through ``logging.getLogger(__name__)`` and, by
default, leave routing to the host application. With ``[logging]
enabled = true`` the store attaches one stderr handler to the
``perceptron_store`` logger (never the root logger) that renders records
through structlog's ``ProcessorFormatter``:

- Human (default): console lines to stderr
- JSON: one JSON object per line, ``extra=`` fields included
"""

from __future__ import annotations

import logging
import sys

import structlog

from perceptron_store.config.models import LoggingConfig

PACKAGE_LOGGER = "perceptron_store"

_HANDLER_NAME = "perceptron_store.stderr"


def build_formatter(*, log_json: bool) -> logging.Formatter:
    """Return a formatter rendering stdlib records with structlog."""
    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def install_handler(config: LoggingConfig) -> logging.Handler | None:
    """Route ``perceptron_store`` records to stderr when *config* asks for it.

    Replaces a handler installed by an earlier call, so stores opened
    one after another do not stack output. Returns the handler, or None
    when logging is left to the host.
    """
    if not config.enabled:
        return None

    remove_handler()
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(build_formatter(log_json=config.log_json))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if config.verbose else logging.WARNING)
    # Own handler renders the record; the host's root handlers would repeat it.
    package_logger.propagate = False
    return handler


def remove_handler(handler: logging.Handler | None = None) -> None:
    """Detach *handler*, or any handler :func:`install_handler` attached.

    Once none is left the package logger propagates to the root logger
    again at the inherited level.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(package_logger.handlers):
        if h.get_name() != _HANDLER_NAME:
            continue
        if handler is not None and h is not handler:
            continue
        package_logger.removeHandler(h)
        h.close()

    if not any(h.get_name() == _HANDLER_NAME for h in package_logger.handlers):
        package_logger.propagate = True
        package_logger.setLevel(logging.NOTSET)
