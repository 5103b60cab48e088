# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Structured logging for riftcoach.

Logs always go to stderr; stdout is reserved for snapshots and tips. The
renderer is chosen by ``Settings.log_format``: ``console`` for people,
``json`` for one event per line next to the tip stream.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog._config import BoundLoggerLazyProxy

if TYPE_CHECKING:
    from riftcoach.settings import Settings

__all__ = ["get_logger", "configure_logging"]


def _renderer(log_format: str) -> structlog.typing.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog once per process, before the first log call."""
    if settings is None:
        from riftcoach.settings import Settings

        settings = Settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.WARNING)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            _renderer(settings.log_format),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Module logger; every event carries ``logger=<name>``.

    The binding is lazy, so loggers created at import time pick up whatever
    configuration is active when they first log.
    """
    if name is None:
        return structlog.get_logger()
    # ``structlog.get_logger(logger=...)`` clashes with ``wrap_logger``'s own
    # ``logger`` parameter, so build the same lazy proxy it would return.
    return BoundLoggerLazyProxy(None, initial_values={"logger": name})
