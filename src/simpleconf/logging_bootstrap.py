# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

from __future__ import annotations

import logging
import sys

import structlog
from structlog.dev import ConsoleRenderer
from structlog.stdlib import (
    ProcessorFormatter,
)

DIAGNOSTICS_LOGGER_NAME = "simpleconf"


def bootstrap_logging(level: int | str = logging.WARNING) -> None:
    """
    Configure structlog for simpleconf's own diagnostics.

    Events from the ``simpleconf`` loggers are rendered in a human-readable
    format to stderr. The handler sits on the ``simpleconf`` logger and does
    not propagate, so categories configured from an init file (including
    root) never see these events. Calling it again only adjusts the level.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    diagnostics_logger = logging.getLogger(DIAGNOSTICS_LOGGER_NAME)
    diagnostics_logger.setLevel(level)
    if structlog.is_configured():
        return

    pre_chain_processors = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,  # Converts exc_info to string if present
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,  # Filter by level early in the pipeline
            *pre_chain_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,  # Hands off to standard logging
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_formatter = ProcessorFormatter(
        processor=ConsoleRenderer(colors=sys.stderr.isatty()),
        foreign_pre_chain=[
            *pre_chain_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),  # For standard log messages with args
        ],
    )
    console_handler.setFormatter(console_formatter)

    diagnostics_logger.handlers.clear()
    diagnostics_logger.addHandler(console_handler)
    diagnostics_logger.propagate = False
