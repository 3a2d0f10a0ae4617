# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Priority names and their `logging` levels.

Init files use the syslog-flavoured names EMERG, FATAL, ALERT, CRIT, ERROR,
WARN, NOTICE, INFO, DEBUG and NOTSET. They map onto the standard `logging`
scale, with three extra levels registered for the names `logging` lacks.

A priority may also be written as a number on the classic numeric scale,
where smaller means more severe: EMERG 0, ALERT 100, CRIT 200, ERROR 300,
WARN 400, NOTICE 500, INFO 600, DEBUG 700 and NOTSET 800. A number between
two steps lets through what the lower step does, so 650 behaves like INFO;
800 and above mean NOTSET.
"""

from __future__ import annotations

import logging
from typing import Final

EMERG: Final[int] = 60
ALERT: Final[int] = 55
NOTICE: Final[int] = 25

for _level, _name in ((EMERG, "EMERG"), (ALERT, "ALERT"), (NOTICE, "NOTICE")):
    logging.addLevelName(_level, _name)

PRIORITY_LEVELS: Final[dict[str, int]] = {
    "EMERG": EMERG,
    "FATAL": EMERG,
    "ALERT": ALERT,
    "CRIT": logging.CRITICAL,
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "NOTICE": NOTICE,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}

NUMERIC_PRIORITY_STEPS: Final[tuple[tuple[int, int], ...]] = (
    (800, logging.NOTSET),
    (700, logging.DEBUG),
    (600, logging.INFO),
    (500, NOTICE),
    (400, logging.WARNING),
    (300, logging.ERROR),
    (200, logging.CRITICAL),
    (100, ALERT),
    (0, EMERG),
)

# Severities from <syslog.h>, most severe first.
LOG_EMERG: Final[int] = 0
LOG_ALERT: Final[int] = 1
LOG_CRIT: Final[int] = 2
LOG_ERR: Final[int] = 3
LOG_WARNING: Final[int] = 4
LOG_NOTICE: Final[int] = 5
LOG_INFO: Final[int] = 6
LOG_DEBUG: Final[int] = 7

_SYSLOG_SEVERITIES: Final[tuple[tuple[int, int], ...]] = (
    (EMERG, LOG_EMERG),
    (ALERT, LOG_ALERT),
    (logging.CRITICAL, LOG_CRIT),
    (logging.ERROR, LOG_ERR),
    (logging.WARNING, LOG_WARNING),
    (NOTICE, LOG_NOTICE),
    (logging.INFO, LOG_INFO),
)


def get_priority_value(name: str) -> int:
    """
    Resolve a priority name to a `logging` level.

    Names are matched exactly (case-sensitive). A non-negative decimal
    string is read on the numeric priority scale, see the module docstring.

    Raises:
        ValueError: If `name` is neither a known priority nor a level number.
    """
    if name in PRIORITY_LEVELS:
        return PRIORITY_LEVELS[name]
    if name.isdecimal():
        value = int(name)
        for step, level in NUMERIC_PRIORITY_STEPS:
            if value >= step:
                return level
    msg = f"unknown priority name: {name}"
    raise ValueError(msg)


def to_syslog_severity(level: int) -> int:
    """Map a `logging` level to the nearest syslog severity."""
    for threshold, severity in _SYSLOG_SEVERITIES:
        if level >= threshold:
            return severity
    return LOG_DEBUG
