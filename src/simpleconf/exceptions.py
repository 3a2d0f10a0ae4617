# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Exception types raised by simpleconf.

`ConfigurationError` is the single structured failure of the init-file
loader. Its `kind` tells callers which rule was violated; `reason` is the
human-readable message naming the offending token and category.

The settings layer has its own small family of exceptions, which never
escape from `configure()` itself.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Classification of a failed configuration load."""

    SOURCE_UNREADABLE = "SourceUnreadable"
    MISSING_ARGUMENT = "MissingArgument"
    INVALID_COMMAND = "InvalidCommand"
    INVALID_APPENDER_KIND = "InvalidAppenderKind"
    INVALID_LAYOUT_KIND = "InvalidLayoutKind"
    INVALID_PRIORITY = "InvalidPriority"
    INVALID_PATTERN = "InvalidPattern"


class ConfigurationError(RuntimeError):
    """
    Raised when an init file cannot be applied.

    Attributes
    ----------
    kind : ErrorKind
        Which rule was violated.
    reason : str
        Human-readable description, also used as the exception message.
    token : str | None
        The offending token, when there is one.
    category : str | None
        The category the failing command referred to.
    line : int | None
        1-based line number of the failing command in the init file.
    """

    def __init__(
        self,
        kind: ErrorKind,
        reason: str,
        *,
        token: str | None = None,
        category: str | None = None,
        line: int | None = None,
    ) -> None:
        super().__init__(reason)
        self.kind = kind
        self.reason = reason
        self.token = token
        self.category = category
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return self.reason
        return f"{self.reason} (line {self.line})"


class SettingsConfigurationError(Exception):
    """Raised when the settings file exists but cannot be parsed."""


class ConfigFileNotFoundError(Exception):
    """Raised when the settings file cannot be accessed."""


class SettingsWriteConfigurationError(Exception):
    """Raised when settings cannot be written to disk."""
