# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
The SimpleConfigurator.

Reads a line-oriented init file once, at start-up, and applies it to a
category registry. The file is a sequence of whitespace-separated commands:

```
# comment line
category <name>
appender <name> <layoutKind> <appenderKind> [kind-specific args...]
priority <name> <priorityName>
```

Every command names its category first; ``root`` names the root category.
Appender kinds are ``file <path>``, ``console``, ``stdout``, ``stderr``,
``syslog <ident> [facility]`` and ``remotesyslog <ident> <host> [facility]
[port]``. Layout kinds are ``basic``, ``simple`` and ``pattern``; a pattern
layout takes the rest of its line as the conversion pattern.

Loading stops at the first error, which is raised as a `ConfigurationError`.
Whatever earlier lines created stays in place. Loading the same file twice
resolves the same categories but attaches every appender a second time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from simpleconf.appenders import AppenderSpec, create_appender
from simpleconf.context import ConfiguratorContext
from simpleconf.exceptions import ConfigurationError, ErrorKind
from simpleconf.layouts import BasicLayout, Layout, PatternLayout, SimpleLayout
from simpleconf.priority import get_priority_value
from simpleconf.tokenizer import TokenStream

if TYPE_CHECKING:
    import logging


@dataclass(frozen=True)
class ConfigureResult:
    """
    Outcome of `SimpleConfigurator.try_configure`.

    Attributes
    ----------
    ok : bool
        Whether the whole file was applied.
    source : Path
        The init file.
    error : ConfigurationError | None
        The error that stopped the load, if any.
    categories : tuple[str, ...]
        Category names referenced before the load finished or stopped.
    appenders : int
        Number of appenders attached.
    """

    ok: bool
    source: Path
    error: ConfigurationError | None = None
    categories: tuple[str, ...] = ()
    appenders: int = 0


class SimpleConfigurator:
    """Apply init files to the registry of a `ConfiguratorContext`."""

    def __init__(self, context: ConfiguratorContext | None = None) -> None:
        self.context = context if context is not None else ConfiguratorContext.create()
        self._logger = self.context.get_module_logger(__name__)
        self._categories: dict[str, None] = {}
        self._appenders_added = 0

    def configure(self, init_file_name: str | os.PathLike[str]) -> None:
        """
        Apply the init file at `init_file_name`.

        Raises:
            ConfigurationError: On the first unreadable source, missing
                argument or invalid token. Nothing after it is applied.
        """
        path = Path(init_file_name)
        self._categories = {}
        self._appenders_added = 0

        tokens = TokenStream(self._read_source(path))
        self._logger.debug("Applying logging configuration", path=str(path))
        try:
            while self._apply_next_command(tokens):
                pass
        except ConfigurationError as e:
            self._logger.error(
                "Logging configuration failed",
                path=str(path),
                kind=str(e.kind),
                reason=e.reason,
                line=e.line,
            )
            raise

        self._logger.info(
            "Logging configuration applied",
            path=str(path),
            categories=len(self._categories),
            appenders=self._appenders_added,
        )

    def try_configure(self, init_file_name: str | os.PathLike[str]) -> ConfigureResult:
        """Apply the init file like `configure`, returning the outcome instead of raising."""
        source = Path(init_file_name)
        try:
            self.configure(source)
        except ConfigurationError as e:
            return ConfigureResult(
                ok=False,
                source=source,
                error=e,
                categories=tuple(self._categories),
                appenders=self._appenders_added,
            )
        return ConfigureResult(
            ok=True,
            source=source,
            categories=tuple(self._categories),
            appenders=self._appenders_added,
        )

    def _read_source(self, path: Path) -> str:
        try:
            # Bytes that are not UTF-8 pass through as opaque token text.
            return path.read_text(encoding="utf-8", errors="surrogateescape")
        except OSError as e:
            msg = f"Config File {path} does not exist or is unreadable"
            self._logger.error(msg, path=str(path), error=str(e))
            raise ConfigurationError(ErrorKind.SOURCE_UNREADABLE, msg, token=str(path)) from e

    def _apply_next_command(self, tokens: TokenStream) -> bool:
        """Apply one command. Return False once the input is exhausted."""
        command = tokens.next_token()
        if command is None:
            return False

        if command.startswith("#"):
            tokens.skip_line()
            return True

        line = tokens.token_line
        category_name = tokens.next_token()
        if category_name is None:
            if self.context.settings.strict_eof:
                msg = f"Missing category name for command '{command}' at end of logging configuration file"
                raise ConfigurationError(ErrorKind.MISSING_ARGUMENT, msg, token=command, line=line)
            self._logger.warning("Command without a category at end of file ignored", command=command, line=line)
            return False

        category = self.context.registry.get_instance(category_name)
        self._categories[category_name] = None

        if command == "appender":
            self._appender_command(tokens, category, category_name, line)
        elif command == "priority":
            self._priority_command(tokens, category, category_name, line)
        elif command == "category":
            # Resolving the name above already created the category.
            self._logger.debug("Category declared", category=category_name, line=line)
        else:
            msg = f"Invalid format in logging configuration file. Command: {command}"
            raise ConfigurationError(
                ErrorKind.INVALID_COMMAND, msg, token=command, category=category_name, line=line
            )
        return True

    # --- Commands ---

    def _appender_command(self, tokens: TokenStream, category: logging.Logger, category_name: str, line: int) -> None:
        layout_kind = tokens.next_token()
        appender_kind = tokens.next_token() if layout_kind is not None else None
        if appender_kind is None:
            self._logger.warning(
                "Incomplete appender line dropped",
                category=category_name,
                layout=layout_kind,
                line=line,
            )
            return

        spec = self._read_appender_spec(tokens, appender_kind, category_name, line)
        layout = self._create_layout(tokens, layout_kind, category_name, line)
        category.addHandler(create_appender(spec, layout))
        self._appenders_added += 1

    def _priority_command(self, tokens: TokenStream, category: logging.Logger, category_name: str, line: int) -> None:
        priority = self._require(
            tokens,
            f"Missing priority in logging configuration file for category: {category_name}",
            category_name,
            line,
        )
        try:
            level = get_priority_value(priority)
        except ValueError as e:
            msg = f"Invalid priority ({priority}) in logging configuration file for category: {category_name}"
            raise ConfigurationError(
                ErrorKind.INVALID_PRIORITY, msg, token=priority, category=category_name, line=line
            ) from e
        category.setLevel(level)
        self._logger.debug("Priority set", category=category_name, priority=priority, level=level)

    # --- Helpers ---

    def _require(self, tokens: TokenStream, message: str, category_name: str, line: int) -> str:
        token = tokens.next_token()
        if token is None:
            raise ConfigurationError(ErrorKind.MISSING_ARGUMENT, message, category=category_name, line=line)
        return token

    def _read_appender_spec(self, tokens: TokenStream, kind: str, category_name: str, line: int) -> AppenderSpec:
        settings = self.context.settings

        if kind == "file":
            file_name = self._require(
                tokens,
                f"Missing filename for log file logging configuration file for category: {category_name}",
                category_name,
                line,
            )
            return AppenderSpec(kind, category_name, file_name=file_name)

        if kind in ("console", "stdout", "stderr"):
            return AppenderSpec(kind, category_name)

        if kind == "syslog":
            ident = self._require(
                tokens, f"Missing syslogname for SysLogAppender for category: {category_name}", category_name, line
            )
            facility = tokens.next_int()
            return AppenderSpec(
                kind,
                category_name,
                ident=ident,
                facility=settings.default_facility if facility is None else facility,
            )

        if kind == "remotesyslog":
            ident = self._require(
                tokens,
                f"Missing syslogname for RemoteSyslogAppender for category: {category_name}",
                category_name,
                line,
            )
            host = self._require(
                tokens,
                f"Missing syslog host for RemoteSyslogAppender for category: {category_name}",
                category_name,
                line,
            )
            facility = tokens.next_int()
            port = tokens.next_int()
            return AppenderSpec(
                kind,
                category_name,
                ident=ident,
                host=host,
                facility=settings.default_facility if facility is None else facility,
                port=settings.default_port if port is None else port,
            )

        msg = f"Invalid appender name ({kind}) in logging configuration file for category: {category_name}"
        raise ConfigurationError(
            ErrorKind.INVALID_APPENDER_KIND, msg, token=kind, category=category_name, line=line
        )

    def _create_layout(self, tokens: TokenStream, layout_kind: str, category_name: str, line: int) -> Layout:
        if layout_kind == "basic":
            return BasicLayout()
        if layout_kind == "simple":
            return SimpleLayout()
        if layout_kind == "pattern":
            pattern = tokens.rest_of_line(self.context.settings.max_pattern_length)
            try:
                return PatternLayout(pattern)
            except ValueError as e:
                msg = (
                    f"Invalid conversion pattern ({pattern}) in logging configuration file "
                    f"for category: {category_name}: {e}"
                )
                raise ConfigurationError(
                    ErrorKind.INVALID_PATTERN, msg, token=pattern, category=category_name, line=line
                ) from e

        msg = f"Invalid layout ({layout_kind}) in logging configuration file for category: {category_name}"
        raise ConfigurationError(
            ErrorKind.INVALID_LAYOUT_KIND, msg, token=layout_kind, category=category_name, line=line
        )


def configure(init_file_name: str | os.PathLike[str], context: ConfiguratorContext | None = None) -> None:
    """
    Apply an init file, by default to the process-wide logging hierarchy.

    Raises:
        ConfigurationError: See `SimpleConfigurator.configure`.
    """
    SimpleConfigurator(context).configure(init_file_name)
