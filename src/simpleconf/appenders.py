# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Appenders: the `logging.Handler` variants an init file can ask for.

The configurator first gathers an `AppenderSpec` from the token stream and
resolves the layout; only then does `create_appender()` build the handler.
No appender opens files or sockets while it is being configured. File
output is opened on the first record, syslog connections on the first emit.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import socket
import sys
from dataclasses import dataclass
from typing import IO, TYPE_CHECKING, Final

import structlog

from simpleconf.priority import to_syslog_severity

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import ModuleType

    from simpleconf.layouts import Layout

log: structlog.stdlib.BoundLogger
log = structlog.get_logger(__name__)

STDOUT_FILENO: Final[int] = 1
STDERR_FILENO: Final[int] = 2

LOG_USER: Final[int] = 1 << 3  # <syslog.h> facility codes are pre-shifted
DEFAULT_SYSLOG_PORT: Final[int] = 514


@dataclass(frozen=True)
class AppenderSpec:
    """Everything needed to build one appender, read from the init file."""

    kind: str
    category_name: str
    file_name: str | None = None
    ident: str | None = None
    host: str | None = None
    facility: int = LOG_USER
    port: int = DEFAULT_SYSLOG_PORT


class DescriptorAppender(logging.StreamHandler):
    """Write to a private duplicate of an inherited file descriptor."""

    def __init__(self, name: str, fd: int) -> None:
        self.fd = os.dup(fd)
        super().__init__(os.fdopen(self.fd, "w", encoding="utf-8", closefd=True))
        self.set_name(name)

    def close(self) -> None:
        self.acquire()
        try:
            stream: IO[str] | None = self.stream
            if stream is not None and not stream.closed:
                self.flush()
                stream.close()
            self.stream = None
        finally:
            self.release()
        super().close()


class SyslogAppender(logging.Handler):
    """
    Send records to the local syslog daemon through the `syslog` module.

    The log is opened with the configured ident and facility on the first
    record, not at construction.
    """

    def __init__(self, name: str, ident: str, facility: int = LOG_USER) -> None:
        super().__init__()
        self.set_name(name)
        self.ident = ident
        self.facility = facility
        self._syslog: ModuleType | None = None

    def _open(self) -> ModuleType:
        import syslog  # POSIX only; imported when the first record arrives

        syslog.openlog(self.ident, 0, self.facility)
        self._syslog = syslog
        return syslog

    def emit(self, record: logging.LogRecord) -> None:
        try:
            syslog = self._syslog or self._open()
            syslog.syslog(self.facility | to_syslog_severity(record.levelno), self.format(record))
        except Exception:  # noqa: BLE001
            self.handleError(record)

    def close(self) -> None:
        if self._syslog is not None:
            self._syslog.closelog()
            self._syslog = None
        super().close()


class RemoteSyslogAppender(logging.handlers.SysLogHandler):
    """
    Send records as UDP datagrams to a remote syslog relay.

    Each datagram reads ``<PRI>ident: message`` where PRI is the facility
    plus the record's syslog severity. Unlike `SysLogHandler`, the host is
    resolved and the socket created on the first record, not at construction.
    """

    priority_map = {  # noqa: RUF012
        **logging.handlers.SysLogHandler.priority_map,
        "EMERG": "emerg",
        "ALERT": "alert",
        "NOTICE": "notice",
    }

    def __init__(
        self,
        name: str,
        ident: str,
        host: str,
        facility: int = LOG_USER,
        port: int = DEFAULT_SYSLOG_PORT,
    ) -> None:
        self._connected_on_emit = False
        super().__init__(address=(host, port), facility=facility, socktype=socket.SOCK_DGRAM)
        self._connected_on_emit = True
        self.set_name(name)
        self.ident = f"{ident}: "
        self.append_nul = False

    @property
    def host(self) -> str:
        return self.address[0]

    @property
    def port(self) -> int:
        return self.address[1]

    def createSocket(self) -> None:  # noqa: N802
        # Called from __init__ and again from emit() while no socket exists.
        if self._connected_on_emit:
            super().createSocket()

    def encodePriority(self, facility: int | str, priority: int | str) -> int:  # noqa: N802
        # Facilities are kept as pre-shifted <syslog.h> codes.
        if isinstance(facility, str):
            facility = self.facility_names[facility] << 3
        if isinstance(priority, str):
            priority = self.priority_names[priority]
        return facility | priority


def _file_appender(spec: AppenderSpec) -> logging.Handler:
    handler = logging.FileHandler(spec.file_name, mode="a", encoding="utf-8", delay=True)
    handler.set_name(spec.category_name)
    return handler


def _console_appender(spec: AppenderSpec) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(spec.category_name)
    return handler


def _stdout_appender(spec: AppenderSpec) -> logging.Handler:
    return DescriptorAppender(spec.category_name, STDOUT_FILENO)


def _stderr_appender(spec: AppenderSpec) -> logging.Handler:
    return DescriptorAppender(spec.category_name, STDERR_FILENO)


def _syslog_appender(spec: AppenderSpec) -> logging.Handler:
    return SyslogAppender(spec.category_name, spec.ident, spec.facility)


def _remote_syslog_appender(spec: AppenderSpec) -> logging.Handler:
    return RemoteSyslogAppender(spec.category_name, spec.ident, spec.host, spec.facility, spec.port)


APPENDER_FACTORIES: Final[dict[str, Callable[[AppenderSpec], logging.Handler]]] = {
    "file": _file_appender,
    "console": _console_appender,
    "stdout": _stdout_appender,
    "stderr": _stderr_appender,
    "syslog": _syslog_appender,
    "remotesyslog": _remote_syslog_appender,
}


def create_appender(spec: AppenderSpec, layout: Layout) -> logging.Handler:
    """
    Build the appender described by `spec` and give it `layout`.

    Raises:
        KeyError: If `spec.kind` is not a known appender kind.
    """
    appender = APPENDER_FACTORIES[spec.kind](spec)
    appender.setFormatter(layout)
    log.debug(
        "Appender created",
        kind=spec.kind,
        category=spec.category_name,
        appender=type(appender).__name__,
        layout=type(layout).__name__,
    )
    return appender
