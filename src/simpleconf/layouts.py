# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Layouts: `logging.Formatter` subclasses selected by an init file.

`BasicLayout` and `SimpleLayout` have fixed formats. `PatternLayout` is
driven by a conversion pattern:

=========  ==========================================================
``%c``     category name; ``%c{2}`` keeps the last two components
``%d``     date; ``%d{%H:%M:%S,%l}`` takes strftime codes plus ``%l``
           for milliseconds, or one of ``ISO8601``, ``ABSOLUTE``, ``DATE``
``%m``     the message
``%n``     a newline
``%p``     the priority (level) name
``%r``     milliseconds since logging started
``%R``     seconds since the epoch
``%t``     the thread name
``%u``     processor clock ticks used by the process
``%x``     nested diagnostic context, taken from ``record.ndc``
``%%``     a literal percent sign
=========  ==========================================================

Each conversion may carry a format modifier between ``%`` and the
character: ``-`` left-justifies, a number sets the minimum width, and
``.`` followed by a number sets the maximum width (longer values keep
their leading characters). Example: ``%d [%-5p] %c{1}: %m%n``.

Handlers terminate every record with their own newline, so layouts drop
one trailing newline from the rendered text.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Final

Component = Callable[[logging.LogRecord], str]

DEFAULT_CONVERSION_PATTERN: Final[str] = "%m%n"

DATE_FORMATS: Final[dict[str, str]] = {
    "ISO8601": "%Y-%m-%d %H:%M:%S,%l",
    "ABSOLUTE": "%H:%M:%S,%l",
    "DATE": "%d %b %Y %H:%M:%S,%l",
}

_CONVERSION_CHARACTERS: Final[str] = "cdmnprRtux%"


class Layout(logging.Formatter):
    """Base class for layouts. Subclasses implement `render()`."""

    def render(self, record: logging.LogRecord) -> str:
        raise NotImplementedError

    def format(self, record: logging.LogRecord) -> str:
        text = self.render(record)
        if text.endswith("\n"):
            text = text[:-1]
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            text = f"{text}\n{record.exc_text}"
        if record.stack_info:
            text = f"{text}\n{self.formatStack(record.stack_info)}"
        return text


class BasicLayout(Layout):
    """``<seconds> <PRIORITY> <category> <ndc>: <message>``"""

    def render(self, record: logging.LogRecord) -> str:
        ndc = getattr(record, "ndc", "")
        return f"{int(record.created)} {record.levelname} {record.name} {ndc}: {record.getMessage()}"


class SimpleLayout(Layout):
    """``<PRIORITY> - <message>``"""

    def render(self, record: logging.LogRecord) -> str:
        return f"{record.levelname} - {record.getMessage()}"


class PatternLayout(Layout):
    """
    Layout driven by a conversion pattern.

    Raises:
        ValueError: If the conversion pattern cannot be parsed.
    """

    def __init__(self, conversion_pattern: str = DEFAULT_CONVERSION_PATTERN) -> None:
        super().__init__()
        self._conversion_pattern = ""
        self._components: list[Component] = []
        self.set_conversion_pattern(conversion_pattern)

    @property
    def conversion_pattern(self) -> str:
        return self._conversion_pattern

    def set_conversion_pattern(self, conversion_pattern: str) -> None:
        """Parse and install a new conversion pattern."""
        pattern = conversion_pattern or DEFAULT_CONVERSION_PATTERN
        self._components = _parse_pattern(pattern)
        self._conversion_pattern = conversion_pattern

    def render(self, record: logging.LogRecord) -> str:
        return "".join(component(record) for component in self._components)


def _literal(text: str) -> Component:
    return lambda record: text


def _category(precision: str) -> Component:
    if not precision:
        return lambda record: record.name
    if not precision.isdecimal() or int(precision) == 0:
        msg = f"invalid category precision: {{{precision}}}"
        raise ValueError(msg)
    keep = int(precision)
    return lambda record: ".".join(record.name.split(".")[-keep:])


def _date(date_format: str) -> Component:
    fmt = DATE_FORMATS.get(date_format, date_format or DATE_FORMATS["ISO8601"])

    def render(record: logging.LogRecord) -> str:
        millis = f"{int(record.msecs):03d}"
        return time.strftime(fmt.replace("%l", millis), time.localtime(record.created))

    return render


_SIMPLE_COMPONENTS: Final[dict[str, Component]] = {
    "m": lambda record: record.getMessage(),
    "n": lambda record: "\n",
    "p": lambda record: record.levelname,
    "r": lambda record: str(int(record.relativeCreated)),
    "R": lambda record: str(int(record.created)),
    "t": lambda record: str(record.threadName),
    "u": lambda record: str(int(time.process_time() * 1_000_000)),
    "x": lambda record: str(getattr(record, "ndc", "")),
    "%": lambda record: "%",
}


def _modified(component: Component, min_width: int, max_width: int, left_align: bool) -> Component:
    if not min_width and not max_width:
        return component

    def render(record: logging.LogRecord) -> str:
        text = component(record)
        if max_width and len(text) > max_width:
            text = text[:max_width]
        return text.ljust(min_width) if left_align else text.rjust(min_width)

    return render


def _read_number(pattern: str, pos: int) -> tuple[int, int]:
    start = pos
    while pos < len(pattern) and pattern[pos].isdigit():
        pos += 1
    return (int(pattern[start:pos]) if pos > start else 0), pos


def _parse_pattern(pattern: str) -> list[Component]:
    components: list[Component] = []
    literal: list[str] = []
    pos = 0

    while pos < len(pattern):
        char = pattern[pos]
        pos += 1
        if char != "%":
            literal.append(char)
            continue

        left_align = pos < len(pattern) and pattern[pos] == "-"
        if left_align:
            pos += 1
        min_width, pos = _read_number(pattern, pos)
        max_width = 0
        if pos < len(pattern) and pattern[pos] == ".":
            max_width, pos = _read_number(pattern, pos + 1)

        if pos >= len(pattern):
            msg = f"conversion pattern ends inside a conversion specifier: {pattern!r}"
            raise ValueError(msg)
        character = pattern[pos]
        pos += 1
        if character not in _CONVERSION_CHARACTERS:
            msg = f"unknown conversion character '{character}' in pattern {pattern!r}"
            raise ValueError(msg)

        option = ""
        if character in "cd" and pos < len(pattern) and pattern[pos] == "{":
            close = pattern.find("}", pos)
            if close == -1:
                msg = f"unterminated '{{' in conversion pattern {pattern!r}"
                raise ValueError(msg)
            option = pattern[pos + 1 : close]
            pos = close + 1

        if literal:
            components.append(_literal("".join(literal)))
            literal = []

        if character == "c":
            component = _category(option)
        elif character == "d":
            component = _date(option)
        else:
            component = _SIMPLE_COMPONENTS[character]
        components.append(_modified(component, min_width, max_width, left_align))

    if literal:
        components.append(_literal("".join(literal)))
    return components
