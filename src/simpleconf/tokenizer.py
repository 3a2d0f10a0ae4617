# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Forward-only token cursor over an init file.

Tokens are runs of non-whitespace characters and may span lines freely,
so the grammar is positional rather than line-anchored. Two reads are
line-scoped: `skip_line()` for comment bodies and `rest_of_line()` for
the conversion pattern of a pattern layout, which starts at the next
non-whitespace character, on the following line if need be.
"""

from __future__ import annotations

import re
from typing import Final

WHITESPACE: Final[str] = " \t\n\r\f\v"

_INTEGER_RE: Final[re.Pattern[str]] = re.compile(r"[+-]?\d+")


class TokenStream:
    """Cursor over the text of an init file. It never rewinds."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._line = 1
        self._counted_to = 0
        self.token_line = 0

    @property
    def at_end(self) -> bool:
        """Return True when only whitespace remains."""
        return self._skip(self._pos, WHITESPACE) >= len(self._text)

    def _skip(self, pos: int, chars: str) -> int:
        while pos < len(self._text) and self._text[pos] in chars:
            pos += 1
        return pos

    def _line_at(self, pos: int) -> int:
        # Positions handed in here never decrease, so counting is incremental.
        if pos > self._counted_to:
            self._line += self._text.count("\n", self._counted_to, pos)
            self._counted_to = pos
        return self._line

    def _scan(self) -> tuple[int, int]:
        start = self._skip(self._pos, WHITESPACE)
        end = start
        while end < len(self._text) and self._text[end] not in WHITESPACE:
            end += 1
        return start, end

    def next_token(self) -> str | None:
        """Consume and return the next token, or None at end of input."""
        start, end = self._scan()
        if start == end:
            self._pos = end
            return None
        self._pos = end
        self.token_line = self._line_at(start)
        return self._text[start:end]

    def peek(self) -> str | None:
        """Return the next token without consuming it."""
        start, end = self._scan()
        return self._text[start:end] if start < end else None

    def next_int(self) -> int | None:
        """
        Consume the next token if it is a decimal integer.

        A token that is not an integer is left in place for the next read.
        """
        token = self.peek()
        if token is None or not _INTEGER_RE.fullmatch(token):
            return None
        self.next_token()
        return int(token)

    def skip_line(self) -> None:
        """Discard everything up to and including the next newline."""
        newline = self._text.find("\n", self._pos)
        self._pos = len(self._text) if newline == -1 else newline + 1

    def rest_of_line(self, max_length: int) -> str:
        """
        Consume the line holding the next non-whitespace character, from there on.

        Leading whitespace, newlines included, is skipped. A trailing
        carriage return is dropped, and the result is cut to `max_length`
        characters. The rest of an over-long line is discarded. Returns an
        empty string when only whitespace remains.
        """
        start = self._skip(self._pos, WHITESPACE)
        newline = self._text.find("\n", start)
        end = len(self._text) if newline == -1 else newline
        self._pos = len(self._text) if newline == -1 else newline + 1

        line = self._text[start:end]
        if line.endswith("\r"):
            line = line[:-1]
        return line[:max_length]
