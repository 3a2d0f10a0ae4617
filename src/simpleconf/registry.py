# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Category registry.

A category is a `logging.Logger`; the registry is a thin wrapper around a
`logging.Manager`, which already gives the name-to-instance table and the
dotted-name hierarchy. Wrapping it lets the configurator run against either
the process-wide hierarchy or an isolated one with its own root.
"""

from __future__ import annotations

import logging
from typing import Final, Self

import structlog

log: structlog.stdlib.BoundLogger
log = structlog.get_logger(__name__)

ROOT_CATEGORY_NAME: Final[str] = "root"


class CategoryRegistry:
    """
    Name-to-category table for one logger hierarchy.

    Requesting the same name twice returns the same `logging.Logger`.
    The name `root` always maps to the hierarchy's root logger.
    """

    def __init__(self, manager: logging.Manager | None = None) -> None:
        if manager is None:
            manager = logging.Manager(logging.RootLogger(logging.WARNING))
        self._manager = manager

    @classmethod
    def default(cls) -> Self:
        """Return a registry over the process-wide `logging` hierarchy."""
        return cls(logging.root.manager)

    @property
    def manager(self) -> logging.Manager:
        """Return the underlying `logging.Manager`."""
        return self._manager

    def get_root(self) -> logging.Logger:
        """Return the root category of this hierarchy."""
        return self._manager.root

    def get_instance(self, name: str) -> logging.Logger:
        """Return the category called `name`, creating it on first use."""
        if name == ROOT_CATEGORY_NAME:
            return self.get_root()
        created = not self.exists(name)
        category = self._manager.getLogger(name)
        if created:
            log.debug("Category created", category=name)
        return category

    def exists(self, name: str) -> bool:
        """Return True if a category called `name` has been created."""
        if name == ROOT_CATEGORY_NAME:
            return True
        return isinstance(self._manager.loggerDict.get(name), logging.Logger)

    def categories(self) -> dict[str, logging.Logger]:
        """Return every created category keyed by name, root first."""
        found: dict[str, logging.Logger] = {ROOT_CATEGORY_NAME: self.get_root()}
        for name in sorted(self._manager.loggerDict):
            entry = self._manager.loggerDict[name]
            # Intermediate names of the hierarchy are PlaceHolder objects.
            if isinstance(entry, logging.Logger):
                found[name] = entry
        return found
