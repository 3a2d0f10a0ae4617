# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Configurator context.

Bundles the two things a configuration load works against: the loader
settings and the category registry it populates. Passing the registry in
explicitly is what lets tests and the ``simpleconf check`` command load an
init file into an isolated hierarchy instead of the process-wide one.

Usage Example:
--------------
```python
from simpleconf.configurator import SimpleConfigurator
from simpleconf.context import ConfiguratorContext
from simpleconf.registry import CategoryRegistry
from simpleconf.settings_manager import SettingsManager

context = ConfiguratorContext.create(SettingsManager.from_file(), CategoryRegistry())
SimpleConfigurator(context).configure("log.init")
```
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from simpleconf.registry import CategoryRegistry
from simpleconf.settings_manager import SettingsManager


@dataclass
class ConfiguratorContext:
    """
    Shared state for one or more configuration loads.

    Attributes
    ----------
    settings : SettingsManager
        Loader settings (pattern length limit, syslog defaults, ...).
    registry : CategoryRegistry
        The category hierarchy that init files are applied to.
    """

    settings: SettingsManager
    registry: CategoryRegistry

    def get_module_logger(self, name: str) -> structlog.stdlib.BoundLogger:
        """Return a `structlog` logger for simpleconf's own diagnostics."""
        return structlog.get_logger(name)

    @classmethod
    def create(
        cls,
        settings_instance: SettingsManager | None = None,
        registry_instance: CategoryRegistry | None = None,
    ) -> ConfiguratorContext:
        """
        Create a context, defaulting to built-in settings and the process-wide registry.

        Parameters
        ----------
        settings_instance : SettingsManager | None
            Already loaded settings. Defaults to the built-in values.
        registry_instance : CategoryRegistry | None
            Target registry. Defaults to `CategoryRegistry.default()`.
        """
        return cls(
            settings=settings_instance if settings_instance is not None else SettingsManager(),
            registry=registry_instance if registry_instance is not None else CategoryRegistry.default(),
        )
