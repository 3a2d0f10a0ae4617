# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
simpleconf: configure a logging category hierarchy from a simple init file.

Components of this package:
--------------------------------
- `configurator.py`: the `SimpleConfigurator` that reads an init file and
  applies it, plus the `configure()` shortcut.
- `tokenizer.py`: the forward-only token cursor over the init file.
- `registry.py`: `CategoryRegistry`, the name-to-category table.
- `appenders.py`, `layouts.py`, `priority.py`: the handlers, formatters and
  priority names an init file can refer to.
- `settings_manager.py`: TOML settings that tune the loader.
- `context.py`: `ConfiguratorContext`, bundling settings and registry.
- `logging_bootstrap.py`: structlog setup for simpleconf's own diagnostics.
- `cli.py`: the ``simpleconf`` command.
"""

from simpleconf.__about__ import __version__
from simpleconf.configurator import ConfigureResult, SimpleConfigurator, configure
from simpleconf.context import ConfiguratorContext
from simpleconf.exceptions import ConfigurationError, ErrorKind
from simpleconf.registry import CategoryRegistry

__all__ = [
    "CategoryRegistry",
    "ConfigurationError",
    "ConfigureResult",
    "ConfiguratorContext",
    "ErrorKind",
    "SimpleConfigurator",
    "__version__",
    "configure",
]
