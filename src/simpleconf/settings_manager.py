# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
SettingsManager module.

Loads, validates and persists the settings that tune the init-file loader
itself: the conversion-pattern length limit, strict end-of-file handling,
syslog defaults and the level of simpleconf's own diagnostics.

Settings live in a TOML file. It is looked up in this order:

1. an explicit path (e.g. from ``--settings`` on the command line),
2. ``simpleconf.toml`` in the current working directory,
3. the per-user config directory from `platformdirs`,
4. the site-wide config directory from `platformdirs`.

If none exists, the built-in defaults apply. Values missing from a file
fall back to their defaults key by key.
"""

from __future__ import annotations

import copy
import tomllib
from pathlib import Path
from typing import Any, ClassVar

import platformdirs
import structlog
import tomli_w

from simpleconf.__about__ import __app_config_name__, __app_name__
from simpleconf.appenders import DEFAULT_SYSLOG_PORT, LOG_USER
from simpleconf.exceptions import (
    ConfigFileNotFoundError,
    SettingsConfigurationError,
    SettingsWriteConfigurationError,
)

log: structlog.stdlib.BoundLogger
log = structlog.get_logger(__name__)

DEFAULT_MAX_PATTERN_LENGTH = 999


class SettingsManager:
    """
    Hold the loader settings and the file they came from.

    Attributes
    ----------
    DEFAULT_CONFIG : ClassVar[dict[str, dict[str, Any]]]
        The built-in settings, used for every key a file does not set.
    """

    APP_NAME: ClassVar[str] = __app_name__.lower()
    CONF_NAME: ClassVar[str] = __app_config_name__.lower()

    DEFAULT_CONFIG: ClassVar[dict[str, dict[str, Any]]] = {
        "configurator": {
            "max_pattern_length": DEFAULT_MAX_PATTERN_LENGTH,
            "strict_eof": False,
        },
        "syslog": {
            "default_facility": LOG_USER,
            "default_port": DEFAULT_SYSLOG_PORT,
        },
        "logging": {
            "level": "WARNING",
        },
    }

    def __init__(self) -> None:
        self._settings: dict[str, dict[str, Any]] = copy.deepcopy(self.DEFAULT_CONFIG)
        self._loaded_config_file: Path | None = None
        self._internal_errors: list[str] = []

    @property
    def loaded_config_file(self) -> Path | None:
        """Return the path to the loaded settings file, if any."""
        return self._loaded_config_file

    @property
    def internal_errors(self) -> list[str]:
        """Return the list of internal errors."""
        return self._internal_errors

    @classmethod
    def default_locations(cls) -> list[Path]:
        """Return the settings file candidates, most specific first."""
        return [
            Path(cls.CONF_NAME),
            Path(platformdirs.user_config_dir(cls.APP_NAME, appauthor=False)) / cls.CONF_NAME,
            Path(platformdirs.site_config_dir(cls.APP_NAME, appauthor=False)) / cls.CONF_NAME,
        ]

    @classmethod
    def from_file(cls, path: Path | None = None) -> SettingsManager:
        """Create a manager and load settings, see `load_settings`."""
        manager = cls()
        manager.load_settings(path)
        return manager

    def load_settings(self, config_path: Path | None = None) -> None:
        """
        Load settings from `config_path` or the first existing default location.

        Raises:
            ConfigFileNotFoundError: If `config_path` is given but does not exist
                or a settings file cannot be read.
            SettingsConfigurationError: If a settings file is malformed or holds
                invalid values.
        """
        self._settings = copy.deepcopy(self.DEFAULT_CONFIG)
        self._loaded_config_file = None
        self._internal_errors = []

        if config_path is not None:
            if not config_path.exists():
                msg = f"Settings file does not exist: {config_path}"
                self._internal_errors.append(msg)
                raise ConfigFileNotFoundError(msg)
            self._apply(self._load_from_file(config_path), config_path)
            return

        for path in self.default_locations():
            log.debug("Checking settings location", path=str(path))
            if path.exists():
                self._apply(self._load_from_file(path), path)
                return

        log.debug("No settings file found; using defaults.")

    def _load_from_file(self, path: Path) -> dict[str, Any]:
        log.info("Loading settings from file", path=str(path))
        try:
            with path.open("rb") as f:
                return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"TOML decoding failed for settings file: {path}"
            self._internal_errors.append(msg)
            log.exception(msg, path=str(path), exc_info=e)
            raise SettingsConfigurationError(msg) from e
        except OSError as e:
            msg = f"Could not access file: {path}"
            self._internal_errors.append(f"OS error accessing settings file '{path}': {e}")
            log.exception("Operating system error accessing settings file", path=str(path), exc_info=e)
            raise ConfigFileNotFoundError(msg) from e

    def _apply(self, loaded: dict[str, Any], path: Path) -> None:
        merged = copy.deepcopy(self.DEFAULT_CONFIG)
        for section, values in loaded.items():
            if not isinstance(values, dict):
                msg = f"Section '{section}' in {path} must be a table"
                raise SettingsConfigurationError(msg)
            merged.setdefault(section, {}).update(values)
        self._validate(merged, path)
        self._settings = merged
        self._loaded_config_file = path

    @staticmethod
    def _validate(settings: dict[str, dict[str, Any]], path: Path) -> None:
        def positive_int(section: str, key: str) -> None:
            value = settings[section][key]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                msg = f"'{section}.{key}' in {path} must be a positive integer, got {value!r}"
                raise SettingsConfigurationError(msg)

        positive_int("configurator", "max_pattern_length")
        positive_int("syslog", "default_port")
        if not isinstance(settings["configurator"]["strict_eof"], bool):
            msg = f"'configurator.strict_eof' in {path} must be true or false"
            raise SettingsConfigurationError(msg)
        facility = settings["syslog"]["default_facility"]
        if isinstance(facility, bool) or not isinstance(facility, int) or facility < 0:
            msg = f"'syslog.default_facility' in {path} must be a non-negative integer, got {facility!r}"
            raise SettingsConfigurationError(msg)
        if not isinstance(settings["logging"]["level"], str):
            msg = f"'logging.level' in {path} must be a string"
            raise SettingsConfigurationError(msg)

    def save(self, path: Path | None = None) -> Path:
        """
        Write the current settings as TOML.

        Writes to `path`, else to the loaded file, else to the user config
        location. Returns the path written.

        Raises:
            SettingsWriteConfigurationError: If the file cannot be written.
        """
        target = path or self._loaded_config_file or self.default_locations()[1]
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as f:
                tomli_w.dump(self._settings, f)
        except OSError as e:
            msg = f"Unable to write settings to {target}"
            self._internal_errors.append(f"{msg}: {e}")
            log.exception(msg, path=str(target), exc_info=e)
            raise SettingsWriteConfigurationError(msg) from e
        log.info("Settings saved.", path=str(target))
        self._loaded_config_file = target
        return target

    def dumps(self) -> str:
        """Return the current settings rendered as TOML."""
        return tomli_w.dumps(self._settings)

    def get_section(self, section: str) -> dict[str, Any]:
        """Return a copy of one settings section, empty if unknown."""
        return dict(self._settings.get(section, {}))

    def get_setting(self, section: str, key: str, default: Any = None) -> Any:
        """Return one setting, or `default` if it is not set."""
        return self._settings.get(section, {}).get(key, default)

    def set_setting(self, section: str, key: str, value: Any) -> None:
        """Set one setting in memory. Use `save()` to persist it."""
        self._settings.setdefault(section, {})[key] = value

    def as_dict(self) -> dict[str, dict[str, Any]]:
        """Return a deep copy of all settings."""
        return copy.deepcopy(self._settings)

    @property
    def max_pattern_length(self) -> int:
        return self._settings["configurator"]["max_pattern_length"]

    @property
    def strict_eof(self) -> bool:
        return self._settings["configurator"]["strict_eof"]

    @property
    def default_facility(self) -> int:
        return self._settings["syslog"]["default_facility"]

    @property
    def default_port(self) -> int:
        return self._settings["syslog"]["default_port"]

    @property
    def log_level(self) -> str:
        return self._settings["logging"]["level"]
