# conftest.py
# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
import structlog
from typer.testing import CliRunner

from simpleconf.configurator import SimpleConfigurator
from simpleconf.context import ConfiguratorContext
from simpleconf.registry import CategoryRegistry
from simpleconf.settings_manager import SettingsManager

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from pytest_mock import MockerFixture
    from structlog.typing import EventDict


# --- Core Logging Setup Fixture ---
# Runs before any simpleconf code gets its first logger, so that
# `structlog.get_logger()` hands events to standard logging.
@pytest.fixture(autouse=True)
def structlog_base_config() -> Generator[None, None, None]:
    """Set up and tear down a structlog configuration for each test function."""
    structlog.reset_defaults()
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.NOTSET)

    # stderr, so tests asserting on appender output to stdout stay clean
    test_handler = logging.StreamHandler(sys.stderr)
    test_handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    root_logger.addHandler(test_handler)
    root_logger.setLevel(logging.DEBUG)

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,  # IMPORTANT: keeps capture_logs() working
    )
    yield

    # --- Teardown Phase ---
    structlog.reset_defaults()
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.WARNING)
    diagnostics_logger = logging.getLogger("simpleconf")
    for handler in diagnostics_logger.handlers[:]:
        diagnostics_logger.removeHandler(handler)
        handler.close()
    diagnostics_logger.setLevel(logging.NOTSET)
    diagnostics_logger.propagate = True


# --- Logging Assertion Fixtures ---
@pytest.fixture
def caplog_structlog() -> Generator[list[EventDict], None, None]:
    """Capture `structlog` events for the duration of a test."""
    with structlog.testing.capture_logs() as captured_events:
        yield captured_events


@pytest.fixture
def assert_log_contains() -> Any:
    """Provide a helper asserting that a `structlog` capture contains a matching entry."""

    def _assert(log: list[EventDict], text: str, level: str | None = None) -> None:
        matches = [
            entry
            for entry in log
            if text in entry["event"] and (level is None or entry["log_level"].lower() == level.lower())
        ]
        assert matches, f"No log entry found with text '{text}' and level '{level}'"

    return _assert


# --- Registry and Configurator Fixtures ---
@pytest.fixture
def registry() -> Generator[CategoryRegistry, None, None]:
    """An isolated category registry; its appenders are closed afterwards."""
    isolated = CategoryRegistry()
    yield isolated
    for category in isolated.categories().values():
        for handler in category.handlers[:]:
            category.removeHandler(handler)
            handler.close()


@pytest.fixture
def settings() -> SettingsManager:
    """Loader settings with built-in defaults."""
    return SettingsManager()


@pytest.fixture
def context(settings: SettingsManager, registry: CategoryRegistry) -> ConfiguratorContext:
    return ConfiguratorContext.create(settings, registry)


@pytest.fixture
def configurator(context: ConfiguratorContext) -> SimpleConfigurator:
    return SimpleConfigurator(context)


@pytest.fixture
def write_init_file(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper writing init-file text to a temporary file."""

    def _write(text: str, name: str = "log.init") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# --- Environment Isolation Fixture ---
@pytest.fixture
def isolated_test_env(mocker: MockerFixture, tmp_path: Path) -> Generator[dict[str, Path], None, None]:
    """
    Set up an isolated environment for settings lookups.

    - Mocks platformdirs.user_config_dir and site_config_dir to directories within tmp_path.
    - Changes the current working directory to a fresh directory within tmp_path,
      so no stray 'simpleconf.toml' interferes with the local lookup.
    """
    original_cwd = Path.cwd()
    try:
        test_cwd = tmp_path / "test_run_cwd"
        test_cwd.mkdir()
        os.chdir(test_cwd)

        mock_user_config_path = tmp_path / "mock_user_config" / "simpleconf"
        mock_site_config_path = tmp_path / "mock_site_config" / "simpleconf"
        mock_user_config_path.mkdir(parents=True, exist_ok=True)

        mocker.patch("platformdirs.user_config_dir", return_value=str(mock_user_config_path))
        mocker.patch("platformdirs.site_config_dir", return_value=str(mock_site_config_path))

        yield {
            "user_config_dir": mock_user_config_path,
            "site_config_dir": mock_site_config_path,
            "current_working_dir": test_cwd,
        }
    finally:
        os.chdir(original_cwd)


# --- CLI Fixtures ---
@pytest.fixture
def runner() -> CliRunner:
    """Provides an instance of `typer.testing.CliRunner` for testing the CLI."""
    return CliRunner()
