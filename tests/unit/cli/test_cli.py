# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Tests for the ``simpleconf`` command line interface.

`bootstrap_logging` is patched out: it configures structlog with logger
caching, which would outlive the test and break event capture elsewhere.
"""

from __future__ import annotations

import logging
import tomllib
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from simpleconf import cli
from simpleconf.__about__ import __version__

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from pytest_mock import MockerFixture
    from typer.testing import CliRunner


@pytest.fixture(autouse=True)
def mock_bootstrap_logging(mocker: MockerFixture) -> MagicMock:
    return mocker.patch("simpleconf.cli.bootstrap_logging")


@pytest.fixture(autouse=True)
def wide_consoles(mocker: MockerFixture) -> None:
    """Keep rich from wrapping long temporary paths."""
    mocker.patch.object(cli, "console", Console(width=240))
    mocker.patch.object(cli, "_error_console", Console(stderr=True, width=240))


@pytest.mark.unit
@pytest.mark.usefixtures("isolated_test_env")
class TestCheckCommand:
    def test_valid_file(
        self,
        runner: CliRunner,
        write_init_file: Callable[[str], Path],
        tmp_path: Path,
    ) -> None:
        path = write_init_file(
            "# demo\n"
            "priority root ERROR\n"
            "appender app simple console\n"
            f"appender app.db pattern file {tmp_path / 'db.log'} %d [%p] %m%n\n"
            "priority app.db DEBUG\n"
        )

        result = runner.invoke(cli.app, ["check", str(path)])

        assert result.exit_code == 0, result.output
        assert f"OK: {path} configures 3 categories with 2 appenders." in result.output
        assert "StreamHandler [SimpleLayout]" in result.output
        assert "FileHandler [PatternLayout('%d [%p] %m%n')]" in result.output
        assert "DEBUG" in result.output

    def test_check_does_not_touch_process_logging(
        self,
        runner: CliRunner,
        write_init_file: Callable[[str], Path],
        tmp_path: Path,
    ) -> None:
        log_file = tmp_path / "app.log"
        path = write_init_file(f"priority simpleconf.cli.test CRITICAL\nappender root basic file {log_file}\n")
        root_handlers = list(logging.getLogger().handlers)

        result = runner.invoke(cli.app, ["check", str(path)])

        assert result.exit_code == 0, result.output
        assert logging.getLogger().handlers == root_handlers
        assert logging.getLogger("simpleconf.cli.test").level == logging.NOTSET
        assert not log_file.exists()

    def test_invalid_file(self, runner: CliRunner, write_init_file: Callable[[str], Path]) -> None:
        path = write_init_file("category app\npriority app LOUD\n")

        result = runner.invoke(cli.app, ["check", str(path)])

        assert result.exit_code == 1
        assert "InvalidPriority" in result.output
        assert "Invalid priority (LOUD)" in result.output
        assert "(line 2)" in result.output

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli.app, ["check", str(tmp_path / "missing.init")])

        assert result.exit_code == 1
        assert "SourceUnreadable" in result.output

    def test_bootstrap_level(
        self,
        runner: CliRunner,
        write_init_file: Callable[[str], Path],
        mock_bootstrap_logging: MagicMock,
    ) -> None:
        path = write_init_file("category app\n")

        runner.invoke(cli.app, ["check", str(path)])
        runner.invoke(cli.app, ["check", "--verbose", str(path)])

        assert [c.args for c in mock_bootstrap_logging.call_args_list] == [("WARNING",), (logging.DEBUG,)]

    def test_settings_file_is_used(
        self,
        runner: CliRunner,
        write_init_file: Callable[[str], Path],
        tmp_path: Path,
    ) -> None:
        settings_file = tmp_path / "strict.toml"
        settings_file.write_text("[configurator]\nstrict_eof = true\n", encoding="utf-8")
        path = write_init_file("category app\ncategory\n")

        lenient = runner.invoke(cli.app, ["check", str(path)])
        strict = runner.invoke(cli.app, ["check", "--settings", str(settings_file), str(path)])

        assert lenient.exit_code == 0, lenient.output
        assert strict.exit_code == 1
        assert "MissingArgument" in strict.output

    def test_missing_settings_file(
        self,
        runner: CliRunner,
        write_init_file: Callable[[str], Path],
        tmp_path: Path,
    ) -> None:
        path = write_init_file("category app\n")

        result = runner.invoke(cli.app, ["check", "-s", str(tmp_path / "nope.toml"), str(path)])

        assert result.exit_code == 2  # noqa: PLR2004
        assert "Settings file does not exist" in result.output


@pytest.mark.unit
@pytest.mark.usefixtures("isolated_test_env")
class TestSettingsCommand:
    def test_show_defaults(self, runner: CliRunner) -> None:
        result = runner.invoke(cli.app, ["settings"])

        assert result.exit_code == 0, result.output
        assert result.output.startswith("# source: built-in defaults\n")
        shown = tomllib.loads(result.output.split("\n", 1)[1])
        assert shown["configurator"] == {"max_pattern_length": 999, "strict_eof": False}

    def test_write_settings(self, runner: CliRunner, tmp_path: Path) -> None:
        target = tmp_path / "written.toml"

        result = runner.invoke(cli.app, ["settings", "--write", str(target)])

        assert result.exit_code == 0, result.output
        assert f"Settings written to {target}" in result.output
        with target.open("rb") as f:
            assert tomllib.load(f)["syslog"] == {"default_facility": 8, "default_port": 514}

    def test_show_loaded_file(self, runner: CliRunner, tmp_path: Path) -> None:
        settings_file = tmp_path / "custom.toml"
        settings_file.write_text("[syslog]\ndefault_port = 1514\n", encoding="utf-8")

        result = runner.invoke(cli.app, ["settings", "-s", str(settings_file)])

        assert result.exit_code == 0, result.output
        assert f"# source: {settings_file}" in result.output
        assert "default_port = 1514" in result.output

    def test_write_failure(self, runner: CliRunner, tmp_path: Path, mocker: MockerFixture) -> None:
        mocker.patch("tomli_w.dump", side_effect=OSError("Read-only file system"))

        result = runner.invoke(cli.app, ["settings", "-w", str(tmp_path / "out.toml")])

        assert result.exit_code == 2  # noqa: PLR2004
        assert "Unable to write settings" in result.output


@pytest.mark.unit
def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli.app, ["--version"])

    assert result.exit_code == 0
    assert f"simpleconf {__version__}" in result.output
