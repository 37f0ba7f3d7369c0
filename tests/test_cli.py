"""Tests for CLI commands."""

from pathlib import Path
from unittest.mock import Mock

import pytest  # type: ignore[import-not-found]
from click.testing import CliRunner  # type: ignore[import-not-found]

from pomodoro.automation import Notifier
from pomodoro.cli.main import cli, period_glyph
from pomodoro.core.config import ConfigManager
from pomodoro.core.timer import Period
from pomodoro.daemon.daemon import DaemonError, PomodoroDaemon


@pytest.fixture  # type: ignore[misc]
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def socket_path(tmp_path: Path) -> Path:
    return tmp_path / "pomodoro.sock"


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "config.yml"


@pytest.fixture
def running_daemon(socket_path: Path):
    """Start a daemon on a temporary socket."""
    instance = PomodoroDaemon(
        socket_path=socket_path,
        notifier=Mock(spec=Notifier),
        tick_interval=3600,
    )
    instance.start()
    yield instance
    instance.stop()


class TestPeriodGlyph:
    """Test glyphs shown by `get`."""

    def test_known_periods(self) -> None:
        assert period_glyph("Work") == "🍅"
        assert period_glyph("Rest") == "😋"
        assert period_glyph("Stopped") == "⏸️"

    def test_unknown_period(self) -> None:
        assert period_glyph("Nap") == "❓"


class TestCLICommands:
    """Test client commands."""

    def test_help(self, runner: CliRunner) -> None:
        """Test --help flag."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Pomodoro" in result.output
        assert "daemon" in result.output
        assert "toggle" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_get_fresh_daemon(
        self, runner: CliRunner, socket_path: Path, running_daemon: PomodoroDaemon
    ) -> None:
        """Test get on a daemon that was never toggled."""
        result = runner.invoke(cli, ["--socket-path", str(socket_path), "get"])

        assert result.exit_code == 0
        assert "⏸️ 00:00" in result.output

    def test_toggle(
        self, runner: CliRunner, socket_path: Path, running_daemon: PomodoroDaemon
    ) -> None:
        """Test toggle starts the work period."""
        result = runner.invoke(cli, ["--socket-path", str(socket_path), "toggle"])

        assert result.exit_code == 0
        assert "Timer toggled. Status: Work 25:00" in result.output

        result = runner.invoke(cli, ["--socket-path", str(socket_path), "get"])
        assert "🍅 25:00" in result.output

    def test_toggle_twice_stops(
        self, runner: CliRunner, socket_path: Path, running_daemon: PomodoroDaemon
    ) -> None:
        runner.invoke(cli, ["--socket-path", str(socket_path), "toggle"])
        result = runner.invoke(cli, ["--socket-path", str(socket_path), "toggle"])

        assert result.exit_code == 0
        assert "Timer toggled. Status: Stopped 00:00" in result.output

    def test_get_rest_period(
        self, runner: CliRunner, socket_path: Path, running_daemon: PomodoroDaemon
    ) -> None:
        running_daemon.toggle()
        running_daemon.state.remaining = 1
        running_daemon.tick()

        result = runner.invoke(cli, ["--socket-path", str(socket_path), "get"])

        assert "😋 05:00" in result.output

    def test_socket_path_from_environment(
        self, runner: CliRunner, socket_path: Path, running_daemon: PomodoroDaemon
    ) -> None:
        result = runner.invoke(cli, ["get"], env={"SOCKET_PATH": str(socket_path)})

        assert result.exit_code == 0
        assert "00:00" in result.output

    def test_socket_path_from_config(
        self,
        runner: CliRunner,
        socket_path: Path,
        config_path: Path,
        running_daemon: PomodoroDaemon,
    ) -> None:
        ConfigManager(config_path).set("daemon.socket_path", str(socket_path))

        result = runner.invoke(
            cli, ["--config", str(config_path), "get"], env={"SOCKET_PATH": None}
        )

        assert result.exit_code == 0
        assert "00:00" in result.output

    def test_get_without_daemon(self, runner: CliRunner, socket_path: Path) -> None:
        """Test get fails when the daemon is not running."""
        result = runner.invoke(cli, ["--socket-path", str(socket_path), "get"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_toggle_without_daemon(self, runner: CliRunner, socket_path: Path) -> None:
        result = runner.invoke(cli, ["--socket-path", str(socket_path), "toggle"])

        assert result.exit_code == 1
        assert "Failed to communicate" in result.output

    def test_status(
        self, runner: CliRunner, socket_path: Path, running_daemon: PomodoroDaemon
    ) -> None:
        running_daemon.toggle()

        result = runner.invoke(cli, ["--socket-path", str(socket_path), "status"])

        assert result.exit_code == 0
        assert "Work" in result.output
        assert "25:00" in result.output

    def test_status_without_daemon(self, runner: CliRunner, socket_path: Path) -> None:
        result = runner.invoke(cli, ["--socket-path", str(socket_path), "status"])

        assert result.exit_code == 1
        assert "may not be running" in result.output


class TestDaemonCommand:
    """Test the daemon command."""

    def test_refuses_when_already_running(
        self,
        runner: CliRunner,
        socket_path: Path,
        config_path: Path,
        running_daemon: PomodoroDaemon,
    ) -> None:
        result = runner.invoke(
            cli, ["--socket-path", str(socket_path), "--config", str(config_path), "daemon"]
        )

        assert result.exit_code == 1
        assert "already running" in result.output

    def test_passes_period_lengths(
        self, runner: CliRunner, socket_path: Path, config_path: Path, monkeypatch
    ) -> None:
        """Test --work and --rest override configuration."""
        started = []

        def fake_run(self: PomodoroDaemon, log_level: str = "INFO", log_file=None) -> None:
            started.append((self, log_level))

        monkeypatch.setattr(PomodoroDaemon, "run", fake_run)

        result = runner.invoke(
            cli,
            [
                "--socket-path",
                str(socket_path),
                "--config",
                str(config_path),
                "daemon",
                "-w",
                "50",
                "-r",
                "10",
                "--log-level",
                "DEBUG",
            ],
        )

        assert result.exit_code == 0
        instance, log_level = started[0]
        assert instance.state.period_lengths == {Period.WORK: 3000, Period.REST: 600}
        assert instance.socket_path == socket_path
        assert log_level == "DEBUG"

    def test_start_failure_exits_non_zero(
        self, runner: CliRunner, socket_path: Path, config_path: Path, monkeypatch
    ) -> None:
        def fake_run(self: PomodoroDaemon, log_level: str = "INFO", log_file=None) -> None:
            raise DaemonError("Failed to start IPC server: address in use")

        monkeypatch.setattr(PomodoroDaemon, "run", fake_run)

        result = runner.invoke(
            cli, ["--socket-path", str(socket_path), "--config", str(config_path), "daemon"]
        )

        assert result.exit_code == 1
        assert "address in use" in result.output

    def test_rejects_zero_minutes(self, runner: CliRunner, socket_path: Path) -> None:
        result = runner.invoke(cli, ["--socket-path", str(socket_path), "daemon", "-w", "0"])

        assert result.exit_code == 2


class TestConfigCommands:
    """Test config commands."""

    def test_config_get(self, runner: CliRunner, config_path: Path) -> None:
        result = runner.invoke(
            cli, ["--config", str(config_path), "config", "get", "timer.work_minutes"]
        )

        assert result.exit_code == 0
        assert "25" in result.output

    def test_config_get_missing_key(self, runner: CliRunner, config_path: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_path), "config", "get", "no.such"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_config_set(self, runner: CliRunner, config_path: Path) -> None:
        result = runner.invoke(
            cli, ["--config", str(config_path), "config", "set", "timer.rest_minutes", "10"]
        )

        assert result.exit_code == 0
        assert ConfigManager(config_path).get("timer.rest_minutes") == 10

    def test_config_set_invalid(self, runner: CliRunner, config_path: Path) -> None:
        result = runner.invoke(
            cli, ["--config", str(config_path), "config", "set", "timer.rest_minutes", "0"]
        )

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_config_show_json(self, runner: CliRunner, config_path: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_path), "config", "show", "--json"])

        assert result.exit_code == 0
        assert '"work_minutes": 25' in result.output

    def test_config_reset(self, runner: CliRunner, config_path: Path) -> None:
        ConfigManager(config_path).set("timer.work_minutes", 50)

        result = runner.invoke(cli, ["--config", str(config_path), "config", "reset", "--yes"])

        assert result.exit_code == 0
        assert ConfigManager(config_path).get("timer.work_minutes") == 25
        assert config_path.with_suffix(".yml.backup").exists()

    def test_config_validate(self, runner: CliRunner, config_path: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_path), "config", "validate"])

        assert result.exit_code == 0
        assert "valid" in result.output


class TestLogsCommand:
    """Test the logs command."""

    def test_no_log_file(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["logs"])

        assert result.exit_code == 0
        assert "No log file found" in result.output

    def test_shows_last_lines(self, runner: CliRunner, isolated_home: Path) -> None:
        """Test -n limits output to the tail of the log."""
        log_file = isolated_home / ".pomodoro" / "logs" / "daemon.log"
        log_file.parent.mkdir(parents=True)
        log_file.write_text("".join(f"line {i}\n" for i in range(10)), encoding="utf-8")

        result = runner.invoke(cli, ["logs", "-n", "2"])

        assert result.exit_code == 0
        assert "line 8" in result.output
        assert "line 9" in result.output
        assert "line 7" not in result.output

    def test_rejects_zero_lines(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["logs", "-n", "0"])

        assert result.exit_code == 2
