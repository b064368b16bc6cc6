"""Tests for quicktasks.cli module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from quicktasks.cli import main
from quicktasks.config import QuickTasksConfig


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


class TestMainGroup:
    """Tests for main CLI group."""

    def test_version(self, cli_runner: CliRunner) -> None:
        """Test --version option."""
        result = cli_runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "quicktasks" in result.output
        assert "0.1.0" in result.output

    def test_help(self, cli_runner: CliRunner) -> None:
        """Test --help option."""
        result = cli_runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "tiny task tracker" in result.output

    def test_missing_config(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test an explicit config path that doesn't exist."""
        result = cli_runner.invoke(main, ["--config", "nope.json", "run", "-"], input="")
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_invalid_config(self, cli_runner: CliRunner, temp_config_dir: Path) -> None:
        """Test a config file with bad values."""
        (temp_config_dir / "config.json").write_text(
            json.dumps({"store": {"id_strategy": "dice"}})
        )
        result = cli_runner.invoke(main, ["run", "-"], input="")
        assert result.exit_code == 1
        assert "Invalid config" in result.output

    def test_malformed_config(self, cli_runner: CliRunner, temp_config_dir: Path) -> None:
        """Test a config file that isn't JSON."""
        (temp_config_dir / "config.json").write_text("{not json")
        result = cli_runner.invoke(main, ["run", "-"], input="")
        assert result.exit_code == 1
        assert "Invalid config" in result.output

    def test_no_subcommand_starts_shell(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test that running without a command opens the shell."""
        result = cli_runner.invoke(main, [], input="add Buy milk\nquit\n")
        assert result.exit_code == 0
        assert "Buy milk" in result.output
        assert "Bye." in result.output


class TestShellCommand:
    """Tests for the shell command."""

    def test_session(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test a short interactive session."""
        result = cli_runner.invoke(
            main,
            ["shell"],
            input="add Buy milk\nadd Finish course project\ndone 1\nstats\nquit\n",
        )
        assert result.exit_code == 0
        assert "Type 'help' for commands" in result.output
        assert "Completion: 50%" in result.output
        assert "Bye." in result.output

    def test_end_of_input(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test the shell exits cleanly at end of input."""
        result = cli_runner.invoke(main, ["shell"], input="add Buy milk\n")
        assert result.exit_code == 0
        assert "Bye." in result.output

    def test_errors_do_not_exit(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test bad commands are reported and the session goes on."""
        result = cli_runner.invoke(main, ["shell"], input="jump\nadd Still here\nquit\n")
        assert result.exit_code == 0
        assert "Unknown command" in result.output
        assert "Still here" in result.output

    def test_demo(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test --demo seeds the sample tasks."""
        result = cli_runner.invoke(main, ["--demo", "shell"], input="quit\n")
        assert result.exit_code == 0
        assert "Buy milk" in result.output
        assert "Finish course project" in result.output


class TestRunCommand:
    """Tests for the run command."""

    def test_scenario_from_stdin(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test the buy-milk scenario piped through stdin."""
        script = "add Buy milk\nadd Finish course project\ndone 1\n"
        result = cli_runner.invoke(main, ["run", "-", "--screen", "stats"], input=script)

        assert result.exit_code == 0
        assert "Total tasks: 2" in result.output
        assert "Done tasks: 1" in result.output
        assert "Completion: 50%" in result.output

    def test_script_file(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test running commands from a file."""
        script = temp_project / "script.txt"
        script.write_text("# warm-up\nadd Water plants\n\nadd Read\nrm 1\n")

        result = cli_runner.invoke(main, ["run", str(script)])

        assert result.exit_code == 0
        assert "Water plants" in result.output
        assert "Read" not in result.output

    def test_last_screen_by_default(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test the final screen is the last one selected."""
        result = cli_runner.invoke(main, ["run", "-"], input="settings\nmotivation off\n")

        assert result.exit_code == 0
        assert result.output.count("Preferences") == 2
        assert "[off]" in result.output

    def test_missing_script(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test a script path that doesn't exist."""
        result = cli_runner.invoke(main, ["run", "missing.txt"])
        assert result.exit_code == 2

    def test_strict_config(self, cli_runner: CliRunner, temp_config_dir: Path) -> None:
        """Test strict titles from config surface as errors."""
        config = QuickTasksConfig.model_validate({"store": {"strict_titles": True}})
        config.save(temp_config_dir / "config.json")

        result = cli_runner.invoke(main, ["run", "-"], input="add   \n")

        assert result.exit_code == 0
        assert "must not be blank" in result.output

    def test_broken_stats_template(
        self, cli_runner: CliRunner, temp_config_dir: Path
    ) -> None:
        """Test a stats template that doesn't parse is reported, not raised."""
        template = temp_config_dir / "stats.j2"
        template.write_text("{{ stats.total ")
        config = QuickTasksConfig.model_validate(
            {"display": {"stats_template_path": str(template)}}
        )
        config.save(temp_config_dir / "config.json")

        result = cli_runner.invoke(main, ["run", "-", "--screen", "stats"], input="stats\n")

        assert result.exit_code == 1
        assert "Stats template failed" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_config_settings(
        self, cli_runner: CliRunner, sample_config_file: Path
    ) -> None:
        """Test display and seed settings from the config file."""
        result = cli_runner.invoke(main, ["run", "-", "--screen", "stats"], input="")

        assert result.exit_code == 0
        assert "1/2 done (50%)" in result.output

    def test_motivation_from_config(
        self, cli_runner: CliRunner, sample_config_file: Path
    ) -> None:
        """Test the preference starts from config."""
        result = cli_runner.invoke(main, ["run", "-"], input="motivation on\n")

        assert result.exit_code == 0
        assert "Keep going!" in result.output


class TestConfigCommands:
    """Tests for the config command group."""

    def test_show_defaults(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test config show prints the effective config."""
        result = cli_runner.invoke(main, ["config", "show"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["store"]["notify_policy"] == "always"
        assert data["display"]["show_motivation"] is True

    def test_show_loaded(self, cli_runner: CliRunner, sample_config_file: Path) -> None:
        """Test config show reflects the config file."""
        result = cli_runner.invoke(main, ["config", "show"])

        assert result.exit_code == 0
        assert json.loads(result.output)["store"]["id_start"] == 100

    def test_init_creates_config(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test config init writes the default config."""
        result = cli_runner.invoke(main, ["config", "init"])

        assert result.exit_code == 0
        assert "Configuration saved" in result.output
        path = temp_project / ".quicktasks" / "config.json"
        assert QuickTasksConfig.load(path) == QuickTasksConfig()

    def test_init_custom_path(self, cli_runner: CliRunner, temp_project: Path) -> None:
        """Test config init honours --config even if the file is new."""
        result = cli_runner.invoke(main, ["--config", "custom.json", "config", "init"])

        assert result.exit_code == 0
        assert (temp_project / "custom.json").exists()

    def test_init_existing(self, cli_runner: CliRunner, sample_config_file: Path) -> None:
        """Test config init leaves an existing file alone."""
        before = sample_config_file.read_text()
        result = cli_runner.invoke(main, ["config", "init"])

        assert result.exit_code == 0
        assert "already exists" in result.output
        assert sample_config_file.read_text() == before

    def test_init_force(self, cli_runner: CliRunner, sample_config_file: Path) -> None:
        """Test config init --force overwrites."""
        result = cli_runner.invoke(main, ["config", "init", "--force"])

        assert result.exit_code == 0
        assert QuickTasksConfig.load(sample_config_file) == QuickTasksConfig()

    def test_init_force_repairs_broken_config(
        self, cli_runner: CliRunner, temp_config_dir: Path
    ) -> None:
        """Test config init --force replaces a file that doesn't parse."""
        path = temp_config_dir / "config.json"
        path.write_text("{broken")

        result = cli_runner.invoke(main, ["config", "init", "--force"])

        assert result.exit_code == 0
        assert "Configuration saved" in result.output
        assert QuickTasksConfig.load(path) == QuickTasksConfig()

    def test_show_broken_config(self, cli_runner: CliRunner, temp_config_dir: Path) -> None:
        """Test config show reports a file that doesn't parse."""
        (temp_config_dir / "config.json").write_text("{broken")

        result = cli_runner.invoke(main, ["config", "show"])

        assert result.exit_code == 1
        assert "Invalid config" in result.output
