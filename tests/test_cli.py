"""Tests for the tablefsm CLI commands."""

import sys

import pytest
import yaml
from click.testing import CliRunner
from rich.console import Console

from tablefsm import __version__
from tablefsm.cli.main import cli


@pytest.fixture
def runner(monkeypatch):
    """Create CLI test runner with a console wide enough to keep table cells on one line."""
    monkeypatch.setattr(sys.modules["tablefsm.cli.main"], "console", Console(width=200))
    return CliRunner()


@pytest.fixture
def config_file(tmp_path, machine_config_dict):
    """Write the numbers machine description to a YAML file."""
    path = tmp_path / "numbers.yaml"
    path.write_text(yaml.dump(machine_config_dict))
    return str(path)


@pytest.fixture
def invalid_config_file(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text(yaml.dump({
        "name": "broken",
        "transitions": [{"state": 0, "match": "exact", "success": 1}],
    }))
    return str(path)


class TestCLIMain:
    """Test main CLI command."""

    def test_cli_version(self, runner):
        result = runner.invoke(cli, ['--version'])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ['--help'])

        assert result.exit_code == 0
        assert 'Table FSM CLI' in result.output
        assert 'validate' in result.output
        assert 'show' in result.output
        assert 'run' in result.output


class TestValidateCommand:
    """Test validate command."""

    def test_validate_valid(self, runner, config_file):
        result = runner.invoke(cli, ['validate', config_file])

        assert result.exit_code == 0
        assert 'valid' in result.output.lower()

    def test_validate_verbose(self, runner, config_file):
        result = runner.invoke(cli, ['validate', config_file, '--verbose'])

        assert result.exit_code == 0
        assert 'Entry table: number_list' in result.output
        assert 'Tables: 2' in result.output

    def test_validate_invalid(self, runner, invalid_config_file):
        result = runner.invoke(cli, ['validate', invalid_config_file])

        assert result.exit_code == 1
        assert 'Error loading configuration' in result.output
        assert 'string' in result.output

    def test_validate_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ['validate', str(tmp_path / 'missing.yaml')])

        assert result.exit_code != 0


class TestShowCommand:
    """Test show command."""

    def test_show_all_tables(self, runner, config_file):
        result = runner.invoke(cli, ['show', config_file])

        assert result.exit_code == 0
        assert 'number_list (entry)' in result.output
        assert 'digits' in result.output

    def test_show_one_table(self, runner, config_file):
        result = runner.invoke(cli, ['show', config_file, '--table', 'number'])

        assert result.exit_code == 0
        assert 'number_list' not in result.output

    def test_show_unknown_table(self, runner, config_file):
        result = runner.invoke(cli, ['show', config_file, '--table', 'nowhere'])

        assert result.exit_code == 1
        assert 'not found' in result.output


class TestRunCommand:
    """Test run command."""

    def test_run_accepts(self, runner, config_file):
        result = runner.invoke(cli, ['run', config_file, '--input', '12,34'])

        assert result.exit_code == 0
        assert 'Accepted 5 byte(s)' in result.output
        assert 'Tokens' in result.output

    def test_run_rejects(self, runner, config_file):
        result = runner.invoke(cli, ['run', config_file, '--input', 'abc'])

        assert result.exit_code == 1
        assert 'Rejected after 0 byte(s)' in result.output
        assert 'Remaining' in result.output

    def test_run_partial_input(self, runner, config_file):
        result = runner.invoke(cli, ['run', config_file, '-i', '12;'])

        assert result.exit_code == 0
        assert 'Accepted 2 byte(s)' in result.output
        assert 'Remaining' in result.output

    def test_run_file_input(self, runner, config_file, tmp_path):
        data = tmp_path / 'input.txt'
        data.write_bytes(b'1,2,3')

        result = runner.invoke(cli, ['run', config_file, '--file', str(data)])

        assert result.exit_code == 0
        assert 'Accepted 5 byte(s)' in result.output

    def test_run_named_table(self, runner, config_file):
        result = runner.invoke(cli, ['run', config_file, '-i', '12,34', '--table', 'number'])

        assert result.exit_code == 0
        assert 'Accepted 2 byte(s)' in result.output

    def test_run_trace(self, runner, config_file):
        result = runner.invoke(cli, ['run', config_file, '-i', '1,2', '--trace'])

        assert result.exit_code == 0
        assert 'Transitions' in result.output

    def test_run_snapshot_isolation(self, runner, config_file):
        result = runner.invoke(cli, ['run', config_file, '-i', '1,2', '--isolation', 'snapshot'])

        assert result.exit_code == 0

    def test_run_requires_one_input(self, runner, config_file):
        result = runner.invoke(cli, ['run', config_file])

        assert result.exit_code == 2
        assert 'exactly one' in result.output

    def test_run_invalid_config(self, runner, invalid_config_file):
        result = runner.invoke(cli, ['run', invalid_config_file, '-i', 'x'])

        assert result.exit_code == 1
