"""
Tests for the symloader command line.
"""

import json

import pytest
from typer.testing import CliRunner

from symloader.cli.config import CLIConfig
from symloader.cli.output import get_console
from symloader.main import app, EXIT_FAILED, EXIT_NOT_FOUND


runner = CliRunner()


@pytest.fixture(autouse=True)
def machine_mode():
    """Each test starts from the default (machine) output mode."""
    CLIConfig.set_machine_mode(None)
    yield
    CLIConfig.set_machine_mode(None)


def run_json(args):
    result = runner.invoke(app, args + ["--json"])
    return result, json.loads(result.stdout)


class TestResolveCommand:

    def test_resolves_locally(self, plugin_dirs):
        dir_a, dir_b = plugin_dirs
        result, payload = run_json(["resolve", "shapes.square", "-p", str(dir_a), "-p", str(dir_b)])

        assert result.exit_code == 0
        assert payload["status"] == "ok"
        assert payload["origin"] == "local"
        assert payload["file"] == str(dir_b / "shapes" / "square.py")

    def test_resolves_through_parent(self, plugin_dirs):
        dir_a, _ = plugin_dirs
        result, payload = run_json(["resolve", "json", "-p", str(dir_a)])

        assert result.exit_code == 0
        assert payload["origin"] == "parent"
        assert payload["file"].endswith("__init__.py")

    def test_exclusion_forces_parent(self, temp_dir):
        (temp_dir / "json.py").write_text("SHADOW = True\n")

        result, payload = run_json(["resolve", "json", "-p", str(temp_dir), "-x", "json"])

        assert result.exit_code == 0
        assert payload["origin"] == "parent"
        assert payload["exclusions"] == ["json"]
        assert payload["file"] != str(temp_dir / "json.py")

    def test_not_found(self, plugin_dirs):
        dir_a, _ = plugin_dirs
        result, payload = run_json(["resolve", "json", "-p", str(dir_a), "--parent", "none"])

        assert result.exit_code == EXIT_NOT_FOUND
        assert payload["code"] == "SYMBOL_NOT_FOUND"
        assert payload["input"] == "json"

    def test_construction_error(self, temp_dir):
        (temp_dir / "broken.py").write_text("def (:\n")

        result, payload = run_json(["resolve", "broken", "-p", str(temp_dir)])

        assert result.exit_code == EXIT_FAILED
        assert payload["code"] == "CONSTRUCTION_FAILED"

    def test_unknown_parent(self, temp_dir):
        result, payload = run_json(["resolve", "x", "-p", str(temp_dir), "--parent", "cloud"])

        assert result.exit_code == EXIT_FAILED
        assert payload["code"] == "INVALID_ARGUMENT"

    def test_plain_machine_output(self, plugin_dirs):
        dir_a, _ = plugin_dirs
        result = runner.invoke(app, ["resolve", "shapes.circle", "-p", str(dir_a)])

        assert result.exit_code == 0
        assert result.stdout.strip() == f"shapes.circle local {dir_a / 'shapes' / 'circle.py'}"

    def test_human_output(self, plugin_dirs):
        dir_a, _ = plugin_dirs
        result = runner.invoke(app, ["--human", "resolve", "shapes.circle", "-p", str(dir_a)])

        assert result.exit_code == 0
        assert "local" in result.stdout


class TestLocateCommand:

    def test_lists_all_definitions_in_order(self, plugin_dirs):
        dir_a, dir_b = plugin_dirs
        result, payload = run_json(["locate", "shapes.circle", "-p", str(dir_a), "-p", str(dir_b)])

        assert result.exit_code == 0
        assert [m["position"] for m in payload["matches"]] == [0, 1]
        assert payload["matches"][0]["location"] == f"dir:{dir_a}"
        assert payload["matches"][1]["kind"] == "module"

    def test_no_definitions(self, plugin_dirs):
        dir_a, _ = plugin_dirs
        result, payload = run_json(["locate", "nothing.here", "-p", str(dir_a)])

        assert result.exit_code == EXIT_NOT_FOUND
        assert payload["matches"] == []


class TestConfigCommand:

    def test_json(self, monkeypatch):
        monkeypatch.setenv("SYMLOADER_LOCK_STRATEGY", "global")
        result, payload = run_json(["config"])

        assert result.exit_code == 0
        assert payload["lock_strategy"] == "global"

    def test_invalid(self, monkeypatch):
        monkeypatch.setenv("SYMLOADER_LOCK_STRATEGY", "bogus")
        result, payload = run_json(["config"])

        assert result.exit_code == EXIT_FAILED
        assert payload["code"] == "INVALID_CONFIG"

    def test_plain(self):
        result = runner.invoke(app, ["config"])
        assert "lock_strategy=per_name" in result.stdout
        assert "suffixes=.py" in result.stdout.splitlines()


class TestMachineOutputKeepsBrackets:

    @pytest.fixture
    def bracket_dir(self, temp_dir):
        root = temp_dir / "plug[ins]"
        root.mkdir()
        (root / "widget.py").write_text("X = 1\n")
        return root

    def test_resolve(self, bracket_dir):
        result = runner.invoke(app, ["resolve", "widget", "-p", str(bracket_dir)])

        assert result.exit_code == 0
        assert result.stdout.strip() == f"widget local {bracket_dir / 'widget.py'}"

    def test_locate(self, bracket_dir):
        result = runner.invoke(app, ["locate", "widget", "-p", str(bracket_dir)])

        assert result.exit_code == 0
        assert result.stdout.strip() == f"0 dir:{bracket_dir} {bracket_dir / 'widget.py'}"

    def test_console_passes_strings_through(self, capsys):
        get_console().print("key=[a] [b]")
        assert capsys.readouterr().out == "key=[a] [b]\n"
