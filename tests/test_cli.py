"""CLI scenarios through typer's test runner."""

import json
from unittest.mock import MagicMock, patch

import httpx
import pytest
from rich.console import Console
from typer.testing import CliRunner

from devflow import __version__
from devflow.cli import app, get_latest_version
from devflow.hooks import add_memory_hooks

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    monkeypatch.setattr("devflow.cli.console", Console(width=200, force_terminal=False))


@pytest.fixture(autouse=True)
def no_native_cli():
    with patch("devflow.installer.is_claude_cli_available", return_value=False):
        yield


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    path = tmp_path / "work"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


def init_args(release_tree, *extra):
    return ["init", "--no-teams", "--no-safe-delete", "--source", str(release_tree), *extra]


class TestInit:
    def test_fresh_user_install(self, home, no_git, workdir, release_tree):
        result = runner.invoke(app, init_args(release_tree))

        assert result.exit_code == 0, result.output
        assert "DevFlow installed" in result.output
        assert "/implement" in result.output
        assert (home / ".claude" / "commands" / "devflow" / "implement.md").exists()
        assert (home / ".claude" / "settings.json").exists()
        assert (workdir / ".docs" / "reviews").is_dir()

    def test_rerun_is_byte_identical(self, home, no_git, workdir, release_tree, snapshot):
        runner.invoke(app, init_args(release_tree))
        first = snapshot(home)
        result = runner.invoke(app, init_args(release_tree))
        assert result.exit_code == 0, result.output
        assert snapshot(home) == first

    def test_local_scope_outside_repository(self, home, no_git, workdir, release_tree):
        result = runner.invoke(app, init_args(release_tree, "--scope", "local"))

        assert result.exit_code == 1
        assert "Local scope requires a git repository" in result.output
        assert "git init" in result.output
        assert list(home.iterdir()) == []

    def test_invalid_scope(self, home, no_git, workdir, release_tree):
        result = runner.invoke(app, init_args(release_tree, "--scope", "global"))
        assert result.exit_code == 1
        assert "Invalid scope" in result.output

    def test_unknown_plugin(self, home, no_git, workdir, release_tree):
        result = runner.invoke(app, init_args(release_tree, "--plugin", "implement,bogus"))
        assert result.exit_code == 1
        assert "devflow-bogus" in result.output
        assert not (home / ".claude").exists()

    def test_plugin_shorthand(self, home, no_git, workdir, release_tree):
        result = runner.invoke(app, init_args(release_tree, "--plugin", "debug"))
        assert result.exit_code == 0, result.output
        commands = home / ".claude" / "commands" / "devflow"
        assert sorted(p.name for p in commands.iterdir()) == ["debug.md"]

    def test_teams_flag(self, home, no_git, workdir, release_tree):
        result = runner.invoke(app, ["init", "--teams", "--no-safe-delete", "--source", str(release_tree)])
        assert result.exit_code == 0, result.output
        settings = json.loads((home / ".claude" / "settings.json").read_text())
        assert settings["teammateMode"] == "auto"

    def test_invalid_override_env(self, home, no_git, workdir, release_tree, monkeypatch):
        monkeypatch.setenv("DEVFLOW_DIR", "relative")
        result = runner.invoke(app, init_args(release_tree))
        assert result.exit_code == 1
        assert "DEVFLOW_DIR must be an absolute path" in result.output

    def test_failed_step_exits_non_zero(self, home, no_git, workdir, release_tree):
        with patch("devflow.installer.install_settings", side_effect=PermissionError("denied")):
            result = runner.invoke(app, init_args(release_tree))
        assert result.exit_code == 1
        assert "denied" in result.output
        assert (home / ".devflow" / "manifest.json").exists()


class TestUninstall:
    def test_after_install(self, home, no_git, workdir, release_tree):
        runner.invoke(app, init_args(release_tree))
        result = runner.invoke(app, ["uninstall"])

        assert result.exit_code == 0, result.output
        assert "Uninstall complete" in result.output
        assert not (home / ".claude" / "commands" / "devflow").exists()
        assert not (home / ".devflow").exists()

    def test_non_utf8_profile_does_not_abort(self, home, no_git, workdir, release_tree):
        runner.invoke(app, init_args(release_tree))
        (home / ".bashrc").write_bytes(b"alias ll='ls -l'  # \xff\n")
        result = runner.invoke(app, ["uninstall"])
        assert result.exit_code == 0, result.output
        assert not (home / ".devflow").exists()
        assert (home / ".bashrc").read_bytes() == b"alias ll='ls -l'  # \xff\n"

    def test_legacy_cleanup(self, home, no_git, workdir, release_tree):
        runner.invoke(app, init_args(release_tree))
        legacy = home / ".claude" / "skills" / "devflow-core-patterns"
        legacy.mkdir(parents=True)
        result = runner.invoke(app, ["uninstall", "--scope", "user"])
        assert result.exit_code == 0, result.output
        assert not legacy.exists()

    def test_keep_settings(self, home, no_git, workdir, release_tree):
        runner.invoke(app, init_args(release_tree))
        settings = (home / ".claude" / "settings.json").read_text()
        runner.invoke(app, ["uninstall", "--keep-settings"])
        assert (home / ".claude" / "settings.json").read_text() == settings

    def test_selective(self, home, no_git, workdir, release_tree):
        runner.invoke(app, init_args(release_tree))
        result = runner.invoke(app, ["uninstall", "--plugin", "debug"])
        assert result.exit_code == 0, result.output
        commands = home / ".claude" / "commands" / "devflow"
        assert not (commands / "debug.md").exists()
        assert (commands / "implement.md").exists()

    def test_nothing_installed(self, home, no_git, workdir):
        result = runner.invoke(app, ["uninstall"])
        assert result.exit_code == 1
        assert "No DevFlow installation found" in result.output


class TestList:
    def test_not_installed(self, home, no_git):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "devflow-audit-claude" in result.output
        assert "(optional)" in result.output
        assert "devflow init" in result.output

    def test_marks_installed_scope(self, home, no_git, workdir, release_tree):
        runner.invoke(app, init_args(release_tree, "--plugin", "debug"))
        result = runner.invoke(app, ["list"])
        debug_line = next(line for line in result.output.splitlines() if "devflow-debug" in line)
        implement_line = next(line for line in result.output.splitlines() if "devflow-implement" in line)
        assert "user" in debug_line
        assert "user" not in implement_line

    def test_shows_enabled_features(self, home, no_git, workdir, release_tree):
        runner.invoke(app, ["init", "--teams", "--no-safe-delete", "--source", str(release_tree)])
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0, result.output
        assert "user: working memory on, ambient off, agent teams on" in result.output


class TestBuild:
    def test_build(self, shared_tree):
        result = runner.invoke(app, ["build", "--root", str(shared_tree)])
        assert result.exit_code == 0, result.output
        assert "Built 8 plugins" in result.output
        assert (shared_tree / "plugins" / "devflow-debug" / "skills" / "git-safety").is_dir()

    def test_missing_shared_dirs(self, tmp_path):
        result = runner.invoke(app, ["build", "--root", str(tmp_path)])
        assert result.exit_code == 1
        assert "shared/skills" in result.output


class TestMemoryAndAmbient:
    def test_memory_cycle(self, home):
        result = runner.invoke(app, ["memory", "--enable"])
        assert result.exit_code == 0, result.output
        settings_path = home / ".claude" / "settings.json"
        assert len(json.loads(settings_path.read_text())["hooks"]) == 3

        assert "enabled (3/3 hooks)" in runner.invoke(app, ["memory", "--status"]).output

        runner.invoke(app, ["memory", "--disable"])
        assert json.loads(settings_path.read_text()) == {}

    def test_requires_one_action(self, home):
        result = runner.invoke(app, ["memory"])
        assert result.exit_code == 1
        result = runner.invoke(app, ["memory", "--enable", "--disable"])
        assert result.exit_code == 1

    def test_refuses_malformed_settings(self, home):
        settings_path = home / ".claude" / "settings.json"
        settings_path.parent.mkdir()
        settings_path.write_text("{oops")
        result = runner.invoke(app, ["memory", "--enable"])
        assert result.exit_code == 1
        assert settings_path.read_text() == "{oops"

    def test_ambient_uses_existing_devflow_dir(self, home, tmp_path):
        custom = tmp_path / "custom-devflow"
        settings_path = home / ".claude" / "settings.json"
        settings_path.parent.mkdir()
        settings_path.write_text(json.dumps(add_memory_hooks({}, custom)))

        result = runner.invoke(app, ["ambient", "--enable"])

        assert result.exit_code == 0, result.output
        settings = json.loads(settings_path.read_text())
        command = settings["hooks"]["UserPromptSubmit"][0]["hooks"][0]["command"]
        assert command == str(custom / "scripts" / "hooks" / "ambient-prompt.sh")
        assert "Ambient mode enabled" in runner.invoke(app, ["ambient", "--status"]).output


class TestSafeDeleteCommand:
    def test_status(self, home):
        result = runner.invoke(app, ["safe-delete", "--status"])
        assert result.exit_code == 0
        assert "bash" in result.output

    def test_status_suggests_alias_when_not_installed(self, home):
        with patch("devflow.cli.detect_platform", return_value="linux"):
            result = runner.invoke(app, ["safe-delete", "--status"])
        assert "alias rm='trash-put'" in result.output

    def test_install_without_trash_fails(self, home):
        with patch("devflow.installer.has_safe_delete", return_value=False):
            result = runner.invoke(app, ["safe-delete", "--install"])
        assert result.exit_code == 1
        assert not (home / ".bashrc").exists()

    def test_install_and_remove(self, home):
        with patch("devflow.installer.has_safe_delete", return_value=True):
            assert runner.invoke(app, ["safe-delete", "--install"]).exit_code == 0
        assert (home / ".bashrc").exists()
        assert runner.invoke(app, ["safe-delete", "--remove"]).exit_code == 0
        assert not (home / ".bashrc").exists()

    def test_install_and_remove_with_non_utf8_profile(self, home):
        profile = home / ".bashrc"
        profile.write_bytes(b"export NAME=\xe9t\xe9\n")
        with patch("devflow.installer.has_safe_delete", return_value=True):
            result = runner.invoke(app, ["safe-delete", "--install"])
        assert result.exit_code == 0, result.output
        assert runner.invoke(app, ["safe-delete", "--remove"]).exit_code == 0
        assert profile.read_bytes() == b"export NAME=\xe9t\xe9\n"


class TestVersion:
    def test_version(self, home):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "Version" in result.output

    def test_check_reports_update(self, home):
        response = MagicMock(status_code=200)
        response.json.return_value = {"info": {"version": "99.0.0"}}
        with patch("devflow.cli.httpx.get", return_value=response):
            result = runner.invoke(app, ["version", "--check"])
        assert "99.0.0" in result.output
        assert "Update available" in result.output

    def test_latest_version_network_error(self):
        with patch("devflow.cli.httpx.get", side_effect=httpx.ConnectError("offline")):
            assert get_latest_version() is None


def test_no_command_shows_help():
    result = runner.invoke(app, [])
    assert result.exit_code == 0
    assert "init" in result.output
    assert __version__
