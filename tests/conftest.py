"""
Pytest configuration and fixtures.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from devflow.plugins import DEVFLOW_PLUGINS, get_all_agent_names, get_all_skill_names


@pytest.fixture
def home(tmp_path: Path, monkeypatch) -> Path:
    """Isolated home directory with no directory overrides."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("SHELL", "/bin/bash")
    monkeypatch.delenv("CLAUDE_CODE_DIR", raising=False)
    monkeypatch.delenv("DEVFLOW_DIR", raising=False)
    monkeypatch.delenv("PSModulePath", raising=False)
    return home


@pytest.fixture
def no_git():
    """Pretend the working directory is not inside a git repository."""
    with patch("devflow.git.get_git_root", return_value=None):
        yield


@pytest.fixture
def repo(tmp_path: Path, monkeypatch) -> Path:
    """A fake git repository that is also the working directory."""
    root = tmp_path / "repo"
    root.mkdir()
    monkeypatch.chdir(root)
    with patch("devflow.git.get_git_root", return_value=root):
        yield root


@pytest.fixture
def shared_tree(tmp_path: Path) -> Path:
    """Source tree with every declared shared skill and agent."""
    root = tmp_path / "source"
    for skill in get_all_skill_names():
        skill_dir = root / "shared" / "skills" / skill
        (skill_dir / "references").mkdir(parents=True)
        (skill_dir / "SKILL.md").write_text(f"# {skill}\n")
        (skill_dir / "references" / "notes.md").write_text(f"{skill} notes\n")
    agents_dir = root / "shared" / "agents"
    agents_dir.mkdir(parents=True)
    for agent in get_all_agent_names():
        (agents_dir / f"{agent}.md").write_text(f"# {agent}\n")
    (root / "plugins").mkdir()
    return root


@pytest.fixture
def release_tree(tmp_path: Path) -> Path:
    """A built release: every plugin populated, plus hook scripts."""
    root = tmp_path / "release"
    for plugin in DEVFLOW_PLUGINS:
        plugin_dir = root / "plugins" / plugin.name
        plugin_dir.mkdir(parents=True)
        for command in plugin.commands:
            commands_dir = plugin_dir / "commands"
            commands_dir.mkdir(exist_ok=True)
            (commands_dir / f"{command.lstrip('/')}.md").write_text(f"# {command}\n")
        for agent in plugin.agents:
            agents_dir = plugin_dir / "agents"
            agents_dir.mkdir(exist_ok=True)
            (agents_dir / f"{agent}.md").write_text(f"# {agent}\n")
        for skill in plugin.skills:
            skill_dir = plugin_dir / "skills" / skill
            skill_dir.mkdir(parents=True)
            (skill_dir / "SKILL.md").write_text(f"# {skill}\n")

    hooks_dir = root / "scripts" / "hooks"
    hooks_dir.mkdir(parents=True)
    for script in ("stop-update-memory.sh", "session-start-memory.sh", "pre-compact-memory.sh"):
        (hooks_dir / script).write_text("#!/bin/sh\nexit 0\n")
    (root / "scripts" / "statusline.sh").write_text("#!/bin/sh\necho devflow\n")
    return root


@pytest.fixture
def snapshot():
    """Map of relative path -> bytes for every file under a directory."""
    def take(root: Path) -> dict:
        return {
            str(p.relative_to(root)): p.read_bytes()
            for p in sorted(root.rglob("*"))
            if p.is_file()
        }
    return take
