"""
Legacy cleanup and teardown.

Upgrades remove commands and skills that earlier releases installed under
names that no longer exist. Uninstall removes every currently declared
asset plus every legacy one. Deletion means "ensure gone": an asset that
is already absent is not an error.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

from . import hooks
from .plugins import (
    DEVFLOW_PLUGINS,
    LEGACY_COMMAND_NAMES,
    LEGACY_SKILL_NAMES,
    PluginDefinition,
    get_all_agent_names,
    get_all_skill_names,
)
from .settings import SETTINGS_FILENAME, load_settings, save_settings, strip_teams_config

logger = logging.getLogger(__name__)

NAMESPACE = "devflow"
STATUSLINE_MARKER = "statusline.sh"


@dataclass
class AssetsToRemove:
    commands: List[str] = field(default_factory=list)
    agents: List[str] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)


@dataclass
class TeardownResult:
    removed: List[Path] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


# =============================================================================
# Layout of an installed Claude directory
# =============================================================================

def commands_dir(claude_dir: Path) -> Path:
    return claude_dir / "commands" / NAMESPACE


def agents_dir(claude_dir: Path) -> Path:
    return claude_dir / "agents" / NAMESPACE


def skill_dir(claude_dir: Path, name: str) -> Path:
    return claude_dir / "skills" / name


def command_file(claude_dir: Path, command: str) -> Path:
    return commands_dir(claude_dir) / f"{command.lstrip('/')}.md"


def is_devflow_installed(claude_dir: Path) -> bool:
    return commands_dir(claude_dir).is_dir() or agents_dir(claude_dir).is_dir()


def ensure_gone(path: Path) -> bool:
    """Delete a file, symlink or directory tree.

    Returns True if something was removed, False if it was already absent.
    """
    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif path.is_dir():
            shutil.rmtree(path)
        else:
            return False
    except FileNotFoundError:
        return False
    return True


def _remove_all(paths: Sequence[Path], result: TeardownResult) -> None:
    for path in paths:
        try:
            if ensure_gone(path):
                result.removed.append(path)
        except OSError as e:
            result.errors.append(f"Could not remove {path}: {e}")


# =============================================================================
# Upgrade
# =============================================================================

def remove_legacy_commands(claude_dir: Path) -> TeardownResult:
    """Remove command files that were renamed in later releases."""
    result = TeardownResult()
    _remove_all([command_file(claude_dir, name) for name in LEGACY_COMMAND_NAMES], result)
    return result


def remove_legacy_skills(claude_dir: Path) -> TeardownResult:
    """Remove skills installed under deprecated names.

    Also removes the old nested ``skills/devflow/`` layout.
    """
    result = TeardownResult()
    paths = [skill_dir(claude_dir, name) for name in LEGACY_SKILL_NAMES]
    paths.append(claude_dir / "skills" / NAMESPACE)
    _remove_all(paths, result)
    return result


# =============================================================================
# Uninstall
# =============================================================================

def compute_assets_to_remove(
    selected: Sequence[PluginDefinition],
    all_plugins: Sequence[PluginDefinition] = DEVFLOW_PLUGINS,
) -> AssetsToRemove:
    """Assets to delete when uninstalling only some plugins.

    Commands of the selected plugins always go; skills and agents go only
    when no remaining plugin still declares them.
    """
    selected_names = {p.name for p in selected}
    remaining = [p for p in all_plugins if p.name not in selected_names]
    retained_skills = set(get_all_skill_names(remaining))
    retained_agents = set(get_all_agent_names(remaining))

    return AssetsToRemove(
        commands=[c for p in selected for c in p.commands if c],
        agents=[a for a in get_all_agent_names(selected) if a not in retained_agents],
        skills=[s for s in get_all_skill_names(selected) if s not in retained_skills],
    )


def remove_plugin_assets(claude_dir: Path, assets: AssetsToRemove) -> TeardownResult:
    result = TeardownResult()
    paths = [command_file(claude_dir, c) for c in assets.commands]
    paths += [agents_dir(claude_dir) / f"{a}.md" for a in assets.agents]
    paths += [skill_dir(claude_dir, s) for s in assets.skills]
    _remove_all(paths, result)
    return result


def strip_devflow_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Remove everything DevFlow adds to settings.json, keeping user keys."""
    cleaned = hooks.remove_ambient_hook(hooks.remove_memory_hooks(settings))
    cleaned = strip_teams_config(cleaned)
    status_line = cleaned.get("statusLine")
    if isinstance(status_line, dict) and STATUSLINE_MARKER in str(status_line.get("command", "")):
        del cleaned["statusLine"]
    return cleaned


def clean_settings(claude_dir: Path) -> bool:
    """Strip DevFlow's additions from settings.json.

    The file is deleted when nothing else is left in it. Returns True if
    the file changed.
    """
    path = claude_dir / SETTINGS_FILENAME
    settings = load_settings(path)
    if settings is None:
        return False

    cleaned = strip_devflow_settings(settings)
    if cleaned == settings:
        return False
    if cleaned:
        save_settings(path, cleaned)
    else:
        path.unlink()
    return True


def full_teardown(
    claude_dir: Path,
    devflow_dir: Path,
    plugins: Sequence[PluginDefinition] = DEVFLOW_PLUGINS,
    keep_settings: bool = False,
) -> TeardownResult:
    """Remove every DevFlow-owned file from a scope.

    Covers the namespaced command and agent directories, every declared
    and legacy skill, and the devflow directory itself. Unless
    ``keep_settings`` is set, DevFlow's additions to settings.json go too.
    """
    result = TeardownResult()
    paths = [commands_dir(claude_dir), agents_dir(claude_dir)]
    paths += [skill_dir(claude_dir, s) for s in get_all_skill_names(plugins)]
    paths += [skill_dir(claude_dir, s) for s in LEGACY_SKILL_NAMES]
    paths.append(claude_dir / "skills" / NAMESPACE)
    paths.append(devflow_dir)
    _remove_all(paths, result)
    if keep_settings:
        return result

    try:
        if clean_settings(claude_dir):
            logger.info("Removed DevFlow configuration from settings.json")
    except OSError as e:
        result.errors.append(f"Could not clean settings.json: {e}")

    logger.debug("Teardown removed %d paths", len(result.removed))
    return result
