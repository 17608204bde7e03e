"""
Build-time asset distribution.

Copies skills from ``shared/skills/`` and agents from ``shared/agents/``
into each plugin's own directory, based on the ``skills`` and ``agents``
declared in the plugin registry. This keeps a single copy of every asset
in version control while still shipping self-contained plugins.

Each plugin's ``skills/`` directory is wiped and rebuilt so renamed or
dropped declarations never leave stale skills behind. ``agents/`` is not
wiped: plugin-specific, hand-authored agents live there too.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from .errors import BuildError
from .plugins import DEVFLOW_PLUGINS, PluginDefinition
from .registry import AGENT_SUFFIX, AssetRegistry

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Per-plugin build report."""

    plugin: str
    skills_copied: List[str] = field(default_factory=list)
    agents_copied: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        """One-line summary in the style ``name: 3 skills, 1 agents copied``."""
        parts = []
        if self.skills_copied:
            parts.append(f"{len(self.skills_copied)} skills")
        if self.agents_copied:
            parts.append(f"{len(self.agents_copied)} agents")
        if not parts and self.ok:
            return f"{self.plugin}: (no shared assets)"
        line = f"{self.plugin}: {', '.join(parts) or 'nothing'} copied"
        if self.errors:
            line += f", {len(self.errors)} errors"
        return line


def copy_directory(src: Path, dest: Path) -> None:
    """Recursively copy a directory tree, overwriting files that exist."""
    shutil.copytree(src, dest, dirs_exist_ok=True)


def build_plugin(
    plugin: PluginDefinition,
    registry: AssetRegistry,
    available_skills: set,
    available_agents: set,
) -> BuildResult:
    """Copy the shared assets one plugin declares into its directory.

    A missing or uncopyable asset is recorded as an error and skipped;
    the remaining assets are still processed.
    """
    result = BuildResult(plugin=plugin.name)
    plugin_dir = registry.plugins_dir / plugin.name

    skills_dir = plugin_dir / "skills"
    try:
        if skills_dir.exists():
            shutil.rmtree(skills_dir)
        if plugin.skills:
            skills_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        result.errors.append(f"Failed to reset {skills_dir}: {e}")
        return result

    for skill in plugin.skills:
        if skill not in available_skills:
            result.errors.append(f'Skill "{skill}" not found in shared/skills/')
            continue
        try:
            copy_directory(registry.skill_path(skill), skills_dir / skill)
            result.skills_copied.append(skill)
        except (OSError, shutil.Error) as e:
            result.errors.append(f'Failed to copy skill "{skill}": {e}')

    if plugin.agents:
        agents_dir = plugin_dir / "agents"
        agents_dir.mkdir(parents=True, exist_ok=True)
        for agent in plugin.agents:
            if agent not in available_agents:
                result.errors.append(f'Agent "{agent}" not found in shared/agents/')
                continue
            try:
                shutil.copyfile(registry.agent_path(agent), agents_dir / f"{agent}{AGENT_SUFFIX}")
                result.agents_copied.append(agent)
            except OSError as e:
                result.errors.append(f'Failed to copy agent "{agent}": {e}')

    logger.debug("Built %s", result.summary())
    return result


def build_plugins(
    root: Path,
    plugins: Sequence[PluginDefinition] = DEVFLOW_PLUGINS,
) -> List[BuildResult]:
    """Run the build over every plugin in the registry.

    Raises BuildError if the shared source directories do not exist.
    Per-plugin failures never stop the other plugins; callers check
    ``BuildResult.errors`` to decide the exit status.
    """
    registry = AssetRegistry(root)
    if not registry.skills_dir.is_dir():
        raise BuildError(
            f"shared/skills/ directory not found at {registry.skills_dir}",
            hint="Run the build from the repository root or pass --root",
        )
    if not registry.agents_dir.is_dir():
        raise BuildError(
            f"shared/agents/ directory not found at {registry.agents_dir}",
            hint="Run the build from the repository root or pass --root",
        )

    available_skills = registry.available_skills()
    available_agents = registry.available_agents()
    logger.info("Found %d skills in shared/skills/", len(available_skills))
    logger.info("Found %d agents in shared/agents/", len(available_agents))

    return [
        build_plugin(plugin, registry, available_skills, available_agents)
        for plugin in plugins
    ]
