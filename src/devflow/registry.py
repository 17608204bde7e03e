"""
Asset registry - enumerates the shared skills and agents available to
plugins.

Skills are directories under ``shared/skills/`` (a ``SKILL.md`` plus any
nested reference files); agents are single ``<name>.md`` documents under
``shared/agents/``. The content is opaque to DevFlow: only names matter.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Set


AGENT_SUFFIX = ".md"


@dataclass(frozen=True)
class AssetRegistry:
    """Root of a DevFlow source tree (``shared/`` + ``plugins/``)."""

    root: Path

    @property
    def skills_dir(self) -> Path:
        return self.root / "shared" / "skills"

    @property
    def agents_dir(self) -> Path:
        return self.root / "shared" / "agents"

    @property
    def plugins_dir(self) -> Path:
        return self.root / "plugins"

    def skill_path(self, name: str) -> Path:
        return self.skills_dir / name

    def agent_path(self, name: str) -> Path:
        return self.agents_dir / f"{name}{AGENT_SUFFIX}"

    def available_skills(self) -> Set[str]:
        return get_available_skills(self.skills_dir)

    def available_agents(self) -> Set[str]:
        return get_available_agents(self.agents_dir)


def get_available_skills(skills_dir: Path) -> Set[str]:
    """Names of skill directories, ignoring hidden entries."""
    if not skills_dir.is_dir():
        return set()
    return {
        entry.name
        for entry in skills_dir.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    }


def get_available_agents(agents_dir: Path) -> Set[str]:
    """Names of agent documents (``<name>.md``) without the suffix."""
    if not agents_dir.is_dir():
        return set()
    return {
        entry.name[: -len(AGENT_SUFFIX)]
        for entry in agents_dir.iterdir()
        if entry.is_file() and entry.name.endswith(AGENT_SUFFIX)
    }
