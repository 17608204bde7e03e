"""
Shared plugin registry - single source of truth for every CLI command.

Each plugin declares the commands it ships plus the shared skills and
agents it needs. The build step copies those shared assets into each
plugin, and the installer uses the ownership maps below so an asset is
installed once, from the first plugin that declares it.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple


PLUGIN_PREFIX = "devflow-"
CORE_SKILLS_PLUGIN = "devflow-core-skills"


@dataclass(frozen=True)
class PluginDefinition:
    """A named bundle of commands, agents and skills."""

    name: str
    description: str
    commands: Tuple[str, ...] = field(default_factory=tuple)
    agents: Tuple[str, ...] = field(default_factory=tuple)
    skills: Tuple[str, ...] = field(default_factory=tuple)
    # Optional plugins are not installed by default - require explicit --plugin
    optional: bool = False

    @property
    def short_name(self) -> str:
        return self.name[len(PLUGIN_PREFIX):] if self.name.startswith(PLUGIN_PREFIX) else self.name


# =============================================================================
# Plugin Registry
# =============================================================================

DEVFLOW_PLUGINS: Tuple[PluginDefinition, ...] = (
    PluginDefinition(
        name="devflow-core-skills",
        description="Auto-activating quality enforcement (foundation layer)",
        commands=(),
        agents=(),
        skills=(
            "accessibility", "core-patterns", "docs-framework", "frontend-design",
            "git-safety", "git-workflow", "github-patterns", "input-validation",
            "react", "test-patterns", "typescript",
        ),
    ),
    PluginDefinition(
        name="devflow-specify",
        description="Interactive feature specification",
        commands=("/specify",),
        agents=("skimmer", "synthesizer"),
        skills=("agent-teams",),
    ),
    PluginDefinition(
        name="devflow-implement",
        description="Complete task implementation workflow",
        commands=("/implement",),
        agents=(
            "git", "skimmer", "synthesizer", "coder", "simplifier",
            "scrutinizer", "shepherd", "validator",
        ),
        skills=(
            "accessibility", "agent-teams", "frontend-design",
            "implementation-patterns", "self-review",
        ),
    ),
    PluginDefinition(
        name="devflow-code-review",
        description="Comprehensive code review",
        commands=("/code-review",),
        agents=("git", "reviewer", "synthesizer"),
        skills=(
            "accessibility", "agent-teams", "architecture-patterns",
            "complexity-patterns", "consistency-patterns", "database-patterns",
            "dependencies-patterns", "documentation-patterns", "frontend-design",
            "performance-patterns", "react", "regression-patterns",
            "review-methodology", "security-patterns", "test-patterns",
        ),
    ),
    PluginDefinition(
        name="devflow-resolve",
        description="Process and fix review issues",
        commands=("/resolve",),
        agents=("git", "resolver", "simplifier"),
        skills=("agent-teams", "implementation-patterns", "security-patterns"),
    ),
    PluginDefinition(
        name="devflow-debug",
        description="Debugging with competing hypotheses",
        commands=("/debug",),
        agents=("git",),
        skills=("agent-teams", "git-safety"),
    ),
    PluginDefinition(
        name="devflow-self-review",
        description="Self-review workflow (Simplifier + Scrutinizer)",
        commands=("/self-review",),
        agents=("simplifier", "scrutinizer", "validator"),
        skills=("self-review", "core-patterns"),
    ),
    PluginDefinition(
        name="devflow-audit-claude",
        description="Audit CLAUDE.md files against Anthropic best practices",
        commands=("/audit-claude",),
        agents=("claude-md-auditor",),
        skills=(),
        optional=True,
    ),
)

# Deprecated command names from old installations.
# Removed during init so upgrades don't leave stale command files behind.
LEGACY_COMMAND_NAMES: Tuple[str, ...] = (
    "review",
)

# Deprecated skill names from old installations.
# Removed during uninstall (and on full re-install) to clean up legacy installs.
LEGACY_SKILL_NAMES: Tuple[str, ...] = (
    "devflow-core-patterns",
    "devflow-review-methodology",
    "devflow-docs-framework",
    "devflow-git-safety",
    "devflow-github-patterns",
    "devflow-implementation-patterns",
    "devflow-codebase-navigation",
    "devflow-test-design",
    "devflow-code-smell",
    "devflow-commit",
    "devflow-pull-request",
    "devflow-input-validation",
    "devflow-self-review",
    "devflow-typescript",
    "devflow-react",
    "devflow-architecture-patterns",
    "devflow-complexity-patterns",
    "devflow-consistency-patterns",
    "devflow-database-patterns",
    "devflow-dependencies-patterns",
    "devflow-documentation-patterns",
    "devflow-performance-patterns",
    "devflow-regression-patterns",
    "devflow-security-patterns",
    "devflow-tests-patterns",
    "devflow-pattern-check",
    "devflow-error-handling",
    "devflow-debug",
    "devflow-accessibility",
    "devflow-frontend-design",
    "devflow-agent-teams",
    # v1.0.0 consolidation: unprefixed names from pre-v1.0.0 installs
    "codebase-navigation",
    "test-design",
    "code-smell",
    "commit",
    "pull-request",
    "tests-patterns",
)


# =============================================================================
# Lookups
# =============================================================================

def get_plugin(name: str, plugins: Sequence[PluginDefinition] = DEVFLOW_PLUGINS) -> Optional[PluginDefinition]:
    """Return the plugin with the given full name, or None."""
    for plugin in plugins:
        if plugin.name == name:
            return plugin
    return None


def _unique(names: Iterable[str]) -> List[str]:
    seen: Dict[str, None] = {}
    for name in names:
        seen.setdefault(name, None)
    return list(seen)


def get_all_skill_names(plugins: Sequence[PluginDefinition] = DEVFLOW_PLUGINS) -> List[str]:
    """Derive unique skill names from all plugins, in declaration order."""
    return _unique(skill for plugin in plugins for skill in plugin.skills)


def get_all_agent_names(plugins: Sequence[PluginDefinition] = DEVFLOW_PLUGINS) -> List[str]:
    """Derive unique agent names from all plugins, in declaration order."""
    return _unique(agent for plugin in plugins for agent in plugin.agents)


def get_all_command_names(plugins: Sequence[PluginDefinition] = DEVFLOW_PLUGINS) -> List[str]:
    """Command file stems (``/code-review`` -> ``code-review``) across all plugins."""
    return _unique(cmd.lstrip("/") for plugin in plugins for cmd in plugin.commands)


def build_asset_maps(plugins: Sequence[PluginDefinition]) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Map every skill and agent to the first plugin that declares it.

    The maps answer "where did this asset come from" and let the installer
    copy each asset exactly once.

    Returns (skills_map, agents_map).
    """
    skills_map: Dict[str, str] = {}
    agents_map: Dict[str, str] = {}
    for plugin in plugins:
        for skill in plugin.skills:
            skills_map.setdefault(skill, plugin.name)
        for agent in plugin.agents:
            agents_map.setdefault(agent, plugin.name)
    return skills_map, agents_map


# =============================================================================
# Selection
# =============================================================================

def normalize_plugin_name(name: str) -> str:
    """Allow shorthand names: ``implement`` -> ``devflow-implement``."""
    name = name.strip()
    return name if name.startswith(PLUGIN_PREFIX) else f"{PLUGIN_PREFIX}{name}"


def parse_plugin_selection(
    raw: str,
    plugins: Sequence[PluginDefinition] = DEVFLOW_PLUGINS,
) -> Tuple[List[str], List[str]]:
    """Parse a comma-separated ``--plugin`` value.

    Returns (selected, invalid) where ``invalid`` lists the normalized
    names that are not in the registry.
    """
    selected = [normalize_plugin_name(part) for part in raw.split(",") if part.strip()]
    valid = {p.name for p in plugins}
    invalid = [name for name in selected if name not in valid]
    return selected, invalid


def resolve_plugins_to_install(
    selected: Sequence[str],
    plugins: Sequence[PluginDefinition] = DEVFLOW_PLUGINS,
) -> List[PluginDefinition]:
    """Determine which plugins an install should deploy.

    An explicit selection installs exactly those plugins; an empty
    selection installs every non-optional plugin. The core-skills plugin
    is always included when anything is installed.
    """
    if selected:
        chosen = [p for p in plugins if p.name in selected]
    else:
        chosen = [p for p in plugins if not p.optional]

    core = get_plugin(CORE_SKILLS_PLUGIN, plugins)
    if chosen and core is not None and core not in chosen:
        chosen = [core] + chosen
    return chosen
