"""
Installer orchestration.

``run_install`` walks a fixed sequence of steps::

    resolving scope -> installing plugins -> writing settings ->
    writing static templates -> creating aux dirs ->
    (optional) installing shell hook -> recording install -> done

Scope resolution is fatal: a PathConfigError propagates and nothing else
runs. Every later step is independent: its failure is recorded in the
report and the remaining steps still run. Every step is safe to re-run,
so an interrupted install is recovered by running it again.
"""

import importlib.resources
import logging
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from . import __version__, git
from .config import installed_plugin_names, load_manifest, save_manifest
from .errors import DevFlowError, InstallError
from .migrate import (
    TeardownResult,
    agents_dir,
    commands_dir,
    compute_assets_to_remove,
    ensure_gone,
    full_teardown,
    is_devflow_installed,
    remove_legacy_commands,
    remove_legacy_skills,
    remove_plugin_assets,
    skill_dir,
)
from .paths import SCOPE_LOCAL, SCOPE_USER, InstallationPaths, get_installation_paths
from .plugins import (
    DEVFLOW_PLUGINS,
    PluginDefinition,
    build_asset_maps,
    get_all_skill_names,
    get_plugin,
    resolve_plugins_to_install,
)
from .post_install import (
    CLAUDE_MD,
    create_docs_structure,
    install_claude_md,
    install_claudeignore,
    update_gitignore,
)
from .registry import AGENT_SUFFIX
from .safe_delete import (
    detect_platform,
    detect_shell,
    get_profile_path,
    get_safe_delete_info,
    has_safe_delete,
)
from .settings import SettingsOutcome, install_settings
from .shell_hook import (
    generate_safe_delete_block,
    install_to_profile,
    is_already_installed,
    remove_from_profile,
)

logger = logging.getLogger(__name__)

MARKETPLACE_SOURCE = "dean0x/devflow"
MARKETPLACE_NAME = "dean0x-devflow"
SCRIPT_MODE = 0o755


class InstallStep(str, Enum):
    RESOLVING_SCOPE = "Resolving scope"
    INSTALLING_PLUGINS = "Installing plugins"
    WRITING_SETTINGS = "Writing settings"
    WRITING_STATIC_TEMPLATES = "Writing static templates"
    CREATING_AUX_DIRS = "Creating auxiliary directories"
    INSTALLING_SHELL_HOOK = "Installing shell hook"
    REMOVING_SHELL_HOOK = "Removing shell hook"
    RECORDING_INSTALL = "Recording installation"


class StepStatus(str, Enum):
    OK = "ok"
    SKIPPED = "skipped"
    WARNING = "warning"
    FAILED = "failed"


@dataclass
class StepResult:
    step: InstallStep
    status: StepStatus
    message: str = ""
    details: List[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.status is StepStatus.FAILED


@dataclass
class CopiedAssets:
    commands: List[str] = field(default_factory=list)
    agents: List[str] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    # selected plugins with no built tree under the source directory
    missing: List[str] = field(default_factory=list)


@dataclass
class InstallOptions:
    scope: str = SCOPE_USER
    plugins: List[str] = field(default_factory=list)
    override_settings: bool = False
    teams: bool = False
    safe_delete: bool = False
    skip_docs: bool = False
    source_dir: Optional[Path] = None
    cwd: Optional[Path] = None
    use_native_cli: bool = True
    interactive: Optional[bool] = None
    confirm: Optional[Callable[[str], bool]] = None


@dataclass
class InstallReport:
    scope: str
    paths: InstallationPaths
    plugins: List[PluginDefinition]
    method: str = "copy"
    steps: List[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not any(s.failed for s in self.steps)

    @property
    def failures(self) -> List[StepResult]:
        return [s for s in self.steps if s.failed]

    @property
    def commands(self) -> List[str]:
        return [c for p in self.plugins for c in p.commands if c]


# =============================================================================
# Package resources
# =============================================================================

def get_templates_dir() -> Path:
    """Templates bundled with the package (settings.json, CLAUDE.md, ...)."""
    return Path(str(importlib.resources.files("devflow").joinpath("templates")))


def get_default_source_dir() -> Path:
    """Release tree holding built plugins, shared assets and scripts."""
    return Path(str(importlib.resources.files("devflow").joinpath("assets")))


# =============================================================================
# Plugin installation
# =============================================================================

def is_claude_cli_available() -> bool:
    return shutil.which("claude") is not None


def _run_claude(args: Sequence[str]) -> bool:
    try:
        result = subprocess.run(["claude", *args], capture_output=True, text=True)
    except OSError as e:
        logger.debug("claude CLI failed to start: %s", e)
        return False
    if result.returncode != 0:
        logger.debug("claude %s failed: %s", " ".join(args), (result.stderr or "").strip()[:200])
    return result.returncode == 0


def install_via_cli(plugins: Sequence[PluginDefinition], scope: str) -> bool:
    """Install through Claude Code's native plugin system.

    Adding the marketplace is idempotent. Returns False at the first
    failure so the caller can fall back to copying files.
    """
    if not _run_claude(["plugin", "marketplace", "add", MARKETPLACE_SOURCE]):
        return False
    cli_scope = "project" if scope == SCOPE_LOCAL else "user"
    for plugin in plugins:
        if not _run_claude(["plugin", "install", f"{plugin.name}@{MARKETPLACE_NAME}", "--scope", cli_scope]):
            return False
    return True


def chmod_recursive(directory: Path, mode: int) -> None:
    for path in directory.rglob("*"):
        if path.is_file():
            path.chmod(mode)


def install_scripts(source_dir: Path, devflow_dir: Path) -> int:
    """Copy hook and statusline scripts and make them executable."""
    scripts_source = source_dir / "scripts"
    if not scripts_source.is_dir():
        return 0
    target = devflow_dir / "scripts"
    shutil.copytree(scripts_source, target, dirs_exist_ok=True, ignore=shutil.ignore_patterns(".gitkeep"))
    chmod_recursive(target, SCRIPT_MODE)
    return sum(1 for p in target.rglob("*") if p.is_file())


def _clean_previous_install(claude_dir: Path) -> None:
    for directory in (commands_dir(claude_dir), agents_dir(claude_dir)):
        ensure_gone(directory)
    for skill in get_all_skill_names(DEVFLOW_PLUGINS):
        ensure_gone(skill_dir(claude_dir, skill))


def install_via_file_copy(
    plugins: Sequence[PluginDefinition],
    claude_dir: Path,
    source_dir: Path,
    full_install: bool,
) -> CopiedAssets:
    """Copy built plugin contents into the Claude directory.

    A full install first clears previous DevFlow files. Each skill and
    agent is copied once, from the plugin that owns it in the asset maps.
    Returns what was installed, plus the plugins whose source directory
    is missing.
    """
    if full_install:
        _clean_previous_install(claude_dir)

    skills_map, agents_map = build_asset_maps(plugins)
    installed = CopiedAssets()
    plugins_root = source_dir / "plugins"

    for plugin in plugins:
        plugin_dir = plugins_root / plugin.name
        if not plugin_dir.is_dir():
            logger.warning("No built plugin at %s", plugin_dir)
            installed.missing.append(plugin.name)
            continue

        commands_source = plugin_dir / "commands"
        if commands_source.is_dir():
            target = commands_dir(claude_dir)
            for command_file in sorted(commands_source.iterdir()):
                if command_file.is_file():
                    target.mkdir(parents=True, exist_ok=True)
                    shutil.copyfile(command_file, target / command_file.name)
                    installed.commands.append(command_file.stem)

        agents_source = plugin_dir / "agents"
        if agents_source.is_dir():
            target = agents_dir(claude_dir)
            for agent_file in sorted(agents_source.glob(f"*{AGENT_SUFFIX}")):
                if agents_map.get(agent_file.stem) == plugin.name:
                    target.mkdir(parents=True, exist_ok=True)
                    shutil.copyfile(agent_file, target / agent_file.name)
                    installed.agents.append(agent_file.stem)

        skills_source = plugin_dir / "skills"
        if skills_source.is_dir():
            for skill in sorted(skills_source.iterdir()):
                if skill.is_dir() and skills_map.get(skill.name) == plugin.name:
                    shutil.copytree(skill, skill_dir(claude_dir, skill.name), dirs_exist_ok=True)
                    installed.skills.append(skill.name)

    return installed


# =============================================================================
# Safe-delete shell hook
# =============================================================================

def install_safe_delete(step: InstallStep = InstallStep.INSTALLING_SHELL_HOOK) -> StepResult:
    """Install the safe-delete block in the current shell's profile."""
    platform = detect_platform()
    shell = detect_shell()
    profile = get_profile_path(shell)
    info = get_safe_delete_info(platform)
    block = generate_safe_delete_block(shell, platform, info.command)

    if block is None or profile is None:
        return StepResult(step, StepStatus.SKIPPED, f"Unsupported shell: {shell}")

    if not has_safe_delete(platform):
        return StepResult(
            step,
            StepStatus.WARNING,
            f"'{info.command}' not found",
            details=[f"Install it with: {info.install_hint}"] if info.install_hint else [],
        )

    if is_already_installed(profile):
        return StepResult(step, StepStatus.OK, f"Already installed in {profile}")

    install_to_profile(profile, block)
    return StepResult(step, StepStatus.OK, f"Installed in {profile}", details=[f"Restart {shell} to activate"])


def uninstall_safe_delete() -> StepResult:
    step = InstallStep.REMOVING_SHELL_HOOK
    profile = get_profile_path(detect_shell())
    if profile is None:
        return StepResult(step, StepStatus.SKIPPED, "Unsupported shell")
    if remove_from_profile(profile):
        return StepResult(step, StepStatus.OK, f"Removed from {profile}")
    return StepResult(step, StepStatus.SKIPPED, "Not installed")


# =============================================================================
# Orchestration
# =============================================================================

def _run_step(report: InstallReport, step: InstallStep, action: Callable[[], StepResult]) -> None:
    try:
        result = action()
    except (DevFlowError, OSError, ValueError) as e:
        logger.error("%s failed: %s", step.value, e)
        result = StepResult(step, StepStatus.FAILED, str(e))
    report.steps.append(result)


def run_install(options: InstallOptions) -> InstallReport:
    """Install DevFlow for one scope.

    Raises PathConfigError if the scope cannot be resolved; every other
    problem is reported per step in the returned report.
    """
    paths = get_installation_paths(options.scope)
    plugins = resolve_plugins_to_install(options.plugins)
    report = InstallReport(scope=options.scope, paths=paths, plugins=plugins)
    report.steps.append(
        StepResult(InstallStep.RESOLVING_SCOPE, StepStatus.OK, f"{options.scope} scope: {paths.claude_dir}")
    )

    source_dir = options.source_dir or get_default_source_dir()
    templates = get_templates_dir()
    cwd = options.cwd or Path(os.getcwd())
    full_install = not options.plugins

    def plugins_step() -> StepResult:
        paths.claude_dir.mkdir(parents=True, exist_ok=True)
        details: List[str] = []
        missing: List[str] = []
        upgrading = is_devflow_installed(paths.claude_dir)

        if options.use_native_cli and is_claude_cli_available() and install_via_cli(plugins, options.scope):
            report.method = "cli"
        else:
            installed = install_via_file_copy(plugins, paths.claude_dir, source_dir, full_install)
            details.append(
                f"{len(installed.skills)} skills, {len(installed.agents)} agents, "
                f"{len(installed.commands)} commands copied"
            )
            missing = installed.missing
            details += [f"No built plugin for {name} in {source_dir / 'plugins'}" for name in missing]

        if upgrading:
            legacy = remove_legacy_commands(paths.claude_dir)
            if full_install:
                skills = remove_legacy_skills(paths.claude_dir)
                legacy.removed += skills.removed
                legacy.errors += skills.errors
            if legacy.removed:
                details.append(f"Removed {len(legacy.removed)} legacy assets")
            if legacy.errors:
                raise InstallError(InstallStep.INSTALLING_PLUGINS.value, legacy.errors[0])

        scripts = install_scripts(source_dir, paths.devflow_dir)
        if scripts:
            details.append(f"{scripts} scripts installed")

        via = "Claude plugin system" if report.method == "cli" else "file copy"
        if missing:
            return StepResult(
                InstallStep.INSTALLING_PLUGINS,
                StepStatus.WARNING,
                f"Installed via {via}; {len(missing)} plugin(s) missing from the source tree",
                details,
            )
        return StepResult(InstallStep.INSTALLING_PLUGINS, StepStatus.OK, f"Installed via {via}", details)

    def settings_step() -> StepResult:
        outcome = install_settings(
            paths.claude_dir,
            templates / "settings.json",
            paths.devflow_dir,
            teams_enabled=options.teams,
            override=options.override_settings,
            interactive=options.interactive,
            confirm=options.confirm,
        )
        if outcome is SettingsOutcome.SKIPPED:
            return StepResult(
                InstallStep.WRITING_SETTINGS,
                StepStatus.WARNING,
                "settings.json exists without hooks - left untouched",
                details=["Re-run interactively or pass --override-settings"],
            )
        if outcome is SettingsOutcome.KEPT:
            return StepResult(InstallStep.WRITING_SETTINGS, StepStatus.SKIPPED, "Keeping existing settings")
        return StepResult(InstallStep.WRITING_SETTINGS, StepStatus.OK, f"Settings {outcome.value}")

    def templates_step() -> StepResult:
        details = []
        if install_claude_md(paths.claude_dir, templates / CLAUDE_MD):
            details.append("CLAUDE.md created")
        else:
            details.append("CLAUDE.md exists - keeping your configuration")
        git_root = paths.git_root
        if git_root is None:
            git_root = git.get_git_root(cwd)
        if git_root is not None and install_claudeignore(git_root, templates / "claudeignore.template"):
            details.append(".claudeignore created")
        if options.scope == SCOPE_LOCAL and paths.git_root is not None:
            added = update_gitignore(paths.git_root)
            if added:
                details.append(f".gitignore updated ({', '.join(added)})")
        return StepResult(InstallStep.WRITING_STATIC_TEMPLATES, StepStatus.OK, "Templates ready", details)

    def docs_step() -> StepResult:
        if options.skip_docs:
            return StepResult(InstallStep.CREATING_AUX_DIRS, StepStatus.SKIPPED, "Skipped .docs/")
        docs = create_docs_structure(cwd)
        return StepResult(InstallStep.CREATING_AUX_DIRS, StepStatus.OK, f"{docs} ready")

    def record_step() -> StepResult:
        path = save_manifest(
            paths.devflow_dir, __version__, options.scope, [p.name for p in plugins], options.teams
        )
        return StepResult(InstallStep.RECORDING_INSTALL, StepStatus.OK, f"Recorded in {path}")

    _run_step(report, InstallStep.INSTALLING_PLUGINS, plugins_step)
    _run_step(report, InstallStep.WRITING_SETTINGS, settings_step)
    _run_step(report, InstallStep.WRITING_STATIC_TEMPLATES, templates_step)
    _run_step(report, InstallStep.CREATING_AUX_DIRS, docs_step)
    if options.safe_delete:
        _run_step(report, InstallStep.INSTALLING_SHELL_HOOK, install_safe_delete)
    _run_step(report, InstallStep.RECORDING_INSTALL, record_step)
    return report


# =============================================================================
# Uninstall
# =============================================================================

@dataclass
class UninstallOptions:
    scope: Optional[str] = None
    plugins: List[str] = field(default_factory=list)
    keep_docs: bool = False
    keep_settings: bool = False
    safe_delete: bool = True
    cwd: Optional[Path] = None


@dataclass
class ScopeUninstall:
    scope: str
    paths: InstallationPaths
    result: TeardownResult
    selective: bool = False


@dataclass
class UninstallReport:
    scopes: List[ScopeUninstall] = field(default_factory=list)
    steps: List[StepResult] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(s.result.ok for s in self.scopes) and not any(s.failed for s in self.steps)


def _scope_is_installed(paths: InstallationPaths) -> bool:
    return is_devflow_installed(paths.claude_dir) or load_manifest(paths.devflow_dir) is not None


def detect_installed_scopes() -> List[str]:
    """Scopes with a DevFlow installation (user first, then local)."""
    scopes = []
    for scope in (SCOPE_USER, SCOPE_LOCAL):
        try:
            paths = get_installation_paths(scope)
        except DevFlowError:
            continue
        if _scope_is_installed(paths):
            scopes.append(scope)
    return scopes


def _remove_pristine_claude_md(claude_dir: Path) -> Optional[Path]:
    """Delete CLAUDE.md only if it is still the unmodified template."""
    target = claude_dir / CLAUDE_MD
    template = get_templates_dir() / CLAUDE_MD
    try:
        if target.read_text(encoding="utf-8") == template.read_text(encoding="utf-8"):
            target.unlink()
            return target
    except FileNotFoundError:
        pass
    return None


def _uninstall_scope(scope: str, selected_names: Sequence[str], keep_settings: bool = False) -> ScopeUninstall:
    paths = get_installation_paths(scope)
    installed = installed_plugin_names(paths.devflow_dir) or [p.name for p in DEVFLOW_PLUGINS]
    remaining = [n for n in installed if n not in selected_names]

    if selected_names and remaining:
        selected = [p for p in (get_plugin(n) for n in selected_names) if p is not None]
        universe = [p for p in DEVFLOW_PLUGINS if p.name in installed or p.name in selected_names]
        result = remove_plugin_assets(paths.claude_dir, compute_assets_to_remove(selected, universe))
        manifest = load_manifest(paths.devflow_dir) or {}
        save_manifest(
            paths.devflow_dir,
            manifest.get("version", __version__),
            scope,
            remaining,
            bool(manifest.get("teams", False)),
        )
        return ScopeUninstall(scope, paths, result, selective=True)

    result = full_teardown(paths.claude_dir, paths.devflow_dir, keep_settings=keep_settings)
    try:
        removed = _remove_pristine_claude_md(paths.claude_dir)
    except OSError as e:
        result.errors.append(f"Could not remove CLAUDE.md: {e}")
    else:
        if removed is not None:
            result.removed.append(removed)
    return ScopeUninstall(scope, paths, result)


def run_uninstall(options: UninstallOptions) -> UninstallReport:
    """Uninstall DevFlow from one scope or every detected scope.

    Raises DevFlowError when an explicit scope cannot be resolved or no
    installation is found.
    """
    report = UninstallReport()
    if options.scope:
        scopes = [options.scope]
        get_installation_paths(options.scope)
    else:
        scopes = detect_installed_scopes()
        if not scopes:
            raise DevFlowError(
                "No DevFlow installation found",
                hint="Checked user scope (~/.claude/) and local scope (git-root/.claude/)",
            )

    for scope in scopes:
        try:
            report.scopes.append(_uninstall_scope(scope, options.plugins, options.keep_settings))
        except DevFlowError as e:
            report.notes.append(f"Cannot uninstall {scope} scope: {e}")

    full = not options.plugins
    if full and options.safe_delete:
        try:
            report.steps.append(uninstall_safe_delete())
        except OSError as e:
            report.steps.append(StepResult(InstallStep.REMOVING_SHELL_HOOK, StepStatus.FAILED, str(e)))

    cwd = options.cwd or Path(os.getcwd())
    if full and not options.keep_docs and (cwd / ".docs").is_dir():
        report.notes.append(
            "Found .docs/ directory in current project. It contains your session "
            "documentation; remove it manually if no longer needed."
        )
    if full and (cwd / ".claudeignore").exists():
        report.notes.append(".claudeignore kept - it may contain custom rules.")
    return report
