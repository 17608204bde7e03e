#!/usr/bin/env python3
"""
DevFlow command line interface.

Usage:
    devflow init                              # Interactive install
    devflow init --scope local --plugin implement
    devflow uninstall --plugin code-review
    devflow list
    devflow build --root .
"""

import importlib.metadata
import logging
import platform as platform_module
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import httpx
import readchar
import typer
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .build import build_plugins
from .config import installed_plugin_names
from .errors import DevFlowError, PathConfigError
from .hooks import (
    MEMORY_HOOK_CONFIG,
    add_ambient_hook,
    add_memory_hooks,
    count_memory_hooks,
    has_ambient_hook,
    has_memory_hooks,
    infer_devflow_dir,
    remove_ambient_hook,
    remove_memory_hooks,
)
from .installer import (
    InstallOptions,
    InstallReport,
    StepResult,
    StepStatus,
    UninstallOptions,
    install_safe_delete,
    run_install,
    run_uninstall,
    uninstall_safe_delete,
)
from .paths import (
    SCOPE_LOCAL,
    SCOPE_USER,
    SCOPES,
    InstallationPaths,
    get_installation_paths,
    get_managed_settings_path,
)
from .plugins import DEVFLOW_PLUGINS, PluginDefinition, parse_plugin_selection
from .safe_delete import (
    detect_platform,
    detect_shell,
    get_profile_path,
    get_safe_delete_suggestion,
    has_safe_delete,
)
from .settings import SETTINGS_FILENAME, is_teams_enabled, load_settings, save_settings
from .shell_hook import is_already_installed

logger = logging.getLogger(__name__)

PACKAGE_NAME = "devflow-kit"
PYPI_URL = f"https://pypi.org/pypi/{PACKAGE_NAME}/json"

BANNER = r"""
 ____             _____ _
|  _ \  _____   _|  ___| | _____      __
| | | |/ _ \ \ / / |_  | |/ _ \ \ /\ / /
| |_| |  __/\ V /|  _| | | (_) \ V  V /
|____/ \___| \_/ |_|   |_|\___/ \_/\_/
"""

STATUS_ICONS = {
    StepStatus.OK: "[green]✓[/green]",
    StepStatus.SKIPPED: "[dim]-[/dim]",
    StepStatus.WARNING: "[yellow]⚠[/yellow]",
    StepStatus.FAILED: "[red]✗[/red]",
}

console = Console()
app = typer.Typer(
    name="devflow",
    help="Agentic development toolkit for Claude Code",
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context):
    """
    Agentic development toolkit for Claude Code.
    """
    if ctx.invoked_subcommand is None:
        show_banner()
        console.print(ctx.get_help())


# =============================================================================
# Utility Functions
# =============================================================================

def show_banner():
    """Display the ASCII art banner."""
    console.print(f"[cyan]{BANNER}[/cyan]")
    console.print("[dim]Agentic development toolkit for Claude Code[/dim]\n")


def setup_logging(verbose: bool = False) -> None:
    """Route core-module logging through rich."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def print_error(error: DevFlowError) -> None:
    console.print(f"[red]Error:[/red] {error}")
    if error.hint:
        console.print(f"  [dim]{error.hint}[/dim]")


def fail(message: str, hint: Optional[str] = None):
    print_error(DevFlowError(message, hint=hint))
    raise typer.Exit(1)


def is_interactive() -> bool:
    return sys.stdin is not None and sys.stdin.isatty()


def confirm(message: str) -> bool:
    return typer.confirm(message, default=False)


def validate_scope(scope: Optional[str]) -> Optional[str]:
    if scope is not None and scope not in SCOPES:
        fail(f"Invalid scope: {scope}", hint='Use "user" or "local"')
    return scope


def parse_plugins_option(plugin: Optional[str]) -> List[str]:
    if not plugin:
        return []
    selected, invalid = parse_plugin_selection(plugin)
    if invalid:
        fail(
            f"Unknown plugin(s): {', '.join(invalid)}",
            hint=f"Valid plugins: {', '.join(p.name for p in DEVFLOW_PLUGINS)}",
        )
    return selected


def resolve_paths(scope: str) -> InstallationPaths:
    try:
        return get_installation_paths(scope)
    except DevFlowError as e:
        print_error(e)
        raise typer.Exit(1)


def print_step(result: StepResult) -> None:
    console.print(f"{STATUS_ICONS[result.status]} {result.step.value}: {result.message}")
    for detail in result.details:
        console.print(f"    [dim]{detail}[/dim]")


# =============================================================================
# Interactive Selection Helpers
# =============================================================================

def get_key() -> str:
    """Get a single keypress in a cross-platform way using readchar."""
    key = readchar.readkey()

    if key in (readchar.key.UP, readchar.key.CTRL_P):
        return 'up'
    if key in (readchar.key.DOWN, readchar.key.CTRL_N):
        return 'down'
    if key == readchar.key.ENTER:
        return 'enter'
    if key == readchar.key.ESC:
        return 'esc'
    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt
    if key == ' ':
        return 'space'
    if key.lower() == 'a':
        return 'a'
    return key


def select_plugins_interactive(
    plugins: Sequence[PluginDefinition],
    prompt_text: str = "Select plugins to install",
    preselected: Optional[List[str]] = None,
) -> List[str]:
    """
    Interactive multi-select for plugins using arrow keys and space.

    Controls:
    - ↑/↓: Navigate
    - Space: Toggle selection
    - A: Select/deselect all
    - Enter: Confirm
    - Esc: Cancel

    Returns the selected plugin names in registry order. Outside a
    terminal the preselection (or every non-optional plugin) is returned.
    """
    option_names = [p.name for p in plugins]
    descriptions = {p.name: p.description for p in plugins}
    defaults = preselected if preselected is not None else [p.name for p in plugins if not p.optional]
    selected = set(defaults)
    cursor_index = 0

    def create_selection_panel():
        lines = []
        for i, name in enumerate(option_names):
            cursor = "→" if i == cursor_index else " "
            check = "✓" if name in selected else " "
            style = "bold cyan" if i == cursor_index else "white"
            lines.append(f"[{style}]{cursor} [{check}] {name}[/{style}] [dim]{descriptions[name]}[/dim]")
        lines.append("")
        lines.append("[dim]↑/↓: navigate  Space: toggle  A: all  Enter: confirm  Esc: cancel[/dim]")
        return Panel("\n".join(lines), title=f"[bold cyan]{prompt_text}[/bold cyan]", border_style="cyan")

    if not is_interactive():
        return [n for n in option_names if n in selected]

    with Live(create_selection_panel(), console=console, transient=True, refresh_per_second=10) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                key = 'esc'

            if key == 'up':
                cursor_index = (cursor_index - 1) % len(option_names)
            elif key == 'down':
                cursor_index = (cursor_index + 1) % len(option_names)
            elif key == 'space':
                current = option_names[cursor_index]
                if current in selected:
                    selected.remove(current)
                else:
                    selected.add(current)
            elif key == 'a':
                selected = set() if len(selected) == len(option_names) else set(option_names)
            elif key == 'enter':
                break
            elif key == 'esc':
                console.print("\n[yellow]Selection cancelled[/yellow]")
                raise typer.Exit(1)

            live.update(create_selection_panel())

    return [n for n in option_names if n in selected]


def select_scope_interactive() -> str:
    """Single-select between user and local scope. Defaults to user."""
    options = {
        SCOPE_USER: "User scope - install for all projects (~/.claude/)",
        SCOPE_LOCAL: "Local scope - install for this project only (.claude/)",
    }
    keys = list(options)
    cursor_index = 0

    def create_panel():
        lines = []
        for i, key in enumerate(keys):
            if i == cursor_index:
                lines.append(f"[bold cyan]→ {options[key]}[/bold cyan]")
            else:
                lines.append(f"[white]  {options[key]}[/white]")
        lines.append("")
        lines.append("[dim]↑/↓: navigate  Enter: confirm  Esc: cancel[/dim]")
        return Panel("\n".join(lines), title="[bold cyan]Choose installation scope[/bold cyan]", border_style="cyan")

    if not is_interactive():
        return SCOPE_USER

    with Live(create_panel(), console=console, transient=True, refresh_per_second=10) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                key = 'esc'

            if key == 'up':
                cursor_index = (cursor_index - 1) % len(keys)
            elif key == 'down':
                cursor_index = (cursor_index + 1) % len(keys)
            elif key == 'enter':
                break
            elif key == 'esc':
                console.print("\n[yellow]Installation cancelled[/yellow]")
                raise typer.Exit(1)
            live.update(create_panel())

    return keys[cursor_index]


# =============================================================================
# Install / Uninstall
# =============================================================================

def print_install_report(report: InstallReport) -> None:
    for step in report.steps:
        print_step(step)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="cyan", justify="right")
    table.add_column("Value", style="white")
    table.add_row("Scope", report.scope)
    table.add_row("Claude", str(report.paths.claude_dir))
    table.add_row("DevFlow", str(report.paths.devflow_dir))
    table.add_row("Plugins", ", ".join(p.short_name for p in report.plugins))
    commands = report.commands
    if commands:
        table.add_row("Commands", " ".join(commands))

    if report.ok:
        title, style = "[bold green]DevFlow installed[/bold green]", "green"
    else:
        title, style = f"[bold red]DevFlow installed with {len(report.failures)} error(s)[/bold red]", "red"
    console.print()
    console.print(Panel(table, title=title, border_style=style, padding=(1, 2)))


@app.command()
def init(
    scope: Optional[str] = typer.Option(
        None, "--scope", "-s",
        help="Installation scope: user (all projects) or local (this repository)"
    ),
    plugin: Optional[str] = typer.Option(
        None, "--plugin", "-p",
        help="Comma-separated plugins to install (e.g. implement,code-review). Default: all"
    ),
    override_settings: bool = typer.Option(
        False, "--override-settings",
        help="Replace an existing settings.json with the DevFlow template"
    ),
    teams: Optional[bool] = typer.Option(
        None, "--teams/--no-teams",
        help="Enable experimental Agent Teams"
    ),
    safe_delete: Optional[bool] = typer.Option(
        None, "--safe-delete/--no-safe-delete",
        help="Install the rm -> trash shell hook"
    ),
    skip_docs: bool = typer.Option(
        False, "--skip-docs",
        help="Do not create the .docs/ structure"
    ),
    source: Optional[Path] = typer.Option(
        None, "--source",
        help="Release tree to install from (default: bundled assets)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """
    Install DevFlow plugins, settings and hooks.

    Re-running is safe: an unchanged install leaves every file as it was.

    Examples:
        devflow init                              # Interactive
        devflow init --scope local                # This repository only
        devflow init -p implement,code-review     # Selected plugins
    """
    setup_logging(verbose)
    show_banner()

    validate_scope(scope)
    selected = parse_plugins_option(plugin)
    interactive = is_interactive()

    if scope is None:
        scope = select_scope_interactive() if interactive else SCOPE_USER

    if not selected and interactive:
        chosen = select_plugins_interactive(DEVFLOW_PLUGINS)
        if not chosen:
            console.print("[yellow]No plugins selected. Exiting.[/yellow]")
            raise typer.Exit(1)
        defaults = [p.name for p in DEVFLOW_PLUGINS if not p.optional]
        if chosen != defaults:
            selected = chosen

    if teams is None:
        teams = interactive and confirm("Enable Agent Teams? (experimental)")

    if safe_delete is None:
        safe_delete = False
        if interactive and has_safe_delete(detect_platform()):
            profile = get_profile_path(detect_shell())
            if profile is not None and not is_already_installed(profile):
                safe_delete = confirm("Install safe-delete (rm moves files to trash)?")

    console.print(f"[cyan]Installing DevFlow ({scope} scope)...[/cyan]\n")
    try:
        report = run_install(InstallOptions(
            scope=scope,
            plugins=selected,
            override_settings=override_settings,
            teams=teams,
            safe_delete=safe_delete,
            skip_docs=skip_docs,
            source_dir=source,
            interactive=interactive,
            confirm=confirm,
        ))
    except DevFlowError as e:
        print_error(e)
        raise typer.Exit(1)

    print_install_report(report)
    if not report.ok:
        raise typer.Exit(1)


@app.command()
def uninstall(
    scope: Optional[str] = typer.Option(
        None, "--scope", "-s",
        help="Scope to uninstall from (default: every detected installation)"
    ),
    plugin: Optional[str] = typer.Option(
        None, "--plugin", "-p",
        help="Comma-separated plugins to remove (default: everything)"
    ),
    keep_docs: bool = typer.Option(False, "--keep-docs", help="Do not mention .docs/ cleanup"),
    keep_settings: bool = typer.Option(
        False, "--keep-settings",
        help="Leave settings.json untouched"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """
    Remove DevFlow from Claude Code.

    Only files DevFlow owns are removed; user settings keys, foreign
    hooks and a customised CLAUDE.md are kept.
    """
    setup_logging(verbose)
    validate_scope(scope)
    selected = parse_plugins_option(plugin)

    try:
        report = run_uninstall(UninstallOptions(
            scope=scope,
            plugins=selected,
            keep_docs=keep_docs,
            keep_settings=keep_settings,
        ))
    except DevFlowError as e:
        print_error(e)
        raise typer.Exit(1)

    for entry in report.scopes:
        kind = "plugins" if entry.selective else "DevFlow"
        if entry.result.ok:
            console.print(
                f"[green]✓[/green] Removed {kind} from {entry.scope} scope "
                f"[dim]({len(entry.result.removed)} paths)[/dim]"
            )
        else:
            console.print(f"[red]✗[/red] {entry.scope} scope:")
            for error in entry.result.errors:
                console.print(f"    [red]{error}[/red]")
        if verbose:
            for path in entry.result.removed:
                console.print(f"    [dim]{path}[/dim]")

    for step in report.steps:
        print_step(step)
    for note in report.notes:
        console.print(f"[yellow]⚠[/yellow] {note}")

    if not report.ok:
        raise typer.Exit(1)
    console.print("\n[green]✓ Uninstall complete[/green]")


# =============================================================================
# Inspection
# =============================================================================

def get_installed_plugins() -> Dict[str, List[str]]:
    """Installed plugin names per scope, from the install records."""
    installed: Dict[str, List[str]] = {}
    for scope in SCOPES:
        try:
            paths = get_installation_paths(scope)
        except DevFlowError:
            continue
        names = installed_plugin_names(paths.devflow_dir)
        if names:
            installed[scope] = names
    return installed


def describe_features(settings: Dict) -> str:
    """One-line summary of the optional features enabled in a settings.json."""
    features = [
        ("working memory", has_memory_hooks(settings)),
        ("ambient", has_ambient_hook(settings)),
        ("agent teams", is_teams_enabled(settings)),
    ]
    return ", ".join(
        f"{name} [green]on[/green]" if enabled else f"{name} [dim]off[/dim]" for name, enabled in features
    )


@app.command(name="list")
def list_plugins():
    """List available plugins and where they are installed."""
    installed = get_installed_plugins()

    table = Table(title="DevFlow plugins", show_lines=False)
    table.add_column("Plugin", style="bold")
    table.add_column("Description")
    table.add_column("Commands", style="cyan")
    table.add_column("Installed", style="green")

    for plugin in DEVFLOW_PLUGINS:
        name = plugin.name
        if plugin.optional:
            name += " [dim](optional)[/dim]"
        scopes = [scope for scope, names in installed.items() if plugin.name in names]
        table.add_row(
            name,
            plugin.description,
            " ".join(plugin.commands) or "[dim]-[/dim]",
            ", ".join(scopes),
        )
    console.print(table)

    if not installed:
        console.print("\n[dim]Not installed. Run [cyan]devflow init[/cyan] to install.[/dim]")
        return

    console.print()
    for scope in installed:
        settings = load_settings(get_installation_paths(scope).claude_dir / SETTINGS_FILENAME) or {}
        console.print(f"[cyan]{scope}[/cyan]: {describe_features(settings)}")


@app.command()
def build(
    root: Path = typer.Option(
        Path("."), "--root", "-r",
        help="Source tree containing shared/ and plugins/"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Copy shared skills and agents into every plugin directory."""
    setup_logging(verbose)
    console.print("[cyan]Building plugins...[/cyan]\n")
    try:
        results = build_plugins(root.resolve())
    except DevFlowError as e:
        print_error(e)
        raise typer.Exit(1)

    for result in results:
        icon = "[green]✓[/green]" if result.ok else "[red]✗[/red]"
        console.print(f"{icon} {result.summary()}")
        for error in result.errors:
            console.print(f"    [red]{error}[/red]")

    failed = [r for r in results if not r.ok]
    if failed:
        console.print(f"\n[red]Build failed for {len(failed)} plugin(s)[/red]")
        raise typer.Exit(1)
    console.print(f"\n[green]✓ Built {len(results)} plugins[/green]")


# =============================================================================
# Hooks
# =============================================================================

def load_settings_for_update(paths: InstallationPaths) -> Dict:
    """Current settings.json contents, refusing to clobber a broken file."""
    path = paths.claude_dir / SETTINGS_FILENAME
    settings = load_settings(path)
    if settings is None and path.exists():
        fail(f"{path} is not valid JSON", hint="Fix or remove the file and try again")
    return settings or {}


def require_single_action(**flags: bool) -> str:
    chosen = [name for name, enabled in flags.items() if enabled]
    if len(chosen) != 1:
        fail(f"Choose exactly one of: {', '.join('--' + n for n in flags)}")
    return chosen[0]


@app.command()
def memory(
    enable: bool = typer.Option(False, "--enable", help="Register working-memory hooks"),
    disable: bool = typer.Option(False, "--disable", help="Remove working-memory hooks"),
    status: bool = typer.Option(False, "--status", help="Show hook status"),
    scope: str = typer.Option(SCOPE_USER, "--scope", "-s", help="user or local"),
):
    """Manage working-memory hooks (Stop, SessionStart, PreCompact)."""
    setup_logging()
    action = require_single_action(enable=enable, disable=disable, status=status)
    validate_scope(scope)
    paths = resolve_paths(scope)
    settings = load_settings_for_update(paths)
    settings_path = paths.claude_dir / SETTINGS_FILENAME
    count = count_memory_hooks(settings)
    total = len(MEMORY_HOOK_CONFIG)
    enabled = has_memory_hooks(settings)

    if action == "status":
        if enabled:
            console.print(f"[green]✓[/green] Working memory enabled ({count}/{total} hooks)")
        elif count:
            console.print(f"[yellow]⚠[/yellow] Working memory partially configured ({count}/{total} hooks)")
        else:
            console.print("[dim]Working memory disabled[/dim]")
        return

    if action == "enable":
        if enabled:
            console.print("[green]✓[/green] Working memory already enabled")
            return
        save_settings(settings_path, add_memory_hooks(settings, paths.devflow_dir))
        console.print(f"[green]✓[/green] Working memory enabled in {settings_path}")
        return

    if not count:
        console.print("[dim]Working memory already disabled[/dim]")
        return
    save_settings(settings_path, remove_memory_hooks(settings))
    console.print(f"[green]✓[/green] Working memory disabled in {settings_path}")


@app.command()
def ambient(
    enable: bool = typer.Option(False, "--enable", help="Register the ambient prompt hook"),
    disable: bool = typer.Option(False, "--disable", help="Remove the ambient prompt hook"),
    status: bool = typer.Option(False, "--status", help="Show hook status"),
    scope: str = typer.Option(SCOPE_USER, "--scope", "-s", help="user or local"),
):
    """Manage ambient mode (UserPromptSubmit hook)."""
    setup_logging()
    action = require_single_action(enable=enable, disable=disable, status=status)
    validate_scope(scope)
    paths = resolve_paths(scope)
    settings = load_settings_for_update(paths)
    settings_path = paths.claude_dir / SETTINGS_FILENAME
    enabled = has_ambient_hook(settings)

    if action == "status":
        console.print("[green]✓[/green] Ambient mode enabled" if enabled else "[dim]Ambient mode disabled[/dim]")
        return

    if action == "enable":
        if enabled:
            console.print("[green]✓[/green] Ambient mode already enabled")
            return
        devflow_dir = infer_devflow_dir(settings) or paths.devflow_dir
        save_settings(settings_path, add_ambient_hook(settings, devflow_dir))
        console.print(f"[green]✓[/green] Ambient mode enabled in {settings_path}")
        return

    if not enabled:
        console.print("[dim]Ambient mode already disabled[/dim]")
        return
    save_settings(settings_path, remove_ambient_hook(settings))
    console.print(f"[green]✓[/green] Ambient mode disabled in {settings_path}")


@app.command(name="safe-delete")
def safe_delete_cmd(
    install: bool = typer.Option(False, "--install", help="Add the rm -> trash override to your shell profile"),
    remove: bool = typer.Option(False, "--remove", help="Remove the override"),
    status: bool = typer.Option(False, "--status", help="Show safe-delete status"),
):
    """Manage the safe-delete shell hook."""
    setup_logging()
    action = require_single_action(install=install, remove=remove, status=status)

    if action == "status":
        platform = detect_platform()
        shell = detect_shell()
        profile = get_profile_path(shell)
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Key", style="cyan", justify="right")
        table.add_column("Value", style="white")
        table.add_row("Platform", platform)
        table.add_row("Shell", shell)
        table.add_row("Profile", str(profile) if profile else "[dim]unsupported[/dim]")
        installed = bool(profile) and is_already_installed(profile)
        table.add_row("Installed", "yes" if installed else "no")
        table.add_row("Trash", "available" if has_safe_delete(platform) else "[yellow]missing[/yellow]")
        console.print(table)
        suggestion = get_safe_delete_suggestion(platform)
        if suggestion and not has_safe_delete(platform):
            console.print(f"\n[dim]Install with:[/dim] [cyan]{suggestion.install_hint}[/cyan]")
        if suggestion and not installed:
            console.print(f"[dim]Without the hook, alias it yourself:[/dim] [cyan]{suggestion.alias_hint}[/cyan]")
        return

    try:
        result = install_safe_delete() if action == "install" else uninstall_safe_delete()
    except OSError as e:
        fail(f"Could not update shell profile: {e}")
    print_step(result)
    if action == "install" and result.status is not StepStatus.OK:
        raise typer.Exit(1)


# =============================================================================
# Version
# =============================================================================

def get_installed_version() -> str:
    """Get the currently installed version."""
    try:
        return importlib.metadata.version(PACKAGE_NAME)
    except importlib.metadata.PackageNotFoundError:
        return __version__


def get_latest_version() -> Optional[str]:
    """Fetch the latest published version from PyPI."""
    try:
        response = httpx.get(PYPI_URL, timeout=5, follow_redirects=True)
        if response.status_code == 200:
            return response.json().get("info", {}).get("version")
    except (httpx.HTTPError, ValueError) as e:
        logger.debug("Version check failed: %s", e)
    return None


@app.command()
def version(
    check_update: bool = typer.Option(
        False, "--check", "-c",
        help="Check for available updates"
    ),
):
    """Display version and check for updates."""
    setup_logging()
    show_banner()

    installed = get_installed_version()

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="cyan", justify="right")
    table.add_column("Value", style="white")

    table.add_row("Version", installed)
    table.add_row("Python", platform_module.python_version())
    table.add_row("Platform", platform_module.system())
    try:
        paths = get_installation_paths(SCOPE_USER)
        table.add_row("Claude", str(paths.claude_dir))
        table.add_row("DevFlow", str(paths.devflow_dir))
    except PathConfigError as e:
        table.add_row("Paths", f"[red]{e}[/red]")
    try:
        table.add_row("Managed", str(get_managed_settings_path()))
    except PathConfigError:
        table.add_row("Managed", "[dim]not supported[/dim]")

    if check_update:
        console.print("[dim]Checking for updates...[/dim]")
        latest = get_latest_version()
        if latest:
            table.add_row("Latest", latest)
            if latest != installed:
                table.add_row("", "[yellow]Update available![/yellow]")
        else:
            table.add_row("Latest", "[dim]Unable to check[/dim]")

    console.print(Panel(table, title="[bold cyan]DevFlow[/bold cyan]", border_style="cyan", padding=(1, 2)))

    if check_update:
        console.print("\n[dim]To update, run:[/dim]")
        console.print(f"  [cyan]uv tool upgrade {PACKAGE_NAME}[/cyan]")
        console.print("  [dim]or[/dim]")
        console.print(f"  [cyan]pip install --upgrade {PACKAGE_NAME}[/cyan]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
