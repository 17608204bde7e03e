"""
Installation path resolution.

User scope installs into ``~/.claude`` and ``~/.devflow`` (overridable
with ``CLAUDE_CODE_DIR`` / ``DEVFLOW_DIR``); local scope installs into
``.claude`` and ``.devflow`` at the root of the current git repository.
Nothing is cached: every call re-reads the environment and the working
directory.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import git
from .errors import PathConfigError

logger = logging.getLogger(__name__)

SCOPE_USER = "user"
SCOPE_LOCAL = "local"
SCOPES = (SCOPE_USER, SCOPE_LOCAL)

CLAUDE_DIR_ENV = "CLAUDE_CODE_DIR"
DEVFLOW_DIR_ENV = "DEVFLOW_DIR"


@dataclass(frozen=True)
class InstallationPaths:
    claude_dir: Path
    devflow_dir: Path
    git_root: Optional[Path] = None


def get_home_directory() -> Path:
    """Home directory, preferring ``$HOME`` over the platform lookup."""
    home = os.environ.get("HOME")
    if not home:
        try:
            home = str(Path.home())
        except RuntimeError:
            home = ""
    if not home:
        raise PathConfigError(
            "Unable to determine home directory.",
            hint="Set the HOME environment variable.",
        )
    return Path(home)


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path_str = os.path.normpath(str(path))
        parent_str = os.path.normpath(str(parent))
        return os.path.commonpath([path_str, parent_str]) == parent_str
    except ValueError:
        # Different drives on Windows
        return False


def _directory_override(env_var: str, default_name: str) -> Path:
    custom = os.environ.get(env_var)
    if not custom:
        return get_home_directory() / default_name

    if not os.path.isabs(custom):
        raise PathConfigError(
            f"{env_var} must be an absolute path",
            hint=f"Unset {env_var} or point it at an absolute directory.",
        )

    custom_path = Path(custom)
    if not _is_within(custom_path, get_home_directory()):
        logger.warning("%s is outside home directory. Ensure this is intentional.", env_var)
    return custom_path


def get_claude_directory() -> Path:
    """Claude Code directory: ``$CLAUDE_CODE_DIR`` or ``~/.claude``."""
    return _directory_override(CLAUDE_DIR_ENV, ".claude")


def get_devflow_directory() -> Path:
    """DevFlow directory: ``$DEVFLOW_DIR`` or ``~/.devflow``."""
    return _directory_override(DEVFLOW_DIR_ENV, ".devflow")


def get_installation_paths(scope: str) -> InstallationPaths:
    """Resolve the install roots for a scope.

    Raises PathConfigError for an unknown scope, an invalid override, or
    local scope outside a git repository.
    """
    if scope == SCOPE_USER:
        return InstallationPaths(
            claude_dir=get_claude_directory(),
            devflow_dir=get_devflow_directory(),
            git_root=None,
        )
    if scope == SCOPE_LOCAL:
        git_root = git.get_git_root()
        if git_root is None:
            raise PathConfigError(
                "Local scope requires a git repository.",
                hint='Run "git init" first or use --scope user',
            )
        return InstallationPaths(
            claude_dir=git_root / ".claude",
            devflow_dir=git_root / ".devflow",
            git_root=git_root,
        )
    raise PathConfigError(
        f"Invalid scope: {scope}",
        hint='Use "user" or "local"',
    )


def get_managed_settings_path() -> Path:
    """OS-specific Claude Code managed settings (highest precedence).

    Raises PathConfigError on platforms without managed settings.
    """
    if sys.platform == "darwin":
        return Path("/Library/Application Support/ClaudeCode/managed-settings.json")
    if sys.platform.startswith("linux"):
        return Path("/etc/claude-code/managed-settings.json")
    raise PathConfigError(f"Managed settings not supported on platform: {sys.platform}")
