"""
Platform and shell detection for the safe-delete shell hook.

The hook replaces ``rm`` with a function that sends files to the trash
instead. Which trash command to use and which profile file to edit
depends on the platform and the user's shell.
"""

import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

PLATFORM_MACOS = "macos"
PLATFORM_LINUX = "linux"
PLATFORM_WINDOWS = "windows"

SHELL_ZSH = "zsh"
SHELL_BASH = "bash"
SHELL_FISH = "fish"
SHELL_POWERSHELL = "powershell"
SHELL_UNKNOWN = "unknown"

SUPPORTED_SHELLS = (SHELL_ZSH, SHELL_BASH, SHELL_FISH, SHELL_POWERSHELL)


@dataclass(frozen=True)
class SafeDeleteInfo:
    command: Optional[str]
    install_hint: Optional[str]


@dataclass(frozen=True)
class SafeDeleteSuggestion:
    command: str
    install_hint: str
    alias_hint: str


def detect_platform(sys_platform: Optional[str] = None) -> str:
    """Map ``sys.platform`` to macos / windows / linux (the default)."""
    value = sys_platform if sys_platform is not None else sys.platform
    if value == "darwin":
        return PLATFORM_MACOS
    if value == "win32":
        return PLATFORM_WINDOWS
    return PLATFORM_LINUX


def detect_shell() -> str:
    """Detect the user's shell from the environment.

    PowerShell sets ``PSModulePath`` in every session; other shells are
    recognised from the basename of ``$SHELL``.
    """
    if os.environ.get("PSModulePath"):
        return SHELL_POWERSHELL

    shell_path = os.environ.get("SHELL")
    if not shell_path:
        return SHELL_UNKNOWN

    name = os.path.basename(shell_path)
    if name in (SHELL_ZSH, SHELL_BASH, SHELL_FISH):
        return name
    return SHELL_UNKNOWN


def get_profile_path(shell: str, sys_platform: Optional[str] = None) -> Optional[Path]:
    """Profile file the hook block lives in, or None for unknown shells.

    Fish stores the hook as a standalone ``rm.fish`` function file.
    """
    home = Path(os.environ.get("HOME") or Path.home())

    if shell == SHELL_ZSH:
        return home / ".zshrc"
    if shell == SHELL_BASH:
        return home / ".bashrc"
    if shell == SHELL_FISH:
        return home / ".config" / "fish" / "functions" / "rm.fish"
    if shell == SHELL_POWERSHELL:
        if detect_platform(sys_platform) == PLATFORM_WINDOWS:
            profile = os.environ.get("USERPROFILE")
            docs = Path(profile) / "Documents" if profile else home / "Documents"
            return docs / "PowerShell" / "Microsoft.PowerShell_profile.ps1"
        return home / ".config" / "powershell" / "Microsoft.PowerShell_profile.ps1"
    return None


def get_safe_delete_info(platform: str) -> SafeDeleteInfo:
    if platform == PLATFORM_MACOS:
        return SafeDeleteInfo(command="trash", install_hint="brew install trash-cli")
    if platform == PLATFORM_LINUX:
        return SafeDeleteInfo(
            command="trash-put",
            install_hint="sudo apt install trash-cli  # or: npm install -g trash-cli",
        )
    # Windows uses the recycle bin through .NET, no external command
    return SafeDeleteInfo(command=None, install_hint=None)


def has_safe_delete(platform: str) -> bool:
    """Whether a trash mechanism is available on this machine."""
    if platform == PLATFORM_WINDOWS:
        return True
    info = get_safe_delete_info(platform)
    return bool(info.command) and shutil.which(info.command) is not None


def get_safe_delete_suggestion(platform: str) -> Optional[SafeDeleteSuggestion]:
    """Install and alias hints for the trash command; None on Windows."""
    info = get_safe_delete_info(platform)
    if not info.command or not info.install_hint:
        return None
    return SafeDeleteSuggestion(
        command=info.command,
        install_hint=info.install_hint,
        alias_hint=f"alias rm='{info.command}'",
    )
