"""
Safe-delete shell hook: a marker-delimited block in the user's profile.

The text transforms (``find_block``, ``insert_block``, ``remove_block``)
are pure string functions; ``install_to_profile`` and
``remove_from_profile`` are thin file wrappers around them. At most one
block may exist per profile: callers check ``is_already_installed``
before installing.
"""

import re
from pathlib import Path
from typing import List, Optional, Tuple

from .safe_delete import (
    PLATFORM_WINDOWS,
    SHELL_BASH,
    SHELL_FISH,
    SHELL_POWERSHELL,
    SHELL_ZSH,
)

START_MARKER = "# >>> DevFlow safe-delete >>>"
END_MARKER = "# <<< DevFlow safe-delete <<<"

DEFAULT_TRASH_COMMAND = "trash"
# Profiles are treated as text but may hold bytes that are not UTF-8; those
# round-trip unchanged.
PROFILE_ERRORS = "surrogateescape"

_LEADING_BLANK_LINES = re.compile(r"\A(?:[ \t]*\r?\n)+")
_TRAILING_BLANK_LINES = re.compile(r"(?:\r?\n[ \t]*)+\Z")


# =============================================================================
# Block generation
# =============================================================================

def _posix_block(cmd: str) -> List[str]:
    return [
        "rm() {",
        "  local files=()",
        '  for arg in "$@"; do',
        '    [[ "$arg" =~ ^- ]] || files+=("$arg")',
        "  done",
        "  if (( ${#files[@]} > 0 )); then",
        '    ' + cmd + ' "${files[@]}"',
        "  fi",
        "}",
        "command() {",
        '  if [[ "$1" == "rm" ]]; then',
        '    shift; rm "$@"',
        "  else",
        '    builtin command "$@"',
        "  fi",
        "}",
    ]


def _fish_block(cmd: str) -> List[str]:
    return [
        'function rm --description "Safe delete via trash"',
        "  set -l files",
        "  for arg in $argv",
        "    if not string match -q -- '-*' $arg",
        "      set files $files $arg",
        "    end",
        "  end",
        "  if test (count $files) -gt 0",
        "    " + cmd + " $files",
        "  end",
        "end",
    ]


_POWERSHELL_UNALIAS = [
    "if (Get-Alias rm -ErrorAction SilentlyContinue) {",
    "  Remove-Alias rm -Force -Scope Global",
    "}",
]


def _powershell_windows_block() -> List[str]:
    return _POWERSHELL_UNALIAS + [
        "function rm {",
        "  $files = $args | Where-Object { $_ -notlike '-*' }",
        "  if ($files) {",
        "    Add-Type -AssemblyName Microsoft.VisualBasic",
        "    foreach ($f in $files) {",
        "      $p = Resolve-Path $f -ErrorAction SilentlyContinue",
        "      if ($p) {",
        "        if (Test-Path $p -PathType Container) {",
        "          [Microsoft.VisualBasic.FileIO.FileSystem]::DeleteDirectory(",
        "            $p, 'OnlyErrorDialogs', 'SendToRecycleBin')",
        "        } else {",
        "          [Microsoft.VisualBasic.FileIO.FileSystem]::DeleteFile(",
        "            $p, 'OnlyErrorDialogs', 'SendToRecycleBin')",
        "        }",
        "      }",
        "    }",
        "  }",
        "}",
    ]


def _powershell_posix_block(cmd: str) -> List[str]:
    return _POWERSHELL_UNALIAS + [
        "function rm {",
        "  $files = $args | Where-Object { $_ -notlike '-*' }",
        "  if ($files) { & " + cmd + " @files }",
        "}",
    ]


def generate_safe_delete_block(
    shell: str,
    platform: str,
    trash_command: Optional[str],
) -> Optional[str]:
    """Build the marker-wrapped ``rm`` override for a shell.

    Flag arguments (``-rf`` ...) are dropped and the remaining paths go
    to the trash command. PowerShell on Windows uses the .NET recycle bin
    instead of an external command. Returns None for unsupported shells.
    """
    cmd = trash_command or DEFAULT_TRASH_COMMAND

    if shell in (SHELL_BASH, SHELL_ZSH):
        body = _posix_block(cmd)
    elif shell == SHELL_FISH:
        body = _fish_block(cmd)
    elif shell == SHELL_POWERSHELL:
        body = _powershell_windows_block() if platform == PLATFORM_WINDOWS else _powershell_posix_block(cmd)
    else:
        return None

    return "\n".join([START_MARKER] + body + [END_MARKER])


# =============================================================================
# Pure text transforms
# =============================================================================

def find_block(text: str) -> Optional[Tuple[int, int]]:
    """Return (start, end) offsets of the marker block, end exclusive."""
    start = text.find(START_MARKER)
    if start == -1:
        return None
    end = text.find(END_MARKER, start + len(START_MARKER))
    if end == -1:
        return None
    return start, end + len(END_MARKER)


def insert_block(text: str, block: str) -> str:
    """Append the block, separated from existing content by a blank line."""
    if not text:
        return block + "\n"
    separator = "\n" if text.endswith("\n") else "\n\n"
    return text + separator + block + "\n"


def remove_block(text: str) -> Optional[str]:
    """Cut the marker block out of ``text``.

    Blank lines around the block are dropped. Returns None when the block
    is not present, and an empty string when nothing else remains.
    """
    span = find_block(text)
    if span is None:
        return None

    before = _TRAILING_BLANK_LINES.sub("", text[: span[0]])
    after = _LEADING_BLANK_LINES.sub("", text[span[1]:])

    if not before.strip() and not after.strip():
        return ""

    cleaned = "\n".join(part for part in (before, after) if part)
    if not cleaned.endswith("\n"):
        cleaned += "\n"
    return cleaned


# =============================================================================
# File wrappers
# =============================================================================

def _read(profile_path: Path) -> Optional[str]:
    try:
        return profile_path.read_text(encoding="utf-8", errors=PROFILE_ERRORS)
    except FileNotFoundError:
        return None


def is_already_installed(profile_path: Path) -> bool:
    """Whether the profile already holds a complete safe-delete block."""
    content = _read(profile_path)
    return content is not None and find_block(content) is not None


def install_to_profile(profile_path: Path, block: str) -> None:
    """Append the block, creating the file and its parents if needed."""
    profile_path.parent.mkdir(parents=True, exist_ok=True)
    existing = _read(profile_path) or ""
    profile_path.write_text(insert_block(existing, block), encoding="utf-8", errors=PROFILE_ERRORS)


def remove_from_profile(profile_path: Path) -> bool:
    """Remove the block from the profile.

    Returns False when the file or either marker is missing. A file left
    empty by the removal (fish keeps the hook in its own ``rm.fish``) is
    deleted rather than left as a zero-byte artifact.
    """
    content = _read(profile_path)
    if content is None:
        return False

    cleaned = remove_block(content)
    if cleaned is None:
        return False

    if cleaned:
        profile_path.write_text(cleaned, encoding="utf-8", errors=PROFILE_ERRORS)
    else:
        profile_path.unlink()
    return True
