"""
Hook registration in Claude Code settings.

Working memory uses three lifecycle hooks (Stop, SessionStart,
PreCompact); ambient mode uses one UserPromptSubmit hook. Every function
here is a pure transform on the settings dict: adding is idempotent,
removing keeps foreign hooks and prunes empty arrays and an empty
``hooks`` object.
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional

MEMORY_HOOK_CONFIG: Dict[str, str] = {
    "Stop": "stop-update-memory.sh",
    "SessionStart": "session-start-memory.sh",
    "PreCompact": "pre-compact-memory.sh",
}
MEMORY_HOOK_TIMEOUT = 10

AMBIENT_HOOK_EVENT = "UserPromptSubmit"
AMBIENT_HOOK_MARKER = "ambient-prompt.sh"
AMBIENT_HOOK_TIMEOUT = 5


def hook_script_path(devflow_dir: Path, script: str) -> Path:
    return devflow_dir / "scripts" / "hooks" / script


def _matchers(settings: Dict[str, Any], event: str) -> List[Dict[str, Any]]:
    hooks = settings.get("hooks")
    if not isinstance(hooks, dict):
        return []
    matchers = hooks.get(event)
    return matchers if isinstance(matchers, list) else []


def _matcher_hooks(matcher: Any) -> List[Any]:
    if not isinstance(matcher, dict):
        return []
    entries = matcher.get("hooks")
    return entries if isinstance(entries, list) else []


def _matcher_uses(matcher: Any, marker: str) -> bool:
    return any(
        isinstance(h, dict) and marker in str(h.get("command", ""))
        for h in _matcher_hooks(matcher)
    )


def _has_hook(settings: Dict[str, Any], event: str, marker: str) -> bool:
    return any(_matcher_uses(m, marker) for m in _matchers(settings, event))


def _add_hook(settings: Dict[str, Any], event: str, command: str, timeout: int) -> None:
    hooks = settings.setdefault("hooks", {})
    hooks.setdefault(event, []).append(
        {"hooks": [{"type": "command", "command": command, "timeout": timeout}]}
    )


def _remove_hook(settings: Dict[str, Any], event: str, marker: str) -> bool:
    hooks = settings.get("hooks")
    if not isinstance(hooks, dict) or not isinstance(hooks.get(event), list):
        return False
    before = len(hooks[event])
    hooks[event] = [m for m in hooks[event] if not _matcher_uses(m, marker)]
    changed = len(hooks[event]) != before
    if not hooks[event]:
        del hooks[event]
    if not hooks:
        del settings["hooks"]
    return changed


# =============================================================================
# Working memory
# =============================================================================

def count_memory_hooks(settings: Dict[str, Any]) -> int:
    """How many of the three memory hooks are registered (0-3)."""
    return sum(
        1 for event, marker in MEMORY_HOOK_CONFIG.items() if _has_hook(settings, event, marker)
    )


def has_memory_hooks(settings: Dict[str, Any]) -> bool:
    return count_memory_hooks(settings) == len(MEMORY_HOOK_CONFIG)


def add_memory_hooks(settings: Dict[str, Any], devflow_dir: Path) -> Dict[str, Any]:
    """Register any missing memory hooks. Existing ones are left alone."""
    updated = copy.deepcopy(settings)
    for event, marker in MEMORY_HOOK_CONFIG.items():
        if not _has_hook(updated, event, marker):
            _add_hook(updated, event, str(hook_script_path(devflow_dir, marker)), MEMORY_HOOK_TIMEOUT)
    return updated


def remove_memory_hooks(settings: Dict[str, Any]) -> Dict[str, Any]:
    updated = copy.deepcopy(settings)
    for event, marker in MEMORY_HOOK_CONFIG.items():
        _remove_hook(updated, event, marker)
    return updated


# =============================================================================
# Ambient mode
# =============================================================================

def has_ambient_hook(settings: Dict[str, Any]) -> bool:
    return _has_hook(settings, AMBIENT_HOOK_EVENT, AMBIENT_HOOK_MARKER)


def add_ambient_hook(settings: Dict[str, Any], devflow_dir: Path) -> Dict[str, Any]:
    updated = copy.deepcopy(settings)
    if not has_ambient_hook(updated):
        _add_hook(
            updated,
            AMBIENT_HOOK_EVENT,
            str(hook_script_path(devflow_dir, AMBIENT_HOOK_MARKER)),
            AMBIENT_HOOK_TIMEOUT,
        )
    return updated


def remove_ambient_hook(settings: Dict[str, Any]) -> Dict[str, Any]:
    updated = copy.deepcopy(settings)
    _remove_hook(updated, AMBIENT_HOOK_EVENT, AMBIENT_HOOK_MARKER)
    return updated


def infer_devflow_dir(settings: Dict[str, Any]) -> Optional[Path]:
    """Recover the devflow directory from a registered Stop hook.

    ``<devflow>/scripts/hooks/stop-update-memory.sh`` -> ``<devflow>``
    """
    for matcher in _matchers(settings, "Stop"):
        for hook in _matcher_hooks(matcher):
            command = hook.get("command") if isinstance(hook, dict) else None
            if isinstance(command, str) and MEMORY_HOOK_CONFIG["Stop"] in command:
                return Path(command).parent.parent.parent
    return None
