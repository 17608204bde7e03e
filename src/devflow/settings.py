"""
Claude Code ``settings.json`` templating and merging.

The packaged template carries DevFlow's hooks with a ``${DEVFLOW_DIR}``
placeholder. On first install it is written verbatim (after substitution
and teams handling). On re-install an existing document that already has
``hooks`` is patched in place so unrelated user keys survive. An existing
document *without* hooks is a conflict: it is only replaced after explicit
confirmation, and never in a non-interactive session.
"""

import copy
import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"
PLACEHOLDER = "${DEVFLOW_DIR}"

TEAMS_MODE_KEY = "teammateMode"
TEAMS_MODE_VALUE = "auto"
TEAMS_ENV_VAR = "CLAUDE_CODE_EXPERIMENTAL_AGENT_TEAMS"

OVERRIDE_PROMPT = "settings.json exists without hooks (Working Memory needs hooks). Override?"


class SettingsAction(str, Enum):
    """What to do with settings.json given what is already on disk."""

    WRITE_FRESH = "write_fresh"
    PATCH_IN_PLACE = "patch_in_place"
    PROMPT = "prompt"
    WARN_AND_SKIP = "warn_and_skip"


class SettingsOutcome(str, Enum):
    CREATED = "created"
    PATCHED = "patched"
    OVERWRITTEN = "overwritten"
    KEPT = "kept"
    SKIPPED = "skipped"


# =============================================================================
# Pure transforms
# =============================================================================

def substitute_settings_template(template: str, devflow_dir: str) -> str:
    """Replace every ``${DEVFLOW_DIR}`` placeholder in the template text."""
    return template.replace(PLACEHOLDER, devflow_dir)


def apply_teams_config(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy with Agent Teams enabled.

    Sets ``teammateMode`` and the experimental teams env var.
    """
    updated = copy.deepcopy(settings)
    updated[TEAMS_MODE_KEY] = TEAMS_MODE_VALUE
    env = updated.get("env")
    if not isinstance(env, dict):
        env = {}
        updated["env"] = env
    env[TEAMS_ENV_VAR] = "1"
    return updated


def strip_teams_config(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy with Agent Teams removed.

    Drops ``teammateMode`` and the teams env var, and the ``env`` object
    when removing the variable left it empty. An ``env`` that was already
    empty is kept.
    """
    updated = copy.deepcopy(settings)
    updated.pop(TEAMS_MODE_KEY, None)
    env = updated.get("env")
    if isinstance(env, dict) and TEAMS_ENV_VAR in env:
        del env[TEAMS_ENV_VAR]
        if not env:
            del updated["env"]
    return updated


def set_teams_config(settings: Dict[str, Any], enabled: bool) -> Dict[str, Any]:
    return apply_teams_config(settings) if enabled else strip_teams_config(settings)


def is_teams_enabled(settings: Dict[str, Any]) -> bool:
    env = settings.get("env")
    return settings.get(TEAMS_MODE_KEY) is not None or (
        isinstance(env, dict) and TEAMS_ENV_VAR in env
    )


def has_hooks(settings: Optional[Dict[str, Any]]) -> bool:
    return isinstance(settings, dict) and "hooks" in settings


def decide_settings_action(
    file_exists: bool,
    has_expected_shape: bool,
    interactive: bool,
    override: bool = False,
) -> SettingsAction:
    """Decide how to place settings.json without doing any I/O.

    ``override`` (``--override-settings``) is an explicit request to
    replace the file: it is still confirmed interactively, but counts as
    consent in a non-interactive session.
    """
    if not file_exists:
        return SettingsAction.WRITE_FRESH
    if override:
        return SettingsAction.PROMPT if interactive else SettingsAction.WRITE_FRESH
    if has_expected_shape:
        return SettingsAction.PATCH_IN_PLACE
    if interactive:
        return SettingsAction.PROMPT
    return SettingsAction.WARN_AND_SKIP


# =============================================================================
# I/O
# =============================================================================

def dumps_settings(settings: Dict[str, Any]) -> str:
    return json.dumps(settings, indent=2) + "\n"


def load_settings(path: Path) -> Optional[Dict[str, Any]]:
    """Parse a settings file. Missing or malformed JSON yields None."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Could not parse %s: %s", path, e)
        return None
    return data if isinstance(data, dict) else None


def save_settings(path: Path, settings: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_settings(settings), encoding="utf-8")


def render_settings_template(template_text: str, devflow_dir: Path, teams_enabled: bool) -> Dict[str, Any]:
    """Substitute the devflow directory into the template and apply teams.

    The path is JSON-escaped before substitution so Windows separators
    keep the template parseable.
    """
    escaped = json.dumps(str(devflow_dir))[1:-1]
    settings = json.loads(substitute_settings_template(template_text, escaped))
    return set_teams_config(settings, teams_enabled)


def _stdin_is_tty() -> bool:
    return sys.stdin is not None and sys.stdin.isatty()


def install_settings(
    claude_dir: Path,
    template_path: Path,
    devflow_dir: Path,
    teams_enabled: bool = False,
    override: bool = False,
    interactive: Optional[bool] = None,
    confirm: Optional[Callable[[str], bool]] = None,
) -> SettingsOutcome:
    """Install or update ``<claude_dir>/settings.json``.

    ``confirm`` is only called for a PROMPT decision; when it is missing
    the prompt is answered "no".
    """
    settings_path = claude_dir / SETTINGS_FILENAME
    rendered = render_settings_template(
        template_path.read_text(encoding="utf-8"), devflow_dir, teams_enabled
    )

    if interactive is None:
        interactive = _stdin_is_tty()

    exists = settings_path.exists()
    existing = load_settings(settings_path) if exists else None
    action = decide_settings_action(exists, has_hooks(existing), interactive, override)
    logger.debug("settings.json action: %s", action.value)

    if action is SettingsAction.WRITE_FRESH:
        save_settings(settings_path, rendered)
        return SettingsOutcome.OVERWRITTEN if exists else SettingsOutcome.CREATED

    if action is SettingsAction.PROMPT:
        if confirm is not None and confirm(OVERRIDE_PROMPT):
            save_settings(settings_path, rendered)
            return SettingsOutcome.OVERWRITTEN
        if not has_hooks(existing):
            logger.info("Keeping existing settings")
            return SettingsOutcome.KEPT
        action = SettingsAction.PATCH_IN_PLACE

    if action is SettingsAction.PATCH_IN_PLACE:
        save_settings(settings_path, set_teams_config(existing, teams_enabled))
        logger.info("Settings updated (teams %s)", "enabled" if teams_enabled else "disabled")
        return SettingsOutcome.PATCHED

    logger.warning("Settings exist without hooks. Working Memory requires hooks.")
    logger.warning("Re-run interactively to configure, or manually add hooks to settings.json")
    return SettingsOutcome.SKIPPED
