"""
Install record.

``<devflow_dir>/manifest.json`` remembers what ``init`` installed so
``list`` and ``uninstall`` can work from facts instead of guesses.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"


def get_manifest_path(devflow_dir: Path) -> Path:
    return devflow_dir / MANIFEST_FILENAME


def load_manifest(devflow_dir: Path) -> Optional[Dict[str, Any]]:
    """Load the install record. Missing or corrupt records yield None."""
    path = get_manifest_path(devflow_dir)
    if not path.exists():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning("Ignoring unreadable install record %s: %s", path, e)
        return None
    return data if isinstance(data, dict) else None


def save_manifest(
    devflow_dir: Path,
    version: str,
    scope: str,
    plugins: List[str],
    teams: bool,
) -> Path:
    """Write the install record.

    An unchanged install keeps its original timestamp so re-running
    ``init`` leaves the file byte-identical.
    """
    path = get_manifest_path(devflow_dir)
    data: Dict[str, Any] = {
        "version": version,
        "scope": scope,
        "plugins": list(plugins),
        "teams": teams,
    }
    previous = load_manifest(devflow_dir) or {}
    if previous.get("installed_at") and all(previous.get(k) == v for k, v in data.items()):
        data["installed_at"] = previous["installed_at"]
    else:
        data["installed_at"] = datetime.now(timezone.utc).isoformat(timespec="seconds")

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    return path


def installed_plugin_names(devflow_dir: Path) -> List[str]:
    manifest = load_manifest(devflow_dir) or {}
    plugins = manifest.get("plugins")
    return [p for p in plugins if isinstance(p, str)] if isinstance(plugins, list) else []
