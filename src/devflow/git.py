"""Git repository discovery."""

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Characters that must never appear in a path we later hand to other tools
_SUSPICIOUS = ("\n", ";", "&&")


def get_git_root(cwd: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Return the root of the git repository containing ``cwd``.

    ``git rev-parse`` searches upward from the working directory. Returns
    None when not inside a repository, when git is unavailable, or when
    the output does not look like a single absolute path.
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=str(cwd) if cwd is not None else os.getcwd(),
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.debug("git unavailable: %s", e)
        return None

    if result.returncode != 0:
        return None

    raw = (result.stdout or "").strip()
    if not raw or any(token in raw for token in _SUSPICIOUS):
        return None

    if not os.path.isabs(raw):
        return None
    return Path(os.path.normpath(raw))
