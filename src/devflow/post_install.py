"""
Static files and directories placed next to the plugins.

Each helper only creates what is missing: user edits to CLAUDE.md,
.claudeignore or .gitignore are never overwritten.
"""

import logging
from pathlib import Path
from typing import List, Sequence

logger = logging.getLogger(__name__)

CLAUDE_MD = "CLAUDE.md"
CLAUDEIGNORE = ".claudeignore"
GITIGNORE = ".gitignore"
GITIGNORE_HEADER = "# DevFlow local installation"
GITIGNORE_ENTRIES = (".claude/", ".devflow/")

DOCS_DIR = ".docs"
DOCS_SUBDIRS = (
    Path("status") / "compact",
    Path("reviews"),
    Path("releases"),
)


def _write_if_absent(target: Path, template: Path) -> bool:
    content = template.read_text(encoding="utf-8")
    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        with open(target, "x", encoding="utf-8") as f:
            f.write(content)
    except FileExistsError:
        return False
    return True


def install_claude_md(claude_dir: Path, template: Path) -> bool:
    """Install the root CLAUDE.md. Returns False if one already exists."""
    created = _write_if_absent(claude_dir / CLAUDE_MD, template)
    if not created:
        logger.info("CLAUDE.md exists - keeping your configuration")
    return created


def install_claudeignore(git_root: Path, template: Path) -> bool:
    """Create .claudeignore at the repository root unless present."""
    return _write_if_absent(git_root / CLAUDEIGNORE, template)


def compute_gitignore_append(existing: str, entries: Sequence[str]) -> List[str]:
    """Entries not yet present in a .gitignore (whitespace-insensitive)."""
    existing_lines = {line.strip() for line in existing.split("\n")}
    return [entry for entry in entries if entry not in existing_lines]


def update_gitignore(git_root: Path, entries: Sequence[str] = GITIGNORE_ENTRIES) -> List[str]:
    """Append missing DevFlow entries to .gitignore; returns what was added."""
    path = git_root / GITIGNORE
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        content = ""

    to_add = compute_gitignore_append(content, entries)
    if not to_add:
        return []

    block = GITIGNORE_HEADER + "\n" + "\n".join(to_add) + "\n"
    new_content = f"{content.rstrip()}\n\n{block}" if content.strip() else block
    path.write_text(new_content, encoding="utf-8")
    return to_add


def create_docs_structure(base_dir: Path) -> Path:
    """Create ``.docs/`` with its fixed subfolders under ``base_dir``."""
    docs = base_dir / DOCS_DIR
    for sub in DOCS_SUBDIRS:
        (docs / sub).mkdir(parents=True, exist_ok=True)
    return docs
