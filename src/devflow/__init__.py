"""
DevFlow - asset distribution and installer for Claude Code.

Ships a catalog of plugins (commands, agents, skills) built from a shared
source tree, and installs them idempotently into a user or project
Claude directory together with settings, hooks and post-install files.

Usage:
    uv tool install devflow-kit
    devflow init
    devflow init --scope local --plugin implement,code-review
    devflow uninstall
"""

# Package version - keep in sync with pyproject.toml
__version__ = "1.0.0"
