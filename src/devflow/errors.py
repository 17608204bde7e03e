"""Exception types raised by the DevFlow engine.

Core modules raise these; the CLI catches ``DevFlowError``, prints the
cause plus the hint, and exits non-zero.
"""

from typing import Optional


class DevFlowError(Exception):
    """Base class for all DevFlow errors."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class PathConfigError(DevFlowError):
    """Invalid directory override or missing git root for local scope."""


class BuildError(DevFlowError):
    """The shared asset sources needed by a build run are missing."""


class InstallError(DevFlowError):
    """A single installer step failed."""

    def __init__(self, step: str, message: str, hint: Optional[str] = None):
        super().__init__(f"{step}: {message}", hint=hint)
        self.step = step
