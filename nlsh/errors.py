"""nlsh · errors raised by the generation-and-execution pipeline."""
from __future__ import annotations

from typing import Optional


class NLShellError(Exception):
    """Base for every error the turn boundary turns into a message."""


class InferenceError(NLShellError):
    """Model service unreachable or answered with something unusable."""


class EmptyGeneration(NLShellError):
    def __init__(self, raw: str = ""):
        super().__init__("Could not generate a command")
        self.raw = raw


class RejectedByGate(NLShellError):
    def __init__(self, command: str, reason, pattern: Optional[str] = None):
        self.command = command
        self.reason = reason
        self.pattern = pattern
        super().__init__(f"Command rejected ({reason.value})")


class DirectoryResolutionError(NLShellError):
    pass


class SpawnLaunchError(NLShellError):
    pass
