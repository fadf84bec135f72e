"""nlsh · tools/git.py: read-only git queries for the built-in gst command."""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Union

logger = logging.getLogger(__name__)


class GitInspector:
    def __init__(self, cwd: Union[Path, str, Callable[[], Path]] = "."):
        # a callable lets the inspector follow the session's cwd
        self._cwd = cwd

    @property
    def cwd(self) -> Path:
        return Path(self._cwd() if callable(self._cwd) else self._cwd)

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        return subprocess.run(["git", *args], capture_output=True, text=True,
                              timeout=15, cwd=str(self.cwd))

    def is_repo(self) -> bool:
        try:
            r = self._run(["rev-parse", "--is-inside-work-tree"])
        except (OSError, subprocess.SubprocessError):
            return False
        return r.returncode == 0 and r.stdout.strip() == "true"

    def current_branch(self) -> str:
        try:
            r = self._run(["branch", "--show-current"])
        except (OSError, subprocess.SubprocessError):
            return "unknown"
        if r.returncode != 0:
            return "unknown"
        return r.stdout.strip() or "unknown"

    def status_summary(self) -> str:
        try:
            r = self._run(["status", "--short"])
        except (OSError, subprocess.SubprocessError) as exc:
            return f"Error: {exc}"
        if r.returncode != 0:
            return f"Error: {r.stderr.strip() or f'git exit {r.returncode}'}"
        return r.stdout.strip() or "Working tree clean"

    def has_uncommitted_changes(self) -> bool:
        try:
            r = self._run(["status", "--porcelain"])
        except (OSError, subprocess.SubprocessError):
            return False
        return r.returncode == 0 and bool(r.stdout.strip())
