"""
nlsh · tools/executor.py
Command dispatch: a directory change mutates the session context in
this process, everything else runs in a child shell that owns the
terminal until it exits.

A `cd` must never go to a child: the child's new directory would die
with it and every later prompt would describe the wrong place.
"""
from __future__ import annotations

import logging
import os
import re
import signal
import subprocess
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from nlsh.errors import DirectoryResolutionError, SpawnLaunchError
from nlsh.profiles import Platform, ShellProfile, detect_platform, profile_for, shell_argv
from nlsh.safety import RejectReason

logger = logging.getLogger(__name__)


# ── Session state ──────────────────────────────────────────────────────────────

@dataclass
class SessionContext:
    """Working directory and shell for one session; the only cwd the pipeline reads."""
    cwd: Path = field(default_factory=Path.cwd)
    platform: Platform = field(default_factory=detect_platform)

    def __post_init__(self):
        self.cwd = Path(self.cwd)
        self.platform = Platform(self.platform)

    @property
    def profile(self) -> ShellProfile:
        return profile_for(self.platform)

    @property
    def exec_shell(self) -> str:
        return self.profile.exec_shell


# ── Outcomes ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DirectoryChanged:
    new_path: Path


@dataclass(frozen=True)
class ProcessExited:
    code: int
    duration_ms: int = 0

    @property
    def ok(self) -> bool: return self.code == 0


@dataclass(frozen=True)
class ProcessError:
    message: str


@dataclass(frozen=True)
class Rejected:
    reason: RejectReason
    pattern: Optional[str] = None


DispatchOutcome = Union[DirectoryChanged, ProcessExited, ProcessError, Rejected]


# ── Directory change ───────────────────────────────────────────────────────────

_LEADING = re.compile(r"^(\S+)(?:\s+(.*))?$", re.S)
_PS_PATH_FLAG = re.compile(r"^-(?:Literal)?Path\s+", re.I)


def directory_target(command: str, platform: Platform) -> Optional[str]:
    """Argument of a directory-change command ("" for a bare cd), or None."""
    m = _LEADING.match(command.strip())
    if not m:
        return None
    p = profile_for(platform)
    verb = m.group(1)
    verbs = p.cd_verbs
    if p.case_insensitive:
        verb = verb.lower(); verbs = tuple(v.lower() for v in verbs)
    if verb not in verbs:
        return None
    arg = (m.group(2) or "").strip()
    if p.case_insensitive:
        arg = _PS_PATH_FLAG.sub("", arg)
    return arg.replace('"', "").replace("'", "").strip()


def resolve_directory(target: str, cwd: Path) -> Path:
    target = os.path.expanduser(target) if target else str(Path.home())
    resolved = Path(os.path.normpath(os.path.join(str(cwd), target)))
    try:
        exists, is_dir = resolved.exists(), resolved.is_dir()
        searchable = os.access(resolved, os.X_OK)
    except (OSError, ValueError) as exc:
        raise DirectoryResolutionError(f"cd failed: {exc}") from exc
    if not exists:
        raise DirectoryResolutionError(f"cd failed: no such directory: {resolved}")
    if not is_dir:
        raise DirectoryResolutionError(f"cd failed: not a directory: {resolved}")
    if not searchable:
        raise DirectoryResolutionError(f"cd failed: permission denied: {resolved}")
    return resolved


def change_directory(target: str, ctx: SessionContext) -> DispatchOutcome:
    try:
        new_dir = resolve_directory(target, ctx.cwd)
    except DirectoryResolutionError as exc:
        logger.warning("%s (cwd stays %s)", exc, ctx.cwd)
        return ProcessError(str(exc))
    ctx.cwd = new_dir
    logger.info("cwd -> %s", new_dir)
    return DirectoryChanged(new_dir)


# ── Child process ──────────────────────────────────────────────────────────────

@contextmanager
def _terminal_owned_by_child():
    """Parent shrugs off Ctrl+C while the child holds the terminal.

    A no-op handler rather than SIG_IGN: ignored signals survive exec,
    handlers do not, so the child keeps its default Ctrl+C behaviour.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, lambda sig, frame: None)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def spawn(command: str, ctx: SessionContext) -> int:
    """Run *command* through the platform shell with inherited stdio; returns the exit code."""
    argv = shell_argv(ctx.platform, command)
    logger.info("spawn %r in %s via %s", command, ctx.cwd, ctx.exec_shell)
    with _terminal_owned_by_child():
        try:
            code = subprocess.call(argv, cwd=str(ctx.cwd))
        except OSError as exc:
            logger.error("could not launch %r: %s", command, exc)
            raise SpawnLaunchError(f"Execution error: {exc}") from exc
    logger.info("exit %s: %r", code, command)
    return code


def run_command(command: str, ctx: SessionContext) -> DispatchOutcome:
    t0 = time.perf_counter()
    try:
        code = spawn(command, ctx)
    except SpawnLaunchError as exc:
        return ProcessError(str(exc))
    return ProcessExited(code, duration_ms=int((time.perf_counter() - t0) * 1000))


def dispatch(command: str, ctx: SessionContext) -> DispatchOutcome:
    target = directory_target(command, ctx.platform)
    if target is not None:
        return change_directory(target, ctx)
    return run_command(command, ctx)
