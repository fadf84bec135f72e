"""nlsh · profiles.py: per-platform shell facts, one table keyed by platform."""
from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple


class Platform(str, Enum):
    POSIX = "posix"
    WINDOWS = "windows"


@dataclass(frozen=True)
class ShellProfile:
    dialect: str                 # name the model is told to write for
    exec_shell: str              # interpreter used to run commands
    exec_args: Tuple[str, ...]   # argv prefix placed before the command string
    chain: str                   # operator for "do A then B"
    open_file: str
    create_file: str             # templates take {name}
    create_folder: str
    greeting: str
    cd_verbs: Tuple[str, ...]
    case_insensitive: bool
    chain_note: str = ""


PLATFORM_PROFILES: Dict[Platform, ShellProfile] = {
    Platform.POSIX: ShellProfile(
        dialect="bash",
        exec_shell="/bin/bash",
        exec_args=("-c",),
        chain="&&",
        open_file="xdg-open {name}",
        create_file="touch {name}",
        create_folder="mkdir -p {name}",
        greeting='echo "Hello!"',
        cd_verbs=("cd",),
        case_insensitive=False,
    ),
    Platform.WINDOWS: ShellProfile(
        dialect="PowerShell",
        exec_shell="powershell.exe",
        exec_args=("-NoProfile", "-Command"),
        chain=";",
        open_file="notepad {name}",
        create_file="New-Item {name} -ItemType File -Force",
        create_folder="New-Item {name} -ItemType Directory -Force",
        greeting='Write-Host "Hello!"',
        cd_verbs=("cd", "Set-Location", "chdir", "sl"),
        case_insensitive=True,
        chain_note="Use semicolon (;) NOT && for command chaining in PowerShell",
    ),
}


def detect_platform() -> Platform:
    return Platform.WINDOWS if sys.platform == "win32" else Platform.POSIX


def profile_for(platform: Platform) -> ShellProfile:
    return PLATFORM_PROFILES[Platform(platform)]


def shell_argv(platform: Platform, command: str) -> List[str]:
    p = profile_for(platform)
    return [p.exec_shell, *p.exec_args, command]
