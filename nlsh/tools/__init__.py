from nlsh.tools.executor import (
    SessionContext, DirectoryChanged, ProcessExited, ProcessError, Rejected,
    DispatchOutcome, dispatch, change_directory, directory_target,
    resolve_directory, run_command, spawn,
)
from nlsh.tools.git import GitInspector
__all__ = [
    "SessionContext", "DirectoryChanged", "ProcessExited", "ProcessError", "Rejected",
    "DispatchOutcome", "dispatch", "change_directory", "directory_target",
    "resolve_directory", "run_command", "spawn",
    "GitInspector",
]
