"""Tests for command dispatch: in-process cd versus child process."""

import os
import signal
import sys
from pathlib import Path
from unittest import mock

import pytest

from nlsh.errors import SpawnLaunchError
from nlsh.profiles import Platform
from nlsh.prompt import build_prompt
from nlsh.tools import (
    SessionContext, DirectoryChanged, ProcessExited, ProcessError,
    dispatch, directory_target, resolve_directory, run_command, spawn,
)


class TestDirectoryTarget:

    def test_posix_cd(self):
        assert directory_target("cd src", Platform.POSIX) == "src"

    def test_bare_cd(self):
        assert directory_target("cd", Platform.POSIX) == ""

    def test_quotes_stripped(self):
        assert directory_target('cd "My Documents"', Platform.POSIX) == "My Documents"
        assert directory_target("cd 'a b'", Platform.POSIX) == "a b"

    def test_not_a_directory_change(self):
        assert directory_target("ls -la", Platform.POSIX) is None
        assert directory_target("cdrecord -v", Platform.POSIX) is None
        assert directory_target("echo cd src", Platform.POSIX) is None

    def test_windows_verbs(self):
        assert directory_target("Set-Location src", Platform.WINDOWS) == "src"
        assert directory_target("set-location -Path 'C:\\tmp'", Platform.WINDOWS) == "C:\\tmp"
        assert directory_target("CD src", Platform.WINDOWS) == "src"
        assert directory_target("sl ..", Platform.WINDOWS) == ".."

    def test_posix_is_case_sensitive(self):
        assert directory_target("Set-Location src", Platform.POSIX) is None


class TestDirectoryChange:

    def test_relative_parent_path(self, tree, ctx):
        outcome = dispatch("cd ../c", ctx)
        assert outcome == DirectoryChanged(tree / "a" / "c")
        assert ctx.cwd == tree / "a" / "c"

    def test_next_prompt_sees_new_directory(self, tree, ctx):
        dispatch("cd ../c", ctx)
        prompt = build_prompt("list files", ctx.platform, ctx.cwd)
        assert f"Current directory: {tree / 'a' / 'c'}\n" in prompt
        assert str(tree / "a" / "b") not in prompt

    def test_absolute_path_passes_through(self, tree, ctx):
        outcome = dispatch(f"cd {tree / 'a' / 'c'}", ctx)
        assert isinstance(outcome, DirectoryChanged)
        assert ctx.cwd == tree / "a" / "c"

    def test_missing_directory_leaves_cwd_unchanged(self, tree, ctx):
        before = ctx.cwd
        outcome = dispatch("cd /nonexistent-nlsh-dir", ctx)
        assert isinstance(outcome, ProcessError)
        assert "no such directory" in outcome.message
        assert ctx.cwd == before

    def test_file_is_not_a_directory(self, tree, ctx):
        (ctx.cwd / "notes.txt").write_text("x")
        before = ctx.cwd
        outcome = dispatch("cd notes.txt", ctx)
        assert isinstance(outcome, ProcessError)
        assert ctx.cwd == before

    def test_bare_cd_goes_home(self, tree, ctx):
        with mock.patch("nlsh.tools.executor.Path.home", return_value=tree / "a"):
            outcome = dispatch("cd", ctx)
        assert outcome == DirectoryChanged(tree / "a")

    def test_tilde_expands(self, tree, ctx, monkeypatch):
        monkeypatch.setenv("HOME", str(tree / "a"))
        monkeypatch.setenv("USERPROFILE", str(tree / "a"))
        dispatch("cd ~/c", ctx)
        assert ctx.cwd == tree / "a" / "c"

    def test_never_spawns_a_child(self, ctx):
        with mock.patch("nlsh.tools.executor.subprocess.call") as call:
            dispatch("cd ..", ctx)
        call.assert_not_called()

    def test_process_cwd_untouched(self, ctx):
        before = os.getcwd()
        dispatch("cd ../c", ctx)
        assert os.getcwd() == before

    def test_over_long_name_is_a_process_error(self, ctx):
        before = ctx.cwd
        outcome = dispatch("cd " + "a" * 300, ctx)
        assert isinstance(outcome, ProcessError)
        assert outcome.message.startswith("cd failed")
        assert ctx.cwd == before

    def test_unreadable_parent_is_a_process_error(self, ctx):
        before = ctx.cwd
        with mock.patch("nlsh.tools.executor.Path.exists",
                        side_effect=PermissionError(13, "Permission denied")):
            outcome = dispatch("cd /secret/sub", ctx)
        assert isinstance(outcome, ProcessError)
        assert "Permission denied" in outcome.message
        assert ctx.cwd == before

    def test_resolve_directory_normalises(self, tree):
        assert resolve_directory("./../c/.", tree / "a" / "b") == tree / "a" / "c"


class TestSpawn:

    def test_runs_through_platform_shell_in_session_cwd(self, ctx):
        with mock.patch("nlsh.tools.executor.subprocess.call", return_value=0) as call:
            outcome = dispatch("pip install pandas", ctx)
        assert isinstance(outcome, ProcessExited)
        assert outcome.code == 0 and outcome.ok
        call.assert_called_once_with(["/bin/bash", "-c", "pip install pandas"], cwd=str(ctx.cwd))

    def test_streams_are_not_captured(self, ctx):
        with mock.patch("nlsh.tools.executor.subprocess.call", return_value=0) as call:
            run_command("ls", ctx)
        _, kwargs = call.call_args
        assert "stdout" not in kwargs and "stderr" not in kwargs and "stdin" not in kwargs

    def test_windows_uses_powershell(self, tree):
        ctx = SessionContext(cwd=tree, platform=Platform.WINDOWS)
        with mock.patch("nlsh.tools.executor.subprocess.call", return_value=0) as call:
            dispatch("Get-ChildItem", ctx)
        argv = call.call_args[0][0]
        assert argv[0] == "powershell.exe"
        assert argv[-1] == "Get-ChildItem"

    def test_non_zero_exit_is_an_outcome_not_an_error(self, ctx):
        with mock.patch("nlsh.tools.executor.subprocess.call", return_value=3):
            outcome = dispatch("false", ctx)
        assert outcome.code == 3
        assert not outcome.ok

    def test_launch_failure_is_process_error(self, ctx):
        with mock.patch("nlsh.tools.executor.subprocess.call",
                        side_effect=FileNotFoundError("no bash")):
            outcome = dispatch("ls", ctx)
        assert isinstance(outcome, ProcessError)
        assert "no bash" in outcome.message

    def test_spawn_raises_launch_error(self, ctx):
        with mock.patch("nlsh.tools.executor.subprocess.call", side_effect=PermissionError("denied")):
            with pytest.raises(SpawnLaunchError):
                spawn("ls", ctx)

    def test_sigint_handler_restored_after_child(self, ctx):
        before = signal.getsignal(signal.SIGINT)
        seen = []

        def fake_call(argv, cwd):
            seen.append(signal.getsignal(signal.SIGINT))
            return 0

        with mock.patch("nlsh.tools.executor.subprocess.call", side_effect=fake_call):
            spawn("sleep 1", ctx)
        assert seen[0] is not before
        assert seen[0] is not signal.SIG_IGN
        assert signal.getsignal(signal.SIGINT) is before

    @pytest.mark.skipif(sys.platform == "win32" or not Path("/bin/bash").exists(),
                        reason="needs /bin/bash")
    def test_real_child_exit_code(self, tree):
        ctx = SessionContext(cwd=tree, platform=Platform.POSIX)
        outcome = dispatch("exit 7", ctx)
        assert isinstance(outcome, ProcessExited)
        assert outcome.code == 7
        outcome = dispatch("test \"$(pwd -P)\" = \"$(cd '%s' && pwd -P)\"" % tree, ctx)
        assert outcome.code == 0
