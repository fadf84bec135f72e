"""Tests for prompt construction and platform profiles."""

from pathlib import Path
from unittest import mock

from nlsh.profiles import PLATFORM_PROFILES, Platform, detect_platform, shell_argv
from nlsh.prompt import build_prompt


class TestBuildPrompt:

    def test_posix_dialect_and_cwd(self):
        p = build_prompt("list files", Platform.POSIX, Path("/home/u/proj"))
        assert p.startswith("You are a bash command generator. Current directory: /home/u/proj")
        assert p.rstrip().endswith("User request: list files\nCommand:")

    def test_windows_dialect(self):
        p = build_prompt("list files", Platform.WINDOWS, "C:\\Users\\u")
        assert "You are a PowerShell command generator" in p
        assert "C:\\Users\\u" in p

    def test_deterministic(self):
        a = build_prompt("install pandas", Platform.POSIX, "/tmp")
        b = build_prompt("install pandas", Platform.POSIX, "/tmp")
        assert a == b

    def test_fixed_rules_present_on_every_platform(self):
        for platform in Platform:
            p = build_prompt("x", platform, "/")
            assert "Output ONLY ONE simple command" in p
            assert "Python packages: pip install PACKAGE_NAME" in p
            assert "Node packages: npm install PACKAGE_NAME" in p
            assert '"go to X", "cd to X", "navigate to X" -> cd X' in p
            assert '"create branch X" -> git checkout -b X' in p
            assert 'User: "install pandas" -> pip install pandas' in p

    def test_chaining_operator_differs_by_platform(self):
        posix = build_prompt("x", Platform.POSIX, "/")
        win = build_prompt("x", Platform.WINDOWS, "/")
        assert 'git add . && git commit -m "X"' in posix
        assert 'git add . ; git commit -m "X"' in win
        assert "Use semicolon (;) NOT && for command chaining in PowerShell" in win
        assert "NOTE:" not in posix

    def test_file_creation_differs_by_platform(self):
        posix = build_prompt("x", Platform.POSIX, "/")
        win = build_prompt("x", Platform.WINDOWS, "/")
        assert '"create file X" -> touch X' in posix
        assert '"create file X" -> New-Item X -ItemType File -Force' in win
        assert 'Write-Host "Hello!"' in win
        assert 'echo "Hello!"' in posix

    def test_user_text_is_trimmed_and_braces_survive(self):
        p = build_prompt("  echo {x}  ", Platform.POSIX, "/")
        assert "User request: echo {x}\n" in p


class TestProfiles:

    def test_detect_windows(self):
        with mock.patch("nlsh.profiles.sys.platform", "win32"):
            assert detect_platform() is Platform.WINDOWS

    def test_detect_posix(self):
        with mock.patch("nlsh.profiles.sys.platform", "linux"):
            assert detect_platform() is Platform.POSIX
        with mock.patch("nlsh.profiles.sys.platform", "darwin"):
            assert detect_platform() is Platform.POSIX

    def test_shell_argv(self):
        assert shell_argv(Platform.POSIX, "ls -la") == ["/bin/bash", "-c", "ls -la"]
        assert shell_argv(Platform.WINDOWS, "dir") == ["powershell.exe", "-NoProfile", "-Command", "dir"]

    def test_every_platform_has_a_profile(self):
        assert set(PLATFORM_PROFILES) == set(Platform)
