"""
Shared fixtures. NLSH_HOME points at a throwaway directory before any
nlsh module is imported, so the module-level config never touches ~/.nlsh.
"""
import os
import tempfile
from pathlib import Path

os.environ["NLSH_HOME"] = tempfile.mkdtemp(prefix="nlsh-test-")

import pytest

from nlsh.profiles import Platform
from nlsh.tools import SessionContext


class StubClient:
    """Stands in for OllamaClient; returns canned text and records prompts."""

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate(self, prompt, model="mistral"):
        self.calls.append((prompt, model))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def stub_client():
    return StubClient


@pytest.fixture
def tree(tmp_path):
    """tmp/a/b and tmp/a/c, returned as the resolved tmp root."""
    root = tmp_path.resolve()
    (root / "a" / "b").mkdir(parents=True)
    (root / "a" / "c").mkdir()
    return root


@pytest.fixture
def ctx(tree):
    return SessionContext(cwd=tree / "a" / "b", platform=Platform.POSIX)
