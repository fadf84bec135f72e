"""
nlsh · rewrite.py
Post-processing rules for commands the model gets predictably wrong.
Each rule is a plain function command -> command; returning the input
unchanged means "does not apply".
"""
from __future__ import annotations

import logging
import re
from typing import Callable, List, Sequence

logger = logging.getLogger(__name__)

RewriteRule = Callable[[str], str]

PYTHON_PACKAGES = (
    "pandas", "numpy", "matplotlib", "scikit-learn", "django", "flask", "torch",
    "tensorflow", "scipy", "requests", "beautifulsoup4", "sqlalchemy", "pytest",
    "jupyter",
)

_INSTALL_MODULE = re.compile(r"^Install-Module\s+", re.I)
_INSTALL_TARGET = re.compile(r"Install-Module\s+(\S+).*", re.I)
_PYTHON_PKG     = re.compile(
    r"\b(" + "|".join(re.escape(p) for p in PYTHON_PACKAGES) + r")\b", re.I
)


def install_module_to_pip(command: str) -> str:
    """PowerShell's Install-Module naming a python package -> pip install."""
    if not _INSTALL_MODULE.match(command) or not _PYTHON_PKG.search(command):
        return command
    return _INSTALL_TARGET.sub(r"pip install \1", command, count=1)


DEFAULT_RULES: List[RewriteRule] = [install_module_to_pip]


def rewrite(command: str, rules: Sequence[RewriteRule] = None) -> str:
    for rule in (DEFAULT_RULES if rules is None else rules):
        fixed = rule(command)
        if fixed != command:
            logger.info("rewrite %s: %r -> %r", rule.__name__, command, fixed)
            command = fixed
    return command
