"""
nlsh · sanitize.py
Turns raw model output into a single candidate command line.
Models ignore "no markdown" often enough that fences, backticks and
wrapping quotes have to be peeled off here.
"""
from __future__ import annotations

import re

_FENCE_ONLY   = re.compile(r"^```[\w+#.-]*$")
_FENCE_OPEN   = re.compile(
    r"^```(?:(?:bash|sh|shell|zsh|console|powershell|pwsh|ps1?|cmd|bat|text)\s+)?", re.I
)
_FENCE_CLOSE  = re.compile(r"\s*```$")
_BACKTICKS    = re.compile(r"^`+|`+$")
_QUOTES       = ('"', "'")
# absolute path with a space inside a segment: "C:\Program Files\app.exe"
_SPACED_PATH  = re.compile(r"^(?:[A-Za-z]:|~)?[\\/].*\s.*[\\/]")
_OPTION       = re.compile(r"\s-")


def _first_line(raw: str) -> str:
    for line in (raw or "").splitlines():
        line = line.strip()
        if not line or _FENCE_ONLY.match(line):
            continue
        return line
    return ""


def _is_spaced_path(text: str) -> bool:
    return bool(_SPACED_PATH.match(text)) and not _OPTION.search(text)


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] in _QUOTES and text[-1] == text[0]:
        inner = text[1:-1]
        if text[0] not in inner and not _is_spaced_path(inner.strip()):
            return inner.strip()
    return text


def sanitize(raw: str) -> str:
    """
    First non-empty, non-fence line of *raw*, without fences, backtick runs
    or one pair of wrapping quotes. Returns "" when nothing is left; callers
    treat that as "no command produced".
    """
    line = _first_line(raw)
    if not line:
        return ""
    if line.startswith("```"):
        line = _FENCE_OPEN.sub("", line, count=1)
    line = _FENCE_CLOSE.sub("", line)
    line = _BACKTICKS.sub("", line).strip()
    return _unquote(line)
