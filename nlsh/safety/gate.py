"""
nlsh · safety/gate.py
Coarse safety policy for generated commands.

Two checks, complexity first, then the denylist. Both work on
case-insensitive containment, never on a parse of the command, so a
blocked token inside a quoted argument still rejects. A policy is only
data (a length bound plus pattern -> reason rules) and can be extended
without touching dispatch.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

MAX_COMMAND_LENGTH = 200


class RejectReason(str, Enum):
    TOO_LONG = "too_long"
    DENYLISTED = "denylisted"
    SUSPICIOUS_PATTERN = "suspicious_pattern"


@dataclass(frozen=True)
class SafetyRule:
    pattern: str
    reason: RejectReason
    regex: bool = False

    def matches(self, command: str) -> bool:
        if self.regex:
            return re.search(self.pattern, command, re.I) is not None
        return self.pattern.lower() in command.lower()


@dataclass(frozen=True)
class SafetyVerdict:
    accepted: bool
    reason: Optional[RejectReason] = None
    pattern: Optional[str] = None

    def __bool__(self) -> bool:
        return self.accepted


ACCEPTED = SafetyVerdict(True)

# Remote fetch-and-run idioms.
SUSPICIOUS_RULES: List[SafetyRule] = [
    SafetyRule("Invoke-WebRequest", RejectReason.SUSPICIOUS_PATTERN),
    SafetyRule("DownloadFile", RejectReason.SUSPICIOUS_PATTERN),
    SafetyRule("DownloadString", RejectReason.SUSPICIOUS_PATTERN),
    SafetyRule(r"powershell(\.exe)?\s+-Command", RejectReason.SUSPICIOUS_PATTERN, regex=True),
    SafetyRule(r"\b(Invoke-Expression|iex)\b", RejectReason.SUSPICIOUS_PATTERN, regex=True),
    SafetyRule(r"\b(curl|wget)\b[^|]*\|\s*(sudo\s+)?(ba|z)?sh\b", RejectReason.SUSPICIOUS_PATTERN, regex=True),
]

DENYLIST_RULES: List[SafetyRule] = [
    SafetyRule(p, RejectReason.DENYLISTED)
    for p in ("rm -rf /", "mkfs", "dd if=", ":(){", "shutdown", "reboot")
]


@dataclass
class SafetyPolicy:
    max_length: int = MAX_COMMAND_LENGTH
    complexity_rules: List[SafetyRule] = field(default_factory=lambda: list(SUSPICIOUS_RULES))
    denylist_rules: List[SafetyRule] = field(default_factory=lambda: list(DENYLIST_RULES))

    @classmethod
    def with_extra_denylist(cls, patterns: Iterable[str],
                            max_length: int = MAX_COMMAND_LENGTH) -> "SafetyPolicy":
        policy = cls(max_length=max_length)
        policy.denylist_rules.extend(
            SafetyRule(p, RejectReason.DENYLISTED) for p in patterns if p
        )
        return policy

    def check_complexity(self, command: str) -> SafetyVerdict:
        if len(command) > self.max_length:
            return SafetyVerdict(False, RejectReason.TOO_LONG)
        for rule in self.complexity_rules:
            if rule.matches(command):
                return SafetyVerdict(False, rule.reason, rule.pattern)
        return ACCEPTED

    def check_denylist(self, command: str) -> SafetyVerdict:
        for rule in self.denylist_rules:
            if rule.matches(command):
                return SafetyVerdict(False, rule.reason, rule.pattern)
        return ACCEPTED

    def evaluate(self, command: str) -> SafetyVerdict:
        verdict = self.check_complexity(command)
        if verdict.accepted:
            verdict = self.check_denylist(command)
        if not verdict.accepted:
            logger.warning("blocked %r: %s (%s)", command, verdict.reason.value, verdict.pattern)
        return verdict


DEFAULT_POLICY = SafetyPolicy()


def evaluate(command: str, policy: SafetyPolicy = None) -> SafetyVerdict:
    return (policy or DEFAULT_POLICY).evaluate(command)


def is_safe(command: str) -> bool:
    """Denylist check only."""
    return DEFAULT_POLICY.check_denylist(command).accepted
