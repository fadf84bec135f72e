from nlsh.safety.gate import (
    RejectReason, SafetyRule, SafetyVerdict, SafetyPolicy,
    DEFAULT_POLICY, DENYLIST_RULES, SUSPICIOUS_RULES, MAX_COMMAND_LENGTH,
    evaluate, is_safe,
)
__all__ = [
    "RejectReason", "SafetyRule", "SafetyVerdict", "SafetyPolicy",
    "DEFAULT_POLICY", "DENYLIST_RULES", "SUSPICIOUS_RULES", "MAX_COMMAND_LENGTH",
    "evaluate", "is_safe",
]
