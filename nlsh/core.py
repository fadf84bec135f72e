"""
nlsh · core.py
Generation-and-execution pipeline.
- prompt -> model -> sanitize -> rewrite -> safety gate
- every failure is a typed NLShellError; run_turn folds them into a TurnResult
- the session context is passed in, never read from the process
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from nlsh.config import cfg
from nlsh.errors import NLShellError, EmptyGeneration, RejectedByGate
from nlsh.llm import OllamaClient
from nlsh.profiles import Platform
from nlsh.prompt import build_prompt
from nlsh.rewrite import RewriteRule, rewrite
from nlsh.safety import SafetyPolicy, MAX_COMMAND_LENGTH
from nlsh.sanitize import sanitize
from nlsh.tools import SessionContext, DispatchOutcome, Rejected, dispatch

logger = logging.getLogger(__name__)


# ── Data structures ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GenerationRequest:
    user_text: str
    platform: Platform
    working_directory: Path
    model_name: str


@dataclass
class Generation:
    command: str
    raw: str
    model: str
    latency_ms: int = 0
    rewritten: bool = False


@dataclass
class TurnResult:
    request: GenerationRequest
    generation: Optional[Generation] = None
    outcome: Optional[DispatchOutcome] = None
    error: Optional[NLShellError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ── NLCore ─────────────────────────────────────────────────────────────────────

class NLCore:
    def __init__(self, client=None, policy: Optional[SafetyPolicy] = None,
                 rules: Optional[Sequence[RewriteRule]] = None):
        self._client = client
        self._policy = policy
        self._rules = rules

    def _get_client(self):
        if self._client is None:
            self._client = OllamaClient(
                url=cfg.get("ollama_url"), timeout=cfg.request_timeout(),
            )
        return self._client

    def _invalidate_client(self):
        self._client = None

    def policy(self) -> SafetyPolicy:
        if self._policy is not None:
            return self._policy
        return SafetyPolicy.with_extra_denylist(
            cfg.get("extra_blocked_patterns") or [],
            max_length=min(int(cfg.get("max_command_length", MAX_COMMAND_LENGTH)),
                           MAX_COMMAND_LENGTH),
        )

    def request(self, user_text: str, ctx: SessionContext,
                model: Optional[str] = None) -> GenerationRequest:
        return GenerationRequest(
            user_text=user_text.strip(),
            platform=ctx.platform,
            working_directory=ctx.cwd,
            model_name=model or cfg.get("model", "mistral"),
        )

    def generate(self, req: GenerationRequest) -> Generation:
        """Command for *req*, or InferenceError / EmptyGeneration / RejectedByGate."""
        prompt = build_prompt(req.user_text, req.platform, req.working_directory)
        t0 = time.time()
        raw = self._get_client().generate(prompt, req.model_name)
        latency = int((time.time() - t0) * 1000)

        command = sanitize(raw)
        if not command:
            logger.warning("empty generation for %r (raw=%r)", req.user_text, raw[:200])
            raise EmptyGeneration(raw)

        fixed = rewrite(command, self._rules)
        verdict = self.policy().evaluate(fixed)
        if not verdict.accepted:
            raise RejectedByGate(fixed, verdict.reason, verdict.pattern)

        logger.info("%r -> %r (%dms)", req.user_text, fixed, latency)
        return Generation(command=fixed, raw=raw, model=req.model_name,
                          latency_ms=latency, rewritten=fixed != command)

    def run_turn(self, user_text: str, ctx: SessionContext,
                 model: Optional[str] = None, execute: bool = True,
                 on_command: Optional[Callable[[Generation], None]] = None) -> TurnResult:
        """One full turn. *on_command* sees the command before anything runs."""
        result = TurnResult(request=self.request(user_text, ctx, model))
        try:
            result.generation = self.generate(result.request)
        except RejectedByGate as exc:
            result.error = exc
            result.outcome = Rejected(exc.reason, exc.pattern)
            return result
        except NLShellError as exc:
            result.error = exc
            return result

        if on_command:
            on_command(result.generation)
        if execute:
            result.outcome = dispatch(result.generation.command, ctx)
        return result


core = NLCore()
