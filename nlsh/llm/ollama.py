"""
nlsh · llm/ollama.py
One non-streaming /api/generate call per turn. No retry; a failed call
means the user re-issues the request.
"""
from __future__ import annotations

import logging
from typing import Optional

import requests

from nlsh.errors import InferenceError

logger = logging.getLogger(__name__)

DEFAULT_URL   = "http://localhost:11434/api/generate"
DEFAULT_MODEL = "mistral"


class OllamaClient:
    def __init__(self, url: str = DEFAULT_URL, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout       # None: wait as long as the model takes
        self._session = session

    def _http(self):
        return self._session or requests

    def generate(self, prompt: str, model: str = DEFAULT_MODEL) -> str:
        payload = {"model": model, "prompt": prompt, "stream": False}
        logger.debug("POST %s model=%s prompt=%d chars", self.url, model, len(prompt))
        try:
            resp = self._http().post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("ollama unreachable at %s: %s", self.url, exc)
            raise InferenceError(f"Error talking to Ollama: {exc}") from exc

        if not resp.ok:
            detail = resp.text[:200].strip()
            logger.error("ollama returned HTTP %s: %s", resp.status_code, detail)
            raise InferenceError(f"Ollama returned HTTP {resp.status_code}: {detail}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise InferenceError("Ollama returned a non-JSON body") from exc
        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise InferenceError("Ollama response is missing the 'response' field")
        logger.debug("model answered %d chars", len(text))
        return text.strip()
