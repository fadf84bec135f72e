#!/usr/bin/env python3
"""nlsh · config.py"""

import json
import logging
import os
from pathlib import Path
from datetime import datetime
from typing import Any, Optional

logger = logging.getLogger(__name__)


def config_dir() -> Path:
    override = os.environ.get("NLSH_HOME", "").strip()
    return Path(override).expanduser() if override else Path.home() / ".nlsh"


DEFAULT_CONFIG: dict[str, Any] = {
    "version": "1.0.0",
    "created_at": "",
    "model": "mistral",
    "ollama_url": "http://localhost:11434/api/generate",
    "request_timeout": 0,
    "max_command_length": 200,
    "extra_blocked_patterns": [],
    "color": True,
    "autocomplete": True,
    "log_level": "WARNING",
}

# key -> (type, min, max, allowed)
_RULES: dict[str, tuple] = {
    "request_timeout":    (int, 0,  3600, None),
    "max_command_length": (int, 20, 200, None),
    "log_level": (str, None, None, ["DEBUG", "INFO", "WARNING", "ERROR"]),
}

_BOOL_KEYS = {"color", "autocomplete"}
_LIST_KEYS = {"extra_blocked_patterns"}


class ConfigError(ValueError):
    """Raised when a setting is given a value it cannot hold."""


class NLConfig:
    def __init__(self, path: Optional[Path] = None):
        self._file = Path(path) if path else config_dir() / "config.json"
        self._data: dict[str, Any] = {}
        self._load()

    def _ensure_dir(self):
        self._file.parent.mkdir(parents=True, exist_ok=True)

    def _load(self):
        if self._file.exists():
            try:
                saved = json.loads(self._file.read_text("utf-8"))
                if not isinstance(saved, dict):
                    raise ValueError("config root must be an object")
                self._data = self._merge(saved)
                return
            except (OSError, ValueError) as exc:
                logger.warning("Ignoring unreadable config %s: %s", self._file, exc)
        self._data = DEFAULT_CONFIG.copy()
        self._data["extra_blocked_patterns"] = []
        self._data["created_at"] = datetime.now().isoformat()
        try:
            self._save()
        except OSError as exc:
            logger.warning("Could not write config %s: %s", self._file, exc)

    def _merge(self, saved: dict) -> dict[str, Any]:
        """Defaults overlaid with the saved values that pass validation."""
        data = DEFAULT_CONFIG.copy()
        data["extra_blocked_patterns"] = []
        for key, value in saved.items():
            if key in DEFAULT_CONFIG and key not in ("version", "created_at"):
                try:
                    value = self._validate(key, value)
                except ConfigError as exc:
                    logger.warning("Ignoring %s in %s: %s", key, self._file, exc)
                    continue
            data[key] = value
        return data

    def _save(self):
        self._ensure_dir()
        self._data["_updated_at"] = datetime.now().isoformat()
        self._file.write_text(
            json.dumps(self._data, indent=2, ensure_ascii=False), "utf-8"
        )

    def _validate(self, key: str, value: Any) -> Any:
        if key in _BOOL_KEYS:
            if isinstance(value, str):
                return value.lower() in ("true", "1", "yes", "on")
            return bool(value)
        if key in _LIST_KEYS:
            if isinstance(value, str):
                return [v.strip() for v in value.split(",") if v.strip()]
            if not isinstance(value, (list, tuple)):
                raise ConfigError(f"'{key}' must be a list of strings")
            return [str(v) for v in value]
        if key == "model":
            value = str(value).strip()
            if not value: raise ConfigError("'model' must not be empty")
            return value
        if key == "ollama_url":
            value = str(value).strip()
            if not value.startswith(("http://", "https://")):
                raise ConfigError("'ollama_url' must start with http:// or https://")
            return value
        if key not in _RULES:
            return value
        typ, vmin, vmax, allowed = _RULES[key]
        if key == "log_level": value = str(value).upper()
        try: value = typ(value)
        except (TypeError, ValueError): raise ConfigError(f"'{key}' must be {typ.__name__}")
        if vmin is not None and value < vmin: raise ConfigError(f"'{key}' >= {vmin}")
        if vmax is not None and value > vmax: raise ConfigError(f"'{key}' <= {vmax}")
        if allowed and value not in allowed:
            raise ConfigError(f"'{key}' must be: {', '.join(str(a) for a in allowed)}")
        return value

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key not in DEFAULT_CONFIG or key in ("version", "created_at"):
            raise ConfigError(f"Unknown setting: '{key}'")
        value = self._validate(key, value)
        self._data[key] = value
        self._save()
        logger.info("config %s set to %r", key, value)

    def all(self) -> dict:
        return dict(self._data)

    def reset(self) -> None:
        self._data = DEFAULT_CONFIG.copy()
        self._data["extra_blocked_patterns"] = []
        self._data["created_at"] = datetime.now().isoformat()
        self._save()

    def path(self) -> Path:
        return self._file

    def log_path(self) -> Path:
        return self._file.parent / "nlsh.log"

    def request_timeout(self) -> Optional[int]:
        t = int(self._data.get("request_timeout", 0) or 0)
        return t or None


cfg = NLConfig()
