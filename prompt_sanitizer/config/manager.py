"""Configuration manager for prompt-sanitizer."""

from __future__ import annotations

import json
import os
from threading import Lock
from typing import Any, ClassVar

from prompt_sanitizer.config.loader import locate_config, read_config
from prompt_sanitizer.config.models import PromptSanitizerConfig

ENV_PREFIX = "PROMPT_SANITIZER_"


def _deep_merge(base: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(base)
    for key, value in updates.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(value, dict)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _coerce_env_value(raw: str) -> Any:
    value = raw.strip()
    lowered = value.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"null", "none"}:
        return None
    try:
        if "." in value:
            return float(value)
        return int(value)
    except ValueError:
        pass
    if value.startswith("[") or value.startswith("{"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _collect_env_overrides(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for key, raw_value in os.environ.items():
        if not key.startswith(prefix):
            continue
        suffix = key[len(prefix) :]
        # Single-segment keys (e.g. the config path variable) are not settings.
        if "__" not in suffix:
            continue
        path = [p.strip().lower() for p in suffix.split("__") if p.strip()]
        if not path:
            continue
        cursor = overrides
        for part in path[:-1]:
            existing = cursor.get(part)
            if not isinstance(existing, dict):
                existing = {}
                cursor[part] = existing
            cursor = existing
        cursor[path[-1]] = _coerce_env_value(raw_value)
    return overrides


class ConfigManager:
    """Thread-safe singleton for typed configuration access."""

    _instance: ClassVar[ConfigManager | None] = None
    _class_lock: ClassVar[Lock] = Lock()

    def __init__(self) -> None:
        self._lock = Lock()
        self._config = PromptSanitizerConfig.model_validate({})
        self._config_path: str | None = None

    @classmethod
    def instance(cls) -> ConfigManager:
        """Get singleton instance."""
        if cls._instance is not None:
            return cls._instance
        with cls._class_lock:
            if cls._instance is None:
                cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset_for_tests(cls) -> None:
        """Reset singleton state for isolated unit tests."""
        with cls._class_lock:
            cls._instance = None

    @classmethod
    def load(
        cls,
        config_path: str | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> ConfigManager:
        """Load configuration from defaults + YAML + env + runtime overrides.

        Raises ``ConfigLoadError`` for an unusable file and pydantic
        ``ValidationError`` for values the models reject.
        """
        manager = cls.instance()
        source = locate_config(config_path)
        yaml_data = read_config(source)
        merged = _deep_merge(yaml_data, _collect_env_overrides())
        merged = _deep_merge(merged, overrides or {})
        new_config = PromptSanitizerConfig.model_validate(merged)
        with manager._lock:
            manager._config = new_config
            manager._config_path = str(source.path) if source.path.exists() else None
        return manager

    def get(self) -> PromptSanitizerConfig:
        """Return current config snapshot."""
        with self._lock:
            return self._config

    @property
    def config_path(self) -> str | None:
        with self._lock:
            return self._config_path
