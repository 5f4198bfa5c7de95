"""Locate and read the prompt-sanitizer YAML file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from prompt_sanitizer.config.models import PromptSanitizerConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "prompt-sanitizer.yaml"
CONFIG_ENV_VAR = "PROMPT_SANITIZER_CONFIG"


class ConfigLoadError(ValueError):
    """Raised when a configuration file cannot be read or is not a settings mapping."""


@dataclass(frozen=True)
class ConfigSource:
    """Where settings come from, and whether the user named that file."""

    path: Path
    explicit: bool


def locate_config(cli_path: str | None = None) -> ConfigSource:
    """Pick the config file: ``PROMPT_SANITIZER_CONFIG``, then ``--config``, then the cwd default."""
    env_path = os.environ.get(CONFIG_ENV_VAR, "").strip()
    if env_path:
        return ConfigSource(Path(env_path), explicit=True)
    if cli_path and cli_path.strip():
        return ConfigSource(Path(cli_path.strip()), explicit=True)
    return ConfigSource(Path.cwd() / CONFIG_FILENAME, explicit=False)


def _describe_yaml_error(path: Path, exc: yaml.YAMLError) -> str:
    mark = getattr(exc, "problem_mark", None)
    problem = getattr(exc, "problem", None) or "parse error"
    if mark is None:
        return f"Invalid YAML in {path}: {problem}"
    return f"Invalid YAML in {path} at line {mark.line + 1}, column {mark.column + 1}: {problem}"


def read_config(source: ConfigSource) -> dict[str, Any]:
    """Read settings from ``source``.

    A missing default file means "no settings". A missing file the user named
    is an error, as are undecodable text, YAML syntax errors and a root that
    is not a mapping. Unknown top-level sections are logged and left for the
    model to ignore.
    """
    path = source.path
    if not path.exists():
        if source.explicit:
            raise ConfigLoadError(f"Config file not found: {path}")
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigLoadError(f"Cannot read config file {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(_describe_yaml_error(path, exc)) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Config root in {path} must be a mapping of sections, got {type(data).__name__}")

    unknown = sorted(str(key) for key in data if key not in PromptSanitizerConfig.model_fields)
    if unknown:
        logger.warning("ignoring unknown config sections path=%s sections=%s", path, unknown)
    return data
