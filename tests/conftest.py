"""Shared test fixtures for prompt-sanitizer."""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from prompt_sanitizer.config.manager import ConfigManager


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> Iterator[None]:
    """Keep host environment and cwd config files out of every test."""
    for key in list(os.environ):
        if key.startswith("PROMPT_SANITIZER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))
    ConfigManager._reset_for_tests()
    yield
    ConfigManager._reset_for_tests()
