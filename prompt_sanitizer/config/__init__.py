"""Configuration system for prompt-sanitizer."""

from prompt_sanitizer.config.loader import (
    CONFIG_ENV_VAR,
    CONFIG_FILENAME,
    ConfigLoadError,
    ConfigSource,
    locate_config,
    read_config,
)
from prompt_sanitizer.config.manager import ConfigManager
from prompt_sanitizer.config.models import (
    IOConfig,
    LoggingConfig,
    PromptSanitizerConfig,
    ReportConfig,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "ConfigLoadError",
    "ConfigManager",
    "ConfigSource",
    "IOConfig",
    "LoggingConfig",
    "PromptSanitizerConfig",
    "ReportConfig",
    "locate_config",
    "read_config",
]
