"""Prompt-injection sanitization."""

from prompt_sanitizer.security.rules import FILTER_MARKER, BuiltinCategory, default_categories
from prompt_sanitizer.security.sanitizer import (
    CategoryFilter,
    Modification,
    PromptSanitizer,
    SanitizeResult,
    sanitize_prompt,
)

__all__ = [
    "BuiltinCategory",
    "CategoryFilter",
    "FILTER_MARKER",
    "Modification",
    "PromptSanitizer",
    "SanitizeResult",
    "default_categories",
    "sanitize_prompt",
]
