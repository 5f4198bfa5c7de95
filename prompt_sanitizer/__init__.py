"""prompt-sanitizer: neutralize prompt-injection patterns in LLM input text."""

from prompt_sanitizer.security import (
    FILTER_MARKER,
    CategoryFilter,
    PromptSanitizer,
    SanitizeResult,
    sanitize_prompt,
)

__all__ = [
    "CategoryFilter",
    "FILTER_MARKER",
    "PromptSanitizer",
    "SanitizeResult",
    "sanitize_prompt",
]
