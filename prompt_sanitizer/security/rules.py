"""Built-in prompt-injection categories applied by the sanitizer pipeline."""

from __future__ import annotations

from dataclasses import dataclass

FILTER_MARKER = "[FILTERED]"


@dataclass(frozen=True)
class BuiltinCategory:
    """Named, ordered group of sanitize patterns for one attack vector."""

    name: str
    description: str
    patterns: tuple[str, ...]


# Pipeline order matters: broad system/role framing is consumed before the
# narrower leakage and parameter patterns get a chance to match.
_BUILTIN_CATEGORIES: tuple[BuiltinCategory, ...] = (
    BuiltinCategory(
        "system_prompt_injection",
        "Role headers and attempts to reset prior instructions",
        (
            r"(?i)\bsystem\s*:",
            r"(?i)\byou\s+are\s+now\b",
            r"(?i)\bignore\s+previous\s+instructions\b",
            r"(?i)\bignore\s+all\s+previous\s+instructions\b",
            r"(?i)\bforget\s+everything\b",
            r"(?i)\bnew\s+instructions\s*:",
        ),
    ),
    BuiltinCategory(
        "role_manipulation",
        "Requests to adopt another persona",
        (
            r"(?i)\bact\s+as\s+a\s+\w+",
            r"(?i)\bpretend\s+to\s+be\b",
            r"(?i)\broleplay\s+as\b",
            r"(?i)\bsimulate\s+being\b",
            r"(?i)\btake\s+on\s+the\s+role\b",
        ),
    ),
    BuiltinCategory(
        "instruction_override",
        "Attempts to replace or disregard the active instructions",
        (
            r"(?i)\binstead\s+of\s+following\b",
            r"(?i)\boverride\s+your\s+instructions\b",
            r"(?i)\bignore\s+previous\s+instruction\b",
            r"(?i)\bdisregard\s+the\s+above\b",
            r"(?i)\bignore\s+your\s+guidelines\b",
            r"(?i)\bignore\s+previous\s+instruction\b",
            r"(?i)\bnew\s+directive\s*:",
        ),
    ),
    BuiltinCategory(
        "context_escape",
        "Requests to leave the current character or conversation",
        (
            r"(?i)\bbreak\s+out\s+of\s+character\b",
            r"(?i)\bexit\s+the\s+simulation\b",
            r"(?i)\bend\s+conversation\b",
            r"(?i)\bstop\s+being\s+an?\s+\w+",
            r"(?i)\bleave\s+your\s+role\b",
        ),
    ),
    BuiltinCategory(
        "jailbreak",
        "Jailbreak keywords and named bypass modes",
        (
            r"(?i)\bjailbreak\b",
            r"(?i)\bdan\s+mode\b",
            r"(?i)\bdeveloper\s+mode\b",
            r"(?i)\bevil\s+mode\b",
            r"(?i)\bunrestricted\s+mode\b",
            r"(?i)\bbypass\s+safety\b",
        ),
    ),
    BuiltinCategory(
        "prompt_leaking",
        "Attempts to exfiltrate the prompt or configuration",
        (
            r"(?i)\bshow\s+me\s+your\s+prompt\b",
            r"(?i)\bwhat\s+are\s+your\s+instructions\b",
            r"(?i)\brepeat\s+your\s+system\s+message\b",
            r"(?i)\breveal\s+your\s+guidelines\b",
            r"(?i)\bdisplay\s+your\s+configuration\b",
        ),
    ),
    BuiltinCategory(
        "code_execution",
        "Code execution requests, eval-style calls and fenced code blocks",
        (
            r"(?i)\bexecute\s+code\b",
            r"(?i)\brun\s+this\s+script\b",
            r"(?i)\beval\s*\(",
            r"(?i)\bsystem\s*\(",
            r"(?i)\bshell\s+command\b",
            r"```[\s\S]*?```",
        ),
    ),
    BuiltinCategory(
        "training_data_extraction",
        "Requests for training data or verbatim recall",
        (
            r"(?i)\btraining\s+data\b",
            r"(?i)\bmemorized\s+content\b",
            r"(?i)\brepeat\s+verbatim\b",
            r"(?i)\bexact\s+copy\b",
            r"(?i)\bword\s+for\s+word\b",
            r"(?i)\bwhat\s+did\s+you\s+learn\b",
        ),
    ),
    BuiltinCategory(
        "indirect_injection",
        "Deferred triggers planted for later turns",
        (
            r"(?i)\bwhen\s+you\s+see\s+this\b",
            r"(?i)\bif\s+someone\s+asks\b",
            r"(?i)\bfuture\s+instructions\b",
            r"(?i)\bnext\s+time\s+respond\b",
            r"(?i)\bremember\s+to\s+always\b",
        ),
    ),
    BuiltinCategory(
        "model_manipulation",
        "Inline sampling parameter settings",
        (
            r"(?i)\btemperature\s*=",
            r"(?i)\bmax_tokens\s*=",
            r"(?i)\btop_p\s*=",
            r"(?i)\bfrequency_penalty\b",
            r"(?i)\bpresence_penalty\b",
            r"(?i)\bmodel\s+parameters\b",
        ),
    ),
)


def default_categories() -> tuple[BuiltinCategory, ...]:
    """Return the built-in categories in pipeline order."""
    return _BUILTIN_CATEGORIES
