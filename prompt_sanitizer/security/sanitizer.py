"""Prompt-injection sanitization pipeline.

Rules are written in the usual ``\\b``/``\\w``/``\\s`` notation but matched
with Unicode semantics: RE2 only knows the ASCII forms of those escapes, so
``compile_rules`` widens ``\\w`` and ``\\s`` into Unicode classes and checks
leading/trailing ``\\b`` against Unicode word characters around each match.
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import re2

from prompt_sanitizer.security.rules import FILTER_MARKER, BuiltinCategory, default_categories

logger = logging.getLogger(__name__)

# Unicode White_Space, the set trimmed from results and matched by ``\s``.
WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)

_WORD_ITEMS = r"\p{L}\p{M}\p{N}\p{Pc}"
_SPACE_ITEMS = r"\t\n\x0b\x0c\r\x{85}\p{Z}"


def is_word_char(ch: str) -> bool:
    """Unicode word character: letter, mark, number or connector punctuation."""
    category = unicodedata.category(ch)
    return category[0] in "LMN" or category == "Pc"


def _is_escaped_at(expression: str, index: int) -> bool:
    """True when ``expression[index]`` follows an odd run of backslashes."""
    run = 0
    while index - run - 1 >= 0 and expression[index - run - 1] == "\\":
        run += 1
    return run % 2 == 1


def _unicode_classes(expression: str) -> str:
    """Rewrite ``\\w``, ``\\s`` (and ``\\W``, ``\\S`` outside classes) as Unicode classes."""
    out: list[str] = []
    in_class = False
    i = 0
    while i < len(expression):
        ch = expression[i]
        if ch == "\\" and i + 1 < len(expression):
            escape = expression[i + 1]
            if escape == "w":
                out.append(_WORD_ITEMS if in_class else f"[{_WORD_ITEMS}]")
            elif escape == "s":
                out.append(_SPACE_ITEMS if in_class else f"[{_SPACE_ITEMS}]")
            elif escape == "W" and not in_class:
                out.append(f"[^{_WORD_ITEMS}]")
            elif escape == "S" and not in_class:
                out.append(f"[^{_SPACE_ITEMS}]")
            else:
                # Negated escapes inside a class keep their ASCII meaning; only ``[\s\S]`` uses one.
                out.append(expression[i : i + 2])
            i += 2
            continue
        if ch == "[" and not in_class:
            in_class = True
        elif ch == "]" and in_class:
            in_class = False
        out.append(ch)
        i += 1
    return "".join(out)


@dataclass(frozen=True)
class CompiledRule:
    """Pattern text paired with its compiled RE2 expression and edge word-boundary checks."""

    pattern: str
    regex: Any
    bounded_start: bool = False
    bounded_end: bool = False

    def _at_boundary(self, text: str, start: int, end: int) -> bool:
        if self.bounded_start and start > 0 and is_word_char(text[start - 1]):
            return False
        if self.bounded_end and end < len(text) and is_word_char(text[end]):
            return False
        return True

    def subn(self, replacement: str, text: str) -> tuple[str, int]:
        """Replace every non-overlapping leftmost match, returning the new text and match count."""
        pieces: list[str] = []
        last = 0
        pos = 0
        count = 0
        while pos <= len(text):
            match = self.regex.search(text, pos)
            if match is None:
                break
            start, end = match.span()
            if not self._at_boundary(text, start, end):
                pos = start + 1
                continue
            pieces.append(text[last:start])
            pieces.append(replacement)
            last = end
            pos = end if end > start else end + 1
            count += 1
        if not count:
            return text, 0
        pieces.append(text[last:])
        return "".join(pieces), count

    def sub(self, replacement: str, text: str) -> str:
        return self.subn(replacement, text)[0]


def _split_edge_boundaries(pattern: str) -> tuple[str, bool, bool]:
    """Strip a leading and trailing ``\\b`` (after any inline flag group) from ``pattern``."""
    flags = ""
    body = pattern
    if body.startswith("(?") and ")" in body:
        close = body.index(")")
        if body[2:close].isalpha():
            flags, body = body[: close + 1], body[close + 1 :]
    bounded_start = body.startswith(r"\b")
    if bounded_start:
        body = body[2:]
    bounded_end = body.endswith(r"\b") and len(body) >= 2 and not _is_escaped_at(body, len(body) - 2)
    if bounded_end:
        body = body[:-2]
    return flags + body, bounded_start, bounded_end


def compile_rules(patterns: Iterable[str], category: str = "") -> tuple[CompiledRule, ...]:
    """Compile patterns with RE2 using Unicode semantics, skipping any that fail to compile."""
    compiled: list[CompiledRule] = []
    for pattern in patterns:
        expression, bounded_start, bounded_end = _split_edge_boundaries(pattern)
        try:
            regex = re2.compile(_unicode_classes(expression))
        except re2.error:
            logger.warning("skipping sanitize rule that failed to compile category=%s pattern=%r", category, pattern)
            continue
        compiled.append(
            CompiledRule(pattern=pattern, regex=regex, bounded_start=bounded_start, bounded_end=bounded_end)
        )
    return tuple(compiled)


@dataclass(frozen=True)
class Modification:
    """One rule that replaced text during a sanitization call."""

    category: str
    pattern: str
    count: int


@dataclass(frozen=True)
class SanitizeResult:
    """Sanitization output with traceable modifications."""

    original: str
    sanitized: str
    modifications: list[Modification] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.original != self.sanitized

    @property
    def filtered_count(self) -> int:
        """Number of marker tokens present in the sanitized text."""
        return self.sanitized.count(FILTER_MARKER)


class CategoryFilter:
    """Ordered rules for one attack category, each replacing matches with the marker."""

    def __init__(self, name: str, patterns: Iterable[str], description: str = "") -> None:
        self.name = name
        self.description = description
        self._rules = compile_rules(patterns, category=name)

    @classmethod
    def from_builtin(cls, category: BuiltinCategory) -> CategoryFilter:
        return cls(category.name, category.patterns, description=category.description)

    @property
    def rules(self) -> tuple[CompiledRule, ...]:
        return self._rules

    def apply(self, text: str) -> str:
        """Replace every match of each rule, in order, feeding each result forward."""
        for rule in self._rules:
            text = rule.sub(FILTER_MARKER, text)
        return text

    def apply_traced(self, text: str) -> tuple[str, list[Modification]]:
        """Same as ``apply`` but also report which rules fired and how often."""
        mods: list[Modification] = []
        for rule in self._rules:
            text, count = rule.subn(FILTER_MARKER, text)
            if count:
                logger.debug("sanitize rule matched category=%s pattern=%r count=%d", self.name, rule.pattern, count)
                mods.append(Modification(category=self.name, pattern=rule.pattern, count=count))
        return text, mods


def default_pipeline() -> tuple[CategoryFilter, ...]:
    """Compile the built-in categories in pipeline order."""
    return tuple(CategoryFilter.from_builtin(category) for category in default_categories())


class PromptSanitizer:
    """Runs text through each category filter in sequence.

    Every category sees the output of the previous one, so text already
    replaced by the marker can no longer be matched by later categories.
    """

    def __init__(self, categories: Sequence[CategoryFilter] | None = None) -> None:
        if categories is not None:
            self._categories = tuple(categories)
        else:
            self._categories = _DEFAULT_PIPELINE

    @property
    def categories(self) -> tuple[CategoryFilter, ...]:
        return self._categories

    def sanitize(self, input_text: str) -> SanitizeResult:
        """Sanitize input text and return the result with per-rule modifications."""
        if not input_text.strip(WHITESPACE):
            return SanitizeResult(original=input_text, sanitized="")
        text = input_text
        mods: list[Modification] = []
        for category in self._categories:
            text, hits = category.apply_traced(text)
            mods.extend(hits)
        sanitized = text.strip(WHITESPACE)
        if mods:
            logger.info(
                "sanitizer filtered patterns count=%d categories=%s",
                sum(mod.count for mod in mods),
                sorted({mod.category for mod in mods}),
            )
        return SanitizeResult(original=input_text, sanitized=sanitized, modifications=mods)


# Built once at import; read-only afterwards and shared by every call.
_DEFAULT_PIPELINE: tuple[CategoryFilter, ...] = default_pipeline()
_DEFAULT_SANITIZER = PromptSanitizer()


def sanitize_prompt(text: str) -> str:
    """Return ``text`` with known prompt-injection patterns replaced by the marker."""
    return _DEFAULT_SANITIZER.sanitize(text).sanitized
