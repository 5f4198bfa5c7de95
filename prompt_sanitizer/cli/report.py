"""Verbose change report for the sanitize command."""

from __future__ import annotations

from collections import Counter

from rich.console import Console
from rich.markup import escape

from prompt_sanitizer.security import SanitizeResult


def changed_lines(original: str, sanitized: str) -> list[tuple[int, str, str]]:
    """Return (line number, original, sanitized) for positionally paired lines that differ."""
    pairs = zip(original.splitlines(), sanitized.splitlines())
    return [(index, orig, san) for index, (orig, san) in enumerate(pairs, start=1) if orig != san]


def render_report(
    console: Console, result: SanitizeResult, max_changed_lines: int = 0, encoding: str = "utf-8"
) -> None:
    """Print the filtered-pattern summary and per-line changes.

    Lengths are reported in encoded bytes, the unit the file was read in.
    """
    filtered = result.filtered_count
    if filtered == 0:
        console.print("No malicious patterns detected - input is clean")
        return

    console.print(f"Filtered {filtered} potentially malicious patterns")
    if not result.changed:
        return

    console.print("\n--- Changes Made ---")
    console.print(f"Original length: {len(result.original.encode(encoding))} chars")
    console.print(f"Sanitized length: {len(result.sanitized.encode(encoding))} chars")

    lines = changed_lines(result.original, result.sanitized)
    shown = lines[:max_changed_lines] if max_changed_lines else lines
    for number, orig, san in shown:
        console.print(f"Line {number}: '{escape(orig)}' -> '{escape(san)}'")
    if len(shown) < len(lines):
        console.print(f"... {len(lines) - len(shown)} more changed lines not shown")

    per_category: Counter[str] = Counter()
    for mod in result.modifications:
        per_category[mod.category] += mod.count
    for category, count in per_category.items():
        console.print(f"  {category}: {count}")
