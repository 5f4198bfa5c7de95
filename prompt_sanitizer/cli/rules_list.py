"""prompt-sanitizer rules: show the built-in categories in pipeline order."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.markup import escape

from prompt_sanitizer.security import default_categories

console = Console(highlight=False, soft_wrap=True)


def rules_command(json_output: bool = False) -> list[dict[str, Any]]:
    """Print each category with its patterns and return the listing."""
    categories = default_categories()
    listing = [
        {
            "order": index,
            "name": category.name,
            "description": category.description,
            "patterns": list(category.patterns),
        }
        for index, category in enumerate(categories, start=1)
    ]
    if json_output:
        console.print_json(json.dumps(listing))
        return listing
    for index, category in enumerate(categories, start=1):
        console.print(f"[bold]{index}. {category.name}[/bold] ({len(category.patterns)} rules)")
        console.print(f"   {escape(category.description)}")
        for pattern in category.patterns:
            console.print(f"   - {escape(pattern)}")
    return listing
