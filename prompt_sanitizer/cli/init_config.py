"""prompt-sanitizer init: write a commented config file built from the model defaults."""

from __future__ import annotations

from pathlib import Path

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel
from rich.console import Console

from prompt_sanitizer.config import CONFIG_FILENAME, PromptSanitizerConfig
from prompt_sanitizer.config.manager import ENV_PREFIX

console = Console()


def render_default_config() -> str:
    """Render every settings section with its default values as commented YAML."""
    lines = [
        "# prompt-sanitizer configuration",
        f"# Environment overrides: {ENV_PREFIX}<SECTION>__<FIELD>, e.g. {ENV_PREFIX}LOGGING__LEVEL=DEBUG",
    ]
    for section_name, section_field in PromptSanitizerConfig.model_fields.items():
        section = section_field.get_default(call_default_factory=True)
        if not isinstance(section, BaseModel):
            continue
        lines.append("")
        summary = (type(section).__doc__ or "").strip()
        if summary:
            lines.append(f"# {summary}")
        lines.append(f"{section_name}:")
        for name, field in type(section).model_fields.items():
            if field.description:
                lines.append(f"  # {field.description}")
            entry = yaml.safe_dump({name: getattr(section, name)}, sort_keys=False, allow_unicode=True).strip()
            lines.append(f"  {entry}")
    return "\n".join(lines) + "\n"


def init_config_command(path: str = ".", force: bool = False) -> Path:
    """Create prompt-sanitizer.yaml in ``path`` and return where it was written."""
    target_dir = Path(path).resolve()
    target_dir.mkdir(parents=True, exist_ok=True)
    output_path = target_dir / CONFIG_FILENAME
    if output_path.exists() and not force:
        raise FileExistsError(f"Config already exists: {output_path}")
    output_path.write_text(render_default_config(), encoding="utf-8")
    console.print(f"[green]Created[/green] {output_path}")
    return output_path
