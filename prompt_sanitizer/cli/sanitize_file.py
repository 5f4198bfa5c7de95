"""prompt-sanitizer sanitize: read a prompt file, filter it, write the result."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from prompt_sanitizer.cli.report import render_report
from prompt_sanitizer.config import ConfigLoadError, ConfigManager, PromptSanitizerConfig
from prompt_sanitizer.security import PromptSanitizer, SanitizeResult

console = Console(highlight=False, soft_wrap=True)
logger = logging.getLogger(__name__)


def _load_config(config: str | None) -> PromptSanitizerConfig:
    try:
        return ConfigManager.load(config_path=config).get()
    except (ConfigLoadError, ValidationError) as exc:
        typer.echo(f"Error: invalid configuration: {exc}", err=True)
        raise typer.Exit(2) from exc


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger("prompt_sanitizer").setLevel(level)


def sanitize_command(
    input_path: str,
    output_path: str,
    verbose: bool = False,
    force: bool = False,
    config: str | None = None,
) -> SanitizeResult:
    """Sanitize ``input_path`` into ``output_path`` and return the sanitization result."""
    cfg = _load_config(config)
    _configure_logging(cfg.logging.level)

    source = Path(input_path)
    target = Path(output_path)
    if not source.exists():
        typer.echo(f"Error: Input file does not exist: {source}", err=True)
        raise typer.Exit(1)
    if target.exists() and not force:
        typer.echo(f"Error: Output file already exists: {target}. Use --force to overwrite.", err=True)
        raise typer.Exit(1)

    try:
        raw = source.read_bytes()
        content = raw.decode(cfg.io.encoding)
    except (OSError, UnicodeDecodeError) as exc:
        typer.echo(f"Error: Failed to read input file: {source}: {exc}", err=True)
        raise typer.Exit(1) from exc
    if verbose:
        console.print(f"Read {len(raw)} characters from input file")

    result = PromptSanitizer().sanitize(content)
    logger.debug("sanitized input=%s output=%s filtered=%d", source, target, result.filtered_count)
    if verbose:
        render_report(
            console, result, max_changed_lines=cfg.report.max_changed_lines, encoding=cfg.io.encoding
        )

    try:
        # Bytes in and out so line endings survive untouched.
        target.write_bytes(result.sanitized.encode(cfg.io.encoding))
    except (OSError, UnicodeEncodeError) as exc:
        typer.echo(f"Error: Failed to write output file: {target}: {exc}", err=True)
        raise typer.Exit(1) from exc

    console.print(f"Successfully sanitized prompt from '{escape(str(source))}' to '{escape(str(target))}'")
    return result
