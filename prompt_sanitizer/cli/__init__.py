"""CLI tools: prompt-sanitizer sanitize, prompt-sanitizer rules, prompt-sanitizer init."""

from __future__ import annotations

import sys
from importlib import metadata

import typer

from prompt_sanitizer.cli.init_config import init_config_command
from prompt_sanitizer.cli.rules_list import rules_command
from prompt_sanitizer.cli.sanitize_file import sanitize_command

PROG_NAME = "prompt-sanitizer"

app = typer.Typer(
    name=PROG_NAME,
    help="Sanitize LLM prompts against OWASP-style prompt injection patterns.",
)

_SUBCOMMANDS = frozenset({"sanitize", "rules", "init"})
# Options handled by the app itself rather than by a subcommand.
_APP_OPTIONS = frozenset({"--help", "-h", "--install-completion", "--show-completion"})


def _print_version_and_exit() -> None:
    """Print installed package version and exit."""
    try:
        version = metadata.version(PROG_NAME)
    except metadata.PackageNotFoundError:
        version = "unknown"
    print(f"{PROG_NAME} {version}")
    raise SystemExit(0)


@app.command("sanitize")
def sanitize(
    input_path: str = typer.Option(..., "--input", "-i", help="Path to the input file containing the prompt"),
    output_path: str = typer.Option(..., "--output", "-o", help="Path where the sanitized prompt is written"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show details about what was filtered"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite the output file if it exists"),
    config: str = typer.Option("", "--config", "-c", help="Optional config file path"),
) -> None:
    """Sanitize a prompt file against prompt injection patterns."""
    sanitize_command(
        input_path=input_path,
        output_path=output_path,
        verbose=verbose,
        force=force,
        config=config or None,
    )


@app.command("rules")
def rules(
    json_output: bool = typer.Option(False, "--json", help="Print the rule table as JSON"),
) -> None:
    """List the built-in categories and patterns in pipeline order."""
    rules_command(json_output=json_output)


@app.command("init")
def init_command(
    path: str = typer.Option(".", "--path", help="Output directory"),
    force: bool = typer.Option(False, "--force", help="Overwrite existing prompt-sanitizer.yaml"),
) -> None:
    """Generate default prompt-sanitizer.yaml in target directory."""
    try:
        init_config_command(path=path, force=force)
    except FileExistsError as exc:
        typer.echo(f"Error: {exc}. Use --force to overwrite.", err=True)
        raise typer.Exit(1) from exc


def _with_default_command(argv: list[str]) -> list[str]:
    """Route option-only invocations (``-i in.txt -o out.txt``) to the sanitize command."""
    if not argv or argv[0] in _SUBCOMMANDS:
        return argv
    if argv[0].split("=", 1)[0] in _APP_OPTIONS:
        return argv
    if argv[0].startswith("-"):
        return ["sanitize", *argv]
    return argv


def main() -> None:
    """CLI entry point; dispatches to subcommands."""
    if "--version" in sys.argv or "-V" in sys.argv:
        _print_version_and_exit()
    try:
        app(args=_with_default_command(sys.argv[1:]), prog_name=PROG_NAME)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
