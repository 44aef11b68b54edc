from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tapguard.core.config import TapguardConfig
from tapguard.core.exceptions import ConfigurationError, TapguardError
from tapguard.core.logging import configure_logging, get_logger
from tapguard.core.schemas import ElementNode, parse_target
from tapguard.errors.formatting import (
    format_interaction_error,
    format_interaction_error_as_json,
    format_interaction_error_compact,
    format_target,
)
from tapguard.errors.interaction import create_error_from_validation_result
from tapguard.observer.snapshot import load_snapshot
from tapguard.validator.hittability import check_hittable
from tapguard.validator.orchestrator import validate_for_action
from tapguard.validator.resolver import resolve
from tapguard.validator.suggestions import suggest_alternatives

app = typer.Typer(help="Validate UI targets against accessibility tree snapshots.")
log = get_logger("cli")
console = Console()

EXIT_INVALID = 1
EXIT_BAD_INPUT = 2


class OutputFormat(str, Enum):
    markdown = "markdown"
    json = "json"
    compact = "compact"


def _load_config(config_path: Optional[Path]) -> TapguardConfig:
    if config_path is None:
        return TapguardConfig.from_env()
    # An explicit path has to exist; only the default location is optional
    if not config_path.is_file():
        raise ConfigurationError("Config file not found", context={"path": str(config_path)})
    return TapguardConfig.from_yaml(config_path)


def _prepare(snapshot: Path, target: str, config_path: Optional[Path]):
    try:
        cfg = _load_config(config_path)
    except ConfigurationError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_BAD_INPUT)
    configure_logging(cfg.logging.level, cfg.logging.json_output)
    try:
        root = load_snapshot(snapshot)
        parsed = parse_target(target)
    except TapguardError as e:
        log.debug("input_rejected", error=str(e))
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=EXIT_BAD_INPUT)
    return cfg, root, parsed


def _element_table(element: ElementNode) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("type", escape(element.type))
    for name in ("identifier", "label", "value", "title"):
        attr = getattr(element, name)
        if attr:
            table.add_row(name, escape(attr))
    f = element.frame
    table.add_row("frame", f"({f.x:g}, {f.y:g}) {f.width:g}×{f.height:g}")
    table.add_row("enabled", str(element.is_enabled))
    table.add_row("visible", str(element.is_visible))
    table.add_row("hittable", str(element.is_hittable))
    return table


@app.command()
def validate(
    snapshot: Path = typer.Argument(..., help="UI tree snapshot (JSON)"),
    target: str = typer.Argument(..., help="Target as kind:value, e.g. identifier:login-button or #login-button"),
    action: str = typer.Option("tap", "--action", "-a", help="Action the target is validated for"),
    output: OutputFormat = typer.Option(OutputFormat.markdown, "--format", "-f", help="Error output format"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
) -> None:
    """Check whether TARGET can receive ACTION in SNAPSHOT."""
    cfg, root, parsed = _prepare(snapshot, target, config_path)
    result = validate_for_action(parsed, root, action, cfg)
    log.debug("validation_finished", target=format_target(parsed), action=action, valid=result.valid)

    if result.valid:
        if output is OutputFormat.json:
            typer.echo(json.dumps(result.to_dict(), indent=2))
            return
        console.print(f"[green]✓ {escape(format_target(parsed))} is valid for {escape(action)}[/green]")
        if result.element is not None:
            console.print(_element_table(result.element))
        return

    error = create_error_from_validation_result(result, parsed)
    if output is OutputFormat.json:
        typer.echo(format_interaction_error_as_json(error))
    elif output is OutputFormat.compact:
        typer.echo(format_interaction_error_compact(error))
    else:
        console.print(Markdown(format_interaction_error(error)))
    raise typer.Exit(code=EXIT_INVALID)


@app.command()
def suggest(
    snapshot: Path = typer.Argument(..., help="UI tree snapshot (JSON)"),
    target: str = typer.Argument(..., help="Target as kind:value"),
    max_suggestions: Optional[int] = typer.Option(None, "--max", min=1, help="Maximum suggestions"),
    min_similarity: Optional[int] = typer.Option(None, "--min-similarity", min=0, max=100, help="Similarity floor"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
) -> None:
    """List elements that resemble TARGET."""
    cfg, root, parsed = _prepare(snapshot, target, config_path)
    suggestions = suggest_alternatives(
        parsed,
        root,
        max_suggestions=max_suggestions,
        min_similarity=min_similarity,
        config=cfg,
    )
    if not suggestions:
        console.print(f"[yellow]No elements resemble {escape(format_target(parsed))}[/yellow]")
        return

    table = Table(title=f"Suggestions for {escape(format_target(parsed))}")
    table.add_column("Target", style="cyan")
    table.add_column("Type")
    table.add_column("Similarity", justify="right")
    table.add_column("Reason")
    for s in suggestions:
        table.add_row(escape(format_target(s.target)), escape(s.element.type), f"{s.similarity}%", escape(s.reason))
    console.print(table)


@app.command()
def hittable(
    snapshot: Path = typer.Argument(..., help="UI tree snapshot (JSON)"),
    target: str = typer.Argument(..., help="Target as kind:value"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
) -> None:
    """Explain whether TARGET can receive a tap."""
    cfg, root, parsed = _prepare(snapshot, target, config_path)
    element = resolve(parsed, root)
    if element is None:
        console.print(f"[red]✗ Element not found: {escape(format_target(parsed))}[/red]")
        raise typer.Exit(code=EXIT_INVALID)

    result = check_hittable(element, root, cfg)
    style = "green" if result.hittable else "red"
    body = escape(result.message)
    if result.reason is not None:
        body += f"\n[bold]Reason:[/bold] {result.reason.value}"
    if result.suggested_action:
        body += f"\n[bold]Suggested action:[/bold] {escape(result.suggested_action)}"
    console.print(Panel.fit(body, title=escape(format_target(parsed)), border_style=style))
    if not result.hittable:
        raise typer.Exit(code=EXIT_INVALID)


if __name__ == "__main__":
    app()
