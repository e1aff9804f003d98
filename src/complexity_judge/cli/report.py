"""Report command - show what the last run stored for an extension."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..exceptions import JudgeError
from ..models import CHECK_ORDER, PLUGIN_NAME, ExtensionTarget
from ..storage import SqliteIssueSink
from . import app
from ._common import console, issues_table, resolve_config, score_style


@app.command()
def report(
    path: Path = typer.Argument(..., help="Extension directory that was checked"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML config file",
        exists=True,
        dir_okay=False,
    ),
    db: Optional[Path] = typer.Option(None, "--db", help="Issue database path"),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Print the stored score, issues and comments for an extension.

    The extension path must be given exactly as it was passed to
    [bold]complexity-judge check[/bold].
    """
    try:
        settings = resolve_config(config, db=db)
    except JudgeError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    db_path = Path(settings.database_path)
    if not db_path.exists():
        console.print(
            "[yellow]No issue database found.[/yellow] "
            "Run [bold]complexity-judge check[/bold] first."
        )
        raise typer.Exit(0)

    target = ExtensionTarget(str(path))
    try:
        with SqliteIssueSink(str(db_path)) as sink:
            total = sink.score(target, PLUGIN_NAME)
            scores = {name: sink.score(target, name) for name in CHECK_ORDER}
            issues = sink.issues(target)
            comments = sink.comments(target)
    except JudgeError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if total is None:
        console.print(f"[yellow]No results stored for {escape(target.path)}[/yellow]")
        raise typer.Exit(0)

    if json_output:
        payload = {
            "extension": target.path,
            "total": total,
            "checks": {k: v for k, v in scores.items() if v is not None},
            "issues": [
                {
                    "check": i.check_name,
                    "category": i.category,
                    "value": i.value,
                    "details": i.details,
                    "files": i.files,
                }
                for i in issues
            ],
            "comments": [{"check": c.check_name, "level": c.level, "text": c.text} for c in comments],
        }
        print(json.dumps(payload, indent=2))
        return

    style = score_style(total)
    console.print(f"[bold cyan]{escape(target.path)}[/bold cyan]  total [{style}]{total:+g}[/{style}]")
    for name, score in scores.items():
        if score is not None:
            console.print(f"  {name:<14} {score:+g}")

    if issues:
        console.print()
        console.print(issues_table(issues))

    if comments:
        console.print()
        for c in comments:
            color = "yellow" if c.level == "warning" else "dim"
            console.print(f"  [{color}]{escape(c.text)}[/{color}]")
