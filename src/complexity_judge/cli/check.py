"""Check command - score one or more extensions."""

import json
from contextlib import ExitStack
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..exceptions import JudgeError
from ..logging_config import setup_logging
from ..models import PLUGIN_NAME, PipelineReport
from ..pipeline import ScoringPipeline
from ..storage import IssueSink, MemoryIssueSink, SqliteIssueSink
from . import app
from ._common import console, issues_table, resolve_config, score_style


@app.command()
def check(
    paths: List[Path] = typer.Argument(
        ...,
        help="Extension directories to score",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML config file (see complexity-judge.toml)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    db: Optional[Path] = typer.Option(
        None,
        "--db",
        help="Issue database path (default: .judge/issues.db)",
    ),
    no_save: bool = typer.Option(
        False,
        "--no-save",
        help="Keep results in memory instead of writing the issue database",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append a debug log, including raw tool output, to this file",
        dir_okay=False,
    ),
):
    """
    Run metrics, duplication and mess detection against each extension.

    [bold cyan]Examples:[/bold cyan]

      complexity-judge check app/code/Vendor/Module

      complexity-judge check ext1 ext2 --json --no-save
    """
    try:
        settings = resolve_config(config, db=db, verbose=verbose, log_file=log_file)
        setup_logging(settings.verbosity, log_file=settings.log_file)
        with ExitStack() as stack:
            sink: IssueSink
            if no_save:
                sink = MemoryIssueSink()
            else:
                sink = stack.enter_context(SqliteIssueSink(settings.database_path))

            pipeline = ScoringPipeline(settings, sink)
            reports = []
            for path in paths:
                report = pipeline.run(path)
                reports.append(report)
                if not json_output:
                    _print_report(report, sink)
    except JudgeError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps([r.to_dict() for r in reports], indent=2))


def _print_report(report: PipelineReport, sink: IssueSink) -> None:
    console.print()
    console.print(f"[bold cyan]{escape(report.target.path)}[/bold cyan]")
    for result in report.results:
        style = score_style(result.score)
        console.print(
            f"  {result.check_name:<14} [{style}]{result.score:+g}[/{style}]"
            f"  ({len(result.issues)} issue(s))"
        )
    style = score_style(report.total)
    console.print(f"  [bold]{PLUGIN_NAME}[/bold] total [{style}]{report.total:+g}[/{style}]")

    stored = sink.issues(report.target)
    if stored:
        console.print()
        console.print(issues_table(stored))
