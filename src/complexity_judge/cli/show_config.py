"""Show the effective configuration after all sources are merged."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..exceptions import JudgeError
from . import app
from ._common import console, resolve_config


@app.command()
def show_config(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML config file",
        exists=True,
        dir_okay=False,
    ),
):
    """Print the merged configuration as JSON."""
    try:
        settings = resolve_config(config)
    except JudgeError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    print(json.dumps(settings.to_dict(), indent=2))
