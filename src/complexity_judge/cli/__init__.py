"""CLI entry point - registers all subcommands."""

import typer

app = typer.Typer(
    name="complexity-judge",
    help="complexity-judge - Source code complexity scoring for extension reviews",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .check import check as _check  # noqa: F401, E402
from .report import report as _report  # noqa: F401, E402
from .show_config import show_config as _show_config  # noqa: F401, E402


def main() -> None:
    app()
