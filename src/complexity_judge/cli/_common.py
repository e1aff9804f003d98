"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import JudgeConfig, load_config
from ..storage import StoredIssue

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    db: Optional[Path] = None,
    verbose: bool = False,
    log_file: Optional[Path] = None,
) -> JudgeConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if db is not None:
        overrides["database_path"] = str(db)
    if verbose:
        overrides["verbose"] = True
    if log_file is not None:
        overrides["log_file"] = str(log_file)
    return load_config(config_file=config, **overrides)


def score_style(score: float) -> str:
    if score > 0:
        return "green"
    if score < 0:
        return "red"
    return "yellow"


def format_location(file_name: Optional[str], line_number: Optional[int]) -> str:
    if not file_name:
        return "-"
    if line_number is None:
        return file_name
    return f"{file_name}:{line_number}"


def issues_table(issues: list[StoredIssue]) -> Table:
    """Render stored issues as a rich table."""
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Check")
    table.add_column("Category")
    table.add_column("Value", justify="right")
    table.add_column("Location")
    for issue in issues:
        line = issue.details.get("lineNumber")
        location = format_location(issue.files[0] if issue.files else None, line)
        table.add_row(
            escape(issue.check_name),
            escape(issue.category),
            escape(str(issue.value)),
            escape(location),
        )
    return table
