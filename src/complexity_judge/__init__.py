"""
complexity-judge - source code complexity scoring for extension reviews.

Runs complexity metrics, copy/paste detection and mess detection against an
extension, turns each tool's findings into a score, and records issues and
comments for the reviewer.
"""

__version__ = "0.1.0"

from .config import JudgeConfig, load_config
from .models import ExtensionTarget, Issue, PipelineReport
from .pipeline import ScoringPipeline
from .storage import IssueSink, MemoryIssueSink, SqliteIssueSink

__all__ = [
    "ScoringPipeline",
    "JudgeConfig",
    "load_config",
    "ExtensionTarget",
    "Issue",
    "PipelineReport",
    "IssueSink",
    "MemoryIssueSink",
    "SqliteIssueSink",
]
