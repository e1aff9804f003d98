"""External tool runners: one per check."""

from .base import ToolRunner
from .duplication import DuplicationRunner, parse_cpd_output
from .mess import MessRunner
from .metrics import MetricRunner, parse_summary_xml

__all__ = [
    "ToolRunner",
    "MetricRunner",
    "DuplicationRunner",
    "MessRunner",
    "parse_summary_xml",
    "parse_cpd_output",
]
