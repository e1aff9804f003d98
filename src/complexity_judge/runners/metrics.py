"""Complexity metrics via pdepend's summary XML."""

import hashlib
import os
import tempfile
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Optional, Union

from ..exceptions import MalformedReportError
from ..logging_config import get_logger
from ..models import METRICS_CHECK, ExtensionTarget, MetricReport
from .base import ToolRunner

logger = get_logger(__name__)


def _to_number(text: str) -> Optional[Union[int, float]]:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def parse_summary_xml(xml_path: Path) -> MetricReport:
    """Read the attributes of the root ``<metrics>`` element.

    Numeric attributes become metrics; the rest (``generated``,
    ``pdepend``) are kept as plain attributes.
    """
    try:
        root = ET.parse(xml_path).getroot()
    except FileNotFoundError:
        raise MalformedReportError(METRICS_CHECK, f"summary file {xml_path} was not written")
    except ET.ParseError as e:
        raise MalformedReportError(METRICS_CHECK, f"cannot parse summary XML: {e}")

    metrics: Dict[str, Union[int, float]] = {}
    attributes: Dict[str, str] = {}
    for name, raw in root.attrib.items():
        value = _to_number(raw)
        if value is None:
            attributes[name] = raw
        else:
            metrics[name] = value

    if not metrics:
        raise MalformedReportError(METRICS_CHECK, "summary XML contains no metrics")
    return MetricReport(metrics=metrics, attributes=attributes)


class MetricRunner(ToolRunner):
    """Runs ``pdepend --summary-xml=<file> <path>`` and parses the summary.

    The summary file is removed after reading, including when parsing fails.
    A configured ``xml_filename`` is used as a template: the process id and
    a digest of the extension path are added to its name.
    """

    check_name = METRICS_CHECK

    def __init__(
        self,
        executable: str = "pdepend",
        timeout: Optional[float] = None,
        xml_filename: Optional[str] = None,
    ):
        super().__init__(executable, timeout)
        self.xml_filename = xml_filename

    def run(self, target: ExtensionTarget, timeout: Optional[float] = None) -> MetricReport:
        xml_path = self._summary_path(target)
        try:
            self._invoke(
                [self.executable, f"--summary-xml={xml_path}", target.path],
                timeout=timeout,
            )
            report = parse_summary_xml(xml_path)
        finally:
            if xml_path.exists():
                os.unlink(xml_path)

        logger.debug("pdepend reported %d metrics for %s", len(report.metrics), target)
        return report

    def _summary_path(self, target: ExtensionTarget) -> Path:
        if self.xml_filename:
            # <stem>-<pid>-<path digest><suffix>
            configured = Path(self.xml_filename)
            digest = hashlib.sha1(target.path.encode("utf-8")).hexdigest()[:12]
            name = f"{configured.stem}-{os.getpid()}-{digest}{configured.suffix}"
            return configured.with_name(name)
        fd, name = tempfile.mkstemp(prefix="pdepend-summary-", suffix=".xml")
        os.close(fd)
        return Path(name)
