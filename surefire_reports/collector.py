"""Report collector - discovers Surefire reports, aggregates them per class and publishes measures."""

import logging
import math
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from .config import get_publish_details, get_reports_dir
from .junit_parser import JUnitParser, ReportParseError, ingest
from .models import ClassReport
from .report_index import ReportIndex

logger = logging.getLogger(__name__)

TEST_REPORT_PREFIX = "TEST-"
SUITE_REPORT_PREFIX = "TESTS-"
REPORT_SUFFIX = ".xml"
NESTED_CLASS_MARKER = "$"

SKIPPED_TESTS = "skipped_tests"
TESTS = "tests"
TEST_ERRORS = "test_errors"
TEST_FAILURES = "test_failures"
TEST_EXECUTION_TIME = "test_execution_time"
TEST_DATA = "test_data"


class ResourceResolver(Protocol):
    def resolve(self, class_key: str) -> Optional[Any]:
        """Return the resource a class name belongs to, or None."""


class MeasureSink(Protocol):
    def save_measure(self, resource: Any, metric: str, value: Union[float, str]) -> None:
        """Attach a numeric or serialized measure to a resource."""


def _find_files_starting_with(reports_dir: Path, prefix: str) -> list[Path]:
    return sorted(
        p for p in reports_dir.iterdir()
        if p.is_file() and p.name.startswith(prefix) and p.name.endswith(REPORT_SUFFIX)
    )


def find_reports(reports_dir: Optional[Path]) -> list[Path]:
    """
    Find the report files to parse in a directory.

    Per-class ``TEST-*.xml`` reports are preferred; only when there are none
    are suite-aggregated ``TESTS-*.xml`` reports used. Subdirectories are
    not searched.

    Args:
        reports_dir: Directory holding the reports

    Returns:
        Report paths, empty if the directory is missing
    """
    if reports_dir is None:
        return []
    reports_dir = Path(reports_dir)
    if not reports_dir.is_dir():
        logger.warning(f"Reports path not found: {reports_dir.absolute()}")
        return []

    reports = _find_files_starting_with(reports_dir, TEST_REPORT_PREFIX)
    if not reports:
        # maybe there's only a test suite result file
        reports = _find_files_starting_with(reports_dir, SUITE_REPORT_PREFIX)
    return reports


def enclosing_classname(classname: str) -> Optional[str]:
    """Name of the top-level class for a nested class name, None if not nested."""
    if NESTED_CLASS_MARKER not in classname:
        return None
    return classname.split(NESTED_CLASS_MARKER, 1)[0]


def sanitize(index: ReportIndex) -> None:
    """Merge nested class reports into their top-level class.

    Reports list every compiled class while measures are kept per source
    file, so ``Outer$Inner`` is counted under ``Outer``.
    """
    for classname in sorted(index.classnames()):
        parent = enclosing_classname(classname)
        if parent is not None:
            index.merge(classname, parent)


class ReportCollector:
    """Collects unit test reports and publishes per-resource measures."""

    def __init__(self, resolver: ResourceResolver, sink: MeasureSink,
                 parser: Optional[JUnitParser] = None, publish_details: Optional[bool] = None):
        self.resolver = resolver
        self.sink = sink
        self.parser = parser or JUnitParser()
        self.publish_details = get_publish_details() if publish_details is None else publish_details

    def collect(self, reports_dir: Optional[Path] = None) -> dict:
        """Run discovery, parsing, sanitizing and publishing for one directory.

        Args:
            reports_dir: Directory of reports, uses the configured one if not provided

        Returns:
            dict describing the run

        Raises:
            ReportParseError: if any report is malformed; nothing is published
        """
        reports_dir = Path(reports_dir) if reports_dir is not None else get_reports_dir()
        summary = {
            "reports_dir": str(reports_dir),
            "report_files": [],
            "classes": 0,
            "published": [],
            "unresolved": [],
        }

        reports = find_reports(reports_dir)
        if not reports:
            logger.warning(
                "No Unit Test information will be saved, because no Unit Test report "
                f"has been found in the given directory: {reports_dir.absolute()}"
            )
            return summary

        index = ReportIndex()
        self.parse_reports(reports, index)
        sanitize(index)
        summary["report_files"] = [str(p) for p in reports]
        summary["classes"] = len(index)
        self.save(index, summary)
        logger.info(f"Published unit test measures for {len(summary['published'])} of {len(index)} classes")
        return summary

    def parse_reports(self, reports: list[Path], index: ReportIndex) -> int:
        """Ingest every report into the index, stopping at the first malformed one."""
        total = 0
        for report in reports:
            try:
                count = ingest(self.parser.parse_file(report), index)
            except ReportParseError as e:
                logger.error(str(e))
                raise
            logger.debug(f"Parsed {count} test cases from {report.name}")
            total += count
        logger.info(f"Parsed {total} test cases from {len(reports)} report files")
        return total

    def save(self, index: ReportIndex, summary: Optional[dict] = None) -> None:
        """Publish measures for every non-empty class report that resolves to a resource."""
        for classname, report in index.items():
            if report.tests <= 0:
                continue
            resource = self.resolver.resolve(classname)
            if resource is None:
                logger.debug(f"No resource found for {classname}, skipping its measures")
                if summary is not None:
                    summary["unresolved"].append(classname)
                continue
            self.save_report(report, resource)
            if self.publish_details:
                self.save_results(resource, report)
            if summary is not None:
                summary["published"].append(classname)

    def save_report(self, report: ClassReport, resource: Any) -> None:
        """Publish the five numeric measures of a class report, leaving out NaN values."""
        self._save_measure(resource, SKIPPED_TESTS, report.skipped)
        self._save_measure(resource, TESTS, report.executed)
        self._save_measure(resource, TEST_ERRORS, report.errors)
        self._save_measure(resource, TEST_FAILURES, report.failures)
        self._save_measure(resource, TEST_EXECUTION_TIME, report.duration_millis)

    def save_results(self, resource: Any, report: ClassReport) -> None:
        """Publish the serialized detail of a class report as the test data measure."""
        self.sink.save_measure(resource, TEST_DATA, report.to_xml())

    def _save_measure(self, resource: Any, metric: str, value: float) -> None:
        value = float(value)
        if not math.isnan(value):
            self.sink.save_measure(resource, metric, value)
