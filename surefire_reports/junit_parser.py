"""
Streaming parser for Surefire/JUnit XML reports.

Each report is read with ``xml.etree.ElementTree.iterparse`` and turned into a
lazy sequence of TestCaseResult events, one per ``<testcase>`` element.
"""

import logging
import math
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .models import TestCaseResult, TestOutcome
from .report_index import ReportIndex

logger = logging.getLogger(__name__)

# Checked in this order, the first child found decides the outcome
OUTCOME_ELEMENTS = (
    ("error", TestOutcome.ERROR),
    ("failure", TestOutcome.FAILURE),
    ("skipped", TestOutcome.SKIPPED),
)


class ReportParseError(Exception):
    """A report file could not be read or is not well-formed XML."""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        super().__init__(f"Failed to parse the Surefire report: {self.path} ({reason})")


def parse_time_millis(value: Optional[str]) -> float:
    """Convert a ``time`` attribute in seconds to milliseconds, NaN if unknown."""
    if value is None:
        return math.nan
    try:
        seconds = float(value.replace(",", ""))
    except ValueError:
        return math.nan
    return seconds * 1000 if math.isfinite(seconds) else math.nan


def _suite_classname(suite: ET.Element) -> Optional[str]:
    name = suite.get("name")
    package = suite.get("package")
    if name and package and not name.startswith(f"{package}."):
        return f"{package}.{name}"
    return name


class JUnitParser:
    """Reads test case events out of JUnit-style XML report files."""

    def parse_file(self, path: Path) -> Iterator[TestCaseResult]:
        """
        Yield one TestCaseResult per test case in a report file.

        The sequence is lazy and can only be consumed once. Read and XML
        errors are raised as ReportParseError while iterating.

        Args:
            path: Report file to read

        Returns:
            Iterator of TestCaseResult in document order
        """
        path = Path(path)
        suites: list[ET.Element] = []
        try:
            for event, elem in ET.iterparse(str(path), events=("start", "end")):
                if elem.tag == "testsuite":
                    if event == "start":
                        suites.append(elem)
                    else:
                        suites.pop()
                        elem.clear()
                elif elem.tag == "testcase" and event == "end":
                    result = self._to_result(elem, suites[-1] if suites else None)
                    elem.clear()
                    if result is not None:
                        yield result
        except ET.ParseError as e:
            raise ReportParseError(path, str(e)) from e
        except OSError as e:
            raise ReportParseError(path, e.strerror or str(e)) from e

    def _to_result(self, case: ET.Element, suite: Optional[ET.Element]) -> Optional[TestCaseResult]:
        classname = case.get("classname") or (_suite_classname(suite) if suite is not None else None)
        name = case.get("name", "")
        if not classname:
            logger.warning(f"Ignoring test case without class name: {name!r}")
            return None

        outcome = TestOutcome.SUCCESS
        message = stack_trace = None
        for tag, candidate in OUTCOME_ELEMENTS:
            detail = case.find(tag)
            if detail is not None:
                outcome = candidate
                if candidate != TestOutcome.SKIPPED:
                    message = detail.get("message")
                    stack_trace = (detail.text or "").strip() or None
                break

        return TestCaseResult(
            class_name=classname,
            name=name,
            outcome=outcome,
            duration_millis=parse_time_millis(case.get("time")),
            message=message,
            stack_trace=stack_trace,
        )


def ingest(events: Iterable[TestCaseResult], index: ReportIndex) -> int:
    """Add test case events to the index. Returns the number of events consumed."""
    count = 0
    for result in events:
        index.indexed(result.class_name).add_result(result)
        count += 1
    return count
