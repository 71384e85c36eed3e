"""
Data models for unit test report aggregation.
"""

import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TestOutcome(Enum):
    """Outcome of a single executed test case."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILURE = "failure"
    ERROR = "error"


@dataclass(frozen=True)
class TestCaseResult:
    """Represents a single test case event read from a report."""
    class_name: str
    name: str
    outcome: TestOutcome
    duration_millis: float = math.nan
    message: Optional[str] = None
    stack_trace: Optional[str] = None


def _add_durations(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a + b


def _format_number(value: float) -> str:
    return str(int(value)) if math.isfinite(value) and value == int(value) else repr(value)


@dataclass
class ClassReport:
    """Aggregated test outcomes for one class name."""
    tests: int = 0
    errors: int = 0
    failures: int = 0
    skipped: int = 0
    duration_millis: float = math.nan
    results: list[TestCaseResult] = field(default_factory=list)

    @property
    def executed(self) -> int:
        return self.tests - self.skipped

    def add_result(self, result: TestCaseResult) -> "ClassReport":
        self.tests += 1
        if result.outcome == TestOutcome.SKIPPED:
            self.skipped += 1
        elif result.outcome == TestOutcome.FAILURE:
            self.failures += 1
        elif result.outcome == TestOutcome.ERROR:
            self.errors += 1
        self.duration_millis = _add_durations(self.duration_millis, result.duration_millis)
        self.results.append(result)
        return self

    def add(self, other: "ClassReport") -> "ClassReport":
        """Add the counts, duration and results of another report to this one."""
        self.tests += other.tests
        self.errors += other.errors
        self.failures += other.failures
        self.skipped += other.skipped
        self.duration_millis = _add_durations(self.duration_millis, other.duration_millis)
        self.results.extend(other.results)
        return self

    def to_xml(self) -> str:
        """
        Serialize the report and its individual results.

        The document is a ``<tests-details>`` element carrying the aggregate
        counts, with one ``<testcase>`` child per result in insertion order.
        Failures and errors keep their message and stack trace in a nested
        ``<failure>`` or ``<error>`` element. NaN durations are left out.
        """
        root = ET.Element("tests-details", {
            "tests": str(self.tests),
            "errors": str(self.errors),
            "failures": str(self.failures),
            "skipped": str(self.skipped),
        })
        if not math.isnan(self.duration_millis):
            root.set("time", _format_number(self.duration_millis))

        for result in self.results:
            case = ET.SubElement(root, "testcase", {
                "name": result.name,
                "classname": result.class_name,
                "status": result.outcome.value,
            })
            if not math.isnan(result.duration_millis):
                case.set("time", _format_number(result.duration_millis))
            if result.outcome in (TestOutcome.FAILURE, TestOutcome.ERROR):
                detail = ET.SubElement(case, result.outcome.value)
                if result.message is not None:
                    detail.set("message", result.message)
                if result.stack_trace:
                    detail.text = result.stack_trace

        return ET.tostring(root, encoding="unicode")

    @classmethod
    def from_xml(cls, text: str) -> "ClassReport":
        """Rebuild a report from the output of :meth:`to_xml`."""
        root = ET.fromstring(text)
        report = cls(
            tests=int(root.get("tests", 0)),
            errors=int(root.get("errors", 0)),
            failures=int(root.get("failures", 0)),
            skipped=int(root.get("skipped", 0)),
            duration_millis=float(root.get("time", "nan")),
        )
        for case in root.iter("testcase"):
            outcome = TestOutcome(case.get("status"))
            detail = case.find(outcome.value) if outcome in (TestOutcome.FAILURE, TestOutcome.ERROR) else None
            report.results.append(TestCaseResult(
                class_name=case.get("classname", ""),
                name=case.get("name", ""),
                outcome=outcome,
                duration_millis=float(case.get("time", "nan")),
                message=detail.get("message") if detail is not None else None,
                stack_trace=detail.text if detail is not None else None,
            ))
        return report
