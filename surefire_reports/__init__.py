"""Aggregates Surefire/JUnit XML reports into per-class unit test measures."""

from .collector import (
    MeasureSink,
    ReportCollector,
    ResourceResolver,
    find_reports,
    sanitize,
)
from .junit_parser import JUnitParser, ReportParseError, ingest
from .models import ClassReport, TestCaseResult, TestOutcome
from .report_index import ReportIndex

__all__ = [
    "ClassReport",
    "JUnitParser",
    "MeasureSink",
    "ReportCollector",
    "ReportIndex",
    "ReportParseError",
    "ResourceResolver",
    "TestCaseResult",
    "TestOutcome",
    "find_reports",
    "ingest",
    "sanitize",
]
