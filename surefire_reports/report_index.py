"""Index of class reports keyed by class name."""

import logging
from typing import Optional

from .models import ClassReport

logger = logging.getLogger(__name__)


class ReportIndex:
    """Maps class names to their aggregated ClassReport."""

    def __init__(self):
        self._reports: dict[str, ClassReport] = {}

    def indexed(self, classname: str) -> ClassReport:
        """Get the report for a class name, creating an empty one if needed."""
        report = self._reports.get(classname)
        if report is None:
            report = ClassReport()
            self._reports[classname] = report
        return report

    def get(self, classname: str) -> Optional[ClassReport]:
        return self._reports.get(classname)

    def classnames(self) -> set[str]:
        """Snapshot of the current class names, safe to iterate while mutating."""
        return set(self._reports)

    def items(self) -> list[tuple[str, ClassReport]]:
        return list(self._reports.items())

    def merge(self, classname: str, into_classname: str) -> Optional[ClassReport]:
        """
        Move the report of one class into another.

        Args:
            classname: Class whose report is merged and then removed
            into_classname: Class receiving the counts, created if absent

        Returns:
            The receiving report, or None if classname had no report
        """
        source = self._reports.get(classname)
        if source is None:
            return None
        if classname == into_classname:
            return source
        target = self.indexed(into_classname)
        target.add(source)
        del self._reports[classname]
        logger.debug(f"Merged {classname} into {into_classname} ({source.tests} tests)")
        return target

    def remove(self, classname: str) -> None:
        self._reports.pop(classname, None)

    def __len__(self) -> int:
        return len(self._reports)

    def __contains__(self, classname: str) -> bool:
        return classname in self._reports
