"""All reports produced by one test run."""
from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from perfreport.errors import DuplicateReportError
from perfreport.report import ReportAggregate

logger = logging.getLogger(__name__)


class RunReports:
    """Reports of a single run, looked up by their current report identifier.

    Identifiers must be unique within a run.
    """

    def __init__(self, reports: Optional[List[ReportAggregate]] = None) -> None:
        self._reports: List[ReportAggregate] = []
        for report in reports or []:
            self.add(report)

    def __len__(self) -> int:
        return len(self._reports)

    def __iter__(self) -> Iterator[ReportAggregate]:
        return iter(self.ordered())

    def __contains__(self, report_identifier: str) -> bool:
        return self.get(report_identifier) is not None

    def add(self, report: ReportAggregate) -> None:
        existing = self.get(report.report_identifier)
        if existing is report:
            return
        if existing is not None:
            raise DuplicateReportError(f"Run already has a report named {report.report_identifier!r}")
        self._reports.append(report)

    def get(self, report_identifier: str) -> Optional[ReportAggregate]:
        for report in self._reports:
            if report.report_identifier == report_identifier:
                return report
        return None

    def ordered(self) -> List[ReportAggregate]:
        return sorted(self._reports)

    def link_baseline(self, previous: "RunReports") -> int:
        """Set each report's baseline to the same-named report of ``previous``.

        Returns the number of reports that found a counterpart.
        """
        linked = 0
        for report in self._reports:
            previous_report = previous.get(report.report_identifier)
            if previous_report is None:
                logger.info("No baseline for report %s", report.report_identifier)
                continue
            report.set_baseline(previous_report)
            linked += 1
        return linked
