from __future__ import annotations

import pytest

from perfreport.report import ReportAggregate
from perfreport.sample import SampleRecord


def sample(uri="http://host/api", duration=100, size_kb=1.0, successful=True, weight=0.0) -> SampleRecord:
    return SampleRecord(
        endpoint_identifier=uri,
        duration=duration,
        size_kb=size_kb,
        successful=successful,
        external_error_weight=weight,
    )


@pytest.fixture
def make_sample():
    return sample


@pytest.fixture
def report_with(make_sample):
    def build(durations, uri="http://host/api", identifier="results.jtl", **kwargs) -> ReportAggregate:
        report = ReportAggregate(identifier, **kwargs)
        for duration in durations:
            report.add_sample(make_sample(uri=uri, duration=duration))
        return report

    return build
