"""Report-wide aggregation over all endpoints of one result file."""
from __future__ import annotations

import functools
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from perfreport.endpoint import EndpointAggregate
from perfreport.errors import MISSING_IDENTIFIER_MESSAGE, BaselineAlreadySetError
from perfreport.sample import SampleRecord, normalize_identifier
from perfreport.stats import check_percentage, duration_at, round_decimals

logger = logging.getLogger(__name__)

EndpointOrder = Callable[[EndpointAggregate], Any]
SummarizedPredicate = Callable[[str], bool]


FRAME_COLUMNS = [
    "key",
    "uri",
    "samples",
    "errors",
    "error_rate",
    "avg_duration_ms",
    "median_duration_ms",
    "p90_duration_ms",
    "min_duration_ms",
    "max_duration_ms",
    "avg_size_kb",
    "total_traffic_kb",
    "avg_diff_ms",
    "median_diff_ms",
    "error_rate_diff",
    "samples_diff",
]


def _never_summarized(report_identifier: str) -> bool:
    return False


@functools.total_ordering
class ReportAggregate:
    """Statistics for one report, split per endpoint.

    ``add_sample`` may be called from several threads. A single re-entrant
    lock guards the endpoint map, the report totals and both lazy caches
    (all durations sorted, endpoints in descending order). Endpoint locks are
    only ever taken while holding the report lock.

    ``is_summarized`` decides which error-rate formula applies; it receives
    the report identifier and is asked again on every ``error_rate`` call.
    """

    def __init__(
        self,
        report_identifier: str = "",
        is_summarized: Optional[SummarizedPredicate] = None,
        endpoint_order: Optional[EndpointOrder] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        self._report_identifier = report_identifier
        self._is_summarized = is_summarized or _never_summarized
        self._endpoint_order = endpoint_order or EndpointAggregate.sort_key
        self._log = log or logger
        self._endpoints: Dict[str, EndpointAggregate] = {}
        self._lock = threading.RLock()

        self.sample_count = 0
        self.error_count = 0
        self.external_error_weight_sum = 0.0
        self.total_duration = 0
        self.total_size_kb = 0.0
        self.dropped_count = 0
        self._min_duration = float("inf")
        self._max_duration = float("-inf")

        self._sorted_durations: Optional[List[int]] = None
        self._endpoints_descending: Optional[List[EndpointAggregate]] = None
        self._baseline: Optional[ReportAggregate] = None

    def __repr__(self) -> str:
        return (
            f"ReportAggregate(report_identifier={self._report_identifier!r}, "
            f"endpoints={len(self._endpoints)}, samples={self.sample_count})"
        )

    # Identity and ordering

    @property
    def report_identifier(self) -> str:
        return self._report_identifier

    @report_identifier.setter
    def report_identifier(self, value: str) -> None:
        self._report_identifier = value

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __lt__(self, other: "ReportAggregate") -> bool:
        if not isinstance(other, ReportAggregate):
            return NotImplemented
        if self is other:
            return False
        return self._report_identifier < other._report_identifier

    # Ingestion

    def add_sample(self, record: SampleRecord) -> None:
        if not record.endpoint_identifier:
            self._log.warning(MISSING_IDENTIFIER_MESSAGE)
            with self._lock:
                self.dropped_count += 1
            return

        key = normalize_identifier(record.endpoint_identifier)
        with self._lock:
            endpoint = self._endpoints.get(key)
            if endpoint is None:
                endpoint = EndpointAggregate(key, record.endpoint_identifier)
                self._endpoints[key] = endpoint
                self._log.debug("New endpoint %s in report %s", key, self._report_identifier)
            endpoint.add_sample(record)

            self.sample_count += 1
            if not record.successful:
                self.error_count += 1
            self.external_error_weight_sum += record.external_error_weight
            self.total_duration += record.duration
            self.total_size_kb += record.size_kb
            self._min_duration = min(self._min_duration, record.duration)
            self._max_duration = max(self._max_duration, record.duration)

            self._sorted_durations = None
            self._endpoints_descending = None

    # Endpoint queries

    def endpoint(self, key: str) -> Optional[EndpointAggregate]:
        with self._lock:
            return self._endpoints.get(key)

    def endpoint_map(self) -> Dict[str, EndpointAggregate]:
        with self._lock:
            return dict(self._endpoints)

    @property
    def endpoint_count(self) -> int:
        return len(self._endpoints)

    def endpoints_descending(self) -> List[EndpointAggregate]:
        with self._lock:
            if self._endpoints_descending is None:
                self._endpoints_descending = sorted(
                    self._endpoints.values(), key=self._endpoint_order, reverse=True
                )
            return list(self._endpoints_descending)

    # Report-wide statistics

    @property
    def min_duration(self) -> Optional[int]:
        with self._lock:
            return None if self.sample_count == 0 else int(self._min_duration)

    @property
    def max_duration(self) -> Optional[int]:
        with self._lock:
            return None if self.sample_count == 0 else int(self._max_duration)

    def average_duration(self) -> int:
        with self._lock:
            if self.sample_count == 0:
                return 0
            return self.total_duration // self.sample_count

    def average_size_kb(self) -> float:
        with self._lock:
            if self.sample_count == 0:
                return 0
            return round_decimals(self.total_size_kb / self.sample_count)

    def total_traffic_kb(self) -> float:
        with self._lock:
            return round_decimals(self.total_size_kb)

    def error_rate(self) -> float:
        with self._lock:
            if self._is_summarized(self._report_identifier):
                if not self._endpoints:
                    return 0
                return self.external_error_weight_sum / len(self._endpoints)
            if self.sample_count == 0:
                return 0
            return self.error_count / self.sample_count * 100

    def duration_at(self, percentage: float) -> int:
        check_percentage(percentage)
        with self._lock:
            if self.sample_count == 0:
                return 0
            if self._sorted_durations is None:
                merged: List[int] = []
                for endpoint in self._endpoints.values():
                    merged.extend(endpoint.durations())
                merged.sort()
                self._sorted_durations = merged
            return duration_at(self._sorted_durations, percentage)

    def median_duration(self) -> int:
        return self.duration_at(0.5)

    def p90_duration(self) -> int:
        return self.duration_at(0.9)

    # Baseline comparison

    @property
    def baseline(self) -> Optional["ReportAggregate"]:
        return self._baseline

    @property
    def has_baseline(self) -> bool:
        return self._baseline is not None

    def set_baseline(self, other: "ReportAggregate") -> None:
        """Link this report and its endpoints to the previous run's report.

        Must run after ingestion of both reports has finished.
        """
        if self._baseline is not None:
            raise BaselineAlreadySetError(f"baseline already set for report {self._report_identifier!r}")
        previous = other.endpoint_map()
        matched = 0
        for key, endpoint in self.endpoint_map().items():
            previous_endpoint = previous.get(key)
            if previous_endpoint is not None:
                endpoint.set_baseline_endpoint(previous_endpoint)
                matched += 1
        self._baseline = other
        self._log.debug(
            "Linked report %s to baseline %s (%d/%d endpoints matched)",
            self._report_identifier,
            other.report_identifier,
            matched,
            len(self._endpoints),
        )

    def average_diff(self) -> int:
        if self._baseline is None:
            return 0
        return self.average_duration() - self._baseline.average_duration()

    def median_diff(self) -> int:
        if self._baseline is None:
            return 0
        return self.median_duration() - self._baseline.median_duration()

    def error_rate_diff(self) -> float:
        if self._baseline is None:
            return 0
        return self.error_rate() - self._baseline.error_rate()

    def sample_count_diff(self) -> int:
        if self._baseline is None:
            return 0
        return self.sample_count - self._baseline.sample_count

    # Reporting views

    def summary(self) -> Dict[str, Any]:
        return {
            "report": self._report_identifier,
            "samples": self.sample_count,
            "errors": self.error_count,
            "dropped": self.dropped_count,
            "error_rate": self.error_rate(),
            "avg_duration_ms": self.average_duration(),
            "median_duration_ms": self.median_duration(),
            "p90_duration_ms": self.p90_duration(),
            "min_duration_ms": self.min_duration,
            "max_duration_ms": self.max_duration,
            "avg_size_kb": self.average_size_kb(),
            "total_traffic_kb": self.total_traffic_kb(),
            "endpoints": [endpoint.summary() for endpoint in self.endpoints_descending()],
        }

    def to_frame(self) -> pd.DataFrame:
        """One row per endpoint, in descending order, with baseline diffs."""
        rows = []
        for endpoint in self.endpoints_descending():
            row = endpoint.summary()
            row["avg_diff_ms"] = endpoint.average_diff()
            row["median_diff_ms"] = endpoint.median_diff()
            row["error_rate_diff"] = endpoint.error_rate_diff()
            row["samples_diff"] = endpoint.sample_count_diff()
            rows.append(row)
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)
