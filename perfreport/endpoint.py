"""Per-endpoint sample accumulation."""
from __future__ import annotations

import threading
from typing import List, Optional, Tuple

from perfreport.sample import SampleRecord
from perfreport.stats import duration_at, round_decimals


class EndpointAggregate:
    """Running statistics for every sample sent to one endpoint key.

    Totals are updated per sample. The sorted duration cache is rebuilt on the
    first percentile query after a sample invalidated it.
    """

    def __init__(self, key: str, raw_identifier: str) -> None:
        self.key = key
        self.raw_identifier = raw_identifier
        self.sample_count = 0
        self.error_count = 0
        self.external_error_weight_sum = 0.0
        self.total_duration = 0
        self.total_size_kb = 0.0
        self._min_duration = float("inf")
        self._max_duration = float("-inf")
        self._durations: List[int] = []
        self._sorted_durations: Optional[List[int]] = None
        self._baseline: Optional[EndpointAggregate] = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"EndpointAggregate(key={self.key!r}, samples={self.sample_count})"

    def __lt__(self, other: "EndpointAggregate") -> bool:
        return self.sort_key() < other.sort_key()

    def add_sample(self, record: SampleRecord) -> None:
        with self._lock:
            self._durations.append(record.duration)
            self.sample_count += 1
            if not record.successful:
                self.error_count += 1
            self.external_error_weight_sum += record.external_error_weight
            self.total_duration += record.duration
            self.total_size_kb += record.size_kb
            self._min_duration = min(self._min_duration, record.duration)
            self._max_duration = max(self._max_duration, record.duration)
            self._sorted_durations = None

    def durations(self) -> List[int]:
        with self._lock:
            return list(self._durations)

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
            if self.sample_count == 0:
                return 0
            return self.error_count / self.sample_count * 100

    def duration_at(self, percentage: float) -> int:
        with self._lock:
            if self._sorted_durations is None:
                self._sorted_durations = sorted(self._durations)
            return duration_at(self._sorted_durations, percentage)

    def median_duration(self) -> int:
        return self.duration_at(0.5)

    def p90_duration(self) -> int:
        return self.duration_at(0.9)

    def sort_key(self) -> Tuple[int, str]:
        return self.average_duration(), self.key

    # Baseline comparison

    @property
    def baseline(self) -> Optional["EndpointAggregate"]:
        return self._baseline

    def set_baseline_endpoint(self, other: "EndpointAggregate") -> None:
        self._baseline = other

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

    def summary(self) -> dict:
        return {
            "key": self.key,
            "uri": self.raw_identifier,
            "samples": self.sample_count,
            "errors": self.error_count,
            "error_rate": self.error_rate(),
            "avg_duration_ms": self.average_duration(),
            "median_duration_ms": self.median_duration(),
            "p90_duration_ms": self.p90_duration(),
            "min_duration_ms": self.min_duration,
            "max_duration_ms": self.max_duration,
            "avg_size_kb": self.average_size_kb(),
            "total_traffic_kb": self.total_traffic_kb(),
        }
