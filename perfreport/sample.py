"""Measured request samples and endpoint key normalization."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

SCHEME_MARKER = "http:/"


@dataclass(frozen=True)
class SampleRecord:
    endpoint_identifier: Optional[str]
    duration: int
    size_kb: float
    successful: bool
    external_error_weight: float = 0.0


def normalize_identifier(raw: str) -> str:
    """Turn a raw endpoint identifier into its lookup key.

    Every occurrence of the scheme marker is removed and every ``/`` becomes
    ``_``, so ``http://host/a/b`` maps to ``_host_a_b``. Baselines are matched
    on this key across runs, keep it stable.
    """
    return raw.replace(SCHEME_MARKER, "").replace("/", "_")
