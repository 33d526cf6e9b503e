from __future__ import annotations

import contextlib
import math
import os
import time
from typing import TYPE_CHECKING, TypedDict

if TYPE_CHECKING:
    from collections.abc import Generator

# Module globals; sessions are single-threaded.

MAX_ENTRIES = 100_000

_enabled = os.environ.get("GRAPHTUTOR_METRICS", "").lower() in ("1", "true", "yes")
_durations: dict[str, list[float]] = {}
_counts: dict[str, int] = {}


class MetricSummary(TypedDict):
    """Summary statistics for a single metric."""

    count: int
    total_ms: float
    avg_ms: float
    min_ms: float
    max_ms: float


def enable() -> None:
    """Enable metrics collection."""
    global _enabled
    _enabled = True


def is_enabled() -> bool:
    return _enabled


def clear() -> None:
    """Clear all collected metrics."""
    _durations.clear()
    _counts.clear()


def count(name: str, amount: int = 1) -> None:
    """Add to a named counter, e.g. how many trails a search produced."""
    if not _enabled:
        return
    _counts[name] = _counts.get(name, 0) + amount


def counts() -> dict[str, int]:
    """Counter totals by name."""
    return dict(sorted(_counts.items()))


def _add(name: str, duration_ms: float) -> None:
    """Internal: add a single metric entry."""
    if math.isnan(duration_ms) or math.isinf(duration_ms):
        return

    # Bound memory: halve every series once the limit is hit.
    if sum(len(ds) for ds in _durations.values()) >= MAX_ENTRIES:
        for metric_name, ds in _durations.items():
            _durations[metric_name] = ds[len(ds) // 2 :]

    _durations.setdefault(name, []).append(duration_ms)


def summary() -> dict[str, MetricSummary]:
    """Summarize metrics by name: count, total_ms, avg_ms, min_ms, max_ms."""
    result = dict[str, MetricSummary]()
    for name, durations in sorted(_durations.items()):
        if not durations:
            continue
        total = sum(durations)
        result[name] = MetricSummary(
            count=len(durations),
            total_ms=total,
            avg_ms=total / len(durations),
            min_ms=min(durations),
            max_ms=max(durations),
        )
    return result


@contextlib.contextmanager
def timed(name: str) -> Generator[None]:
    """Context manager to time a block of code.

    Usage:
        with metrics.timed("postman.enumerate_matchings"):
            ...

    Metrics are only collected when enabled via GRAPHTUTOR_METRICS=1 or enable().
    """
    if not _enabled:
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        _add(name, duration_ms)
