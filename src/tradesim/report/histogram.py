"""Adaptive outcome histogram and sub-bucket drill-down."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from tradesim.report.stats import annualized_roi, format_roi_range, sort_runs
from tradesim.simulator.models import RunResult

MIN_RUNS_FOR_HISTOGRAM = 10
CUTOFF_PERCENTILE = 0.98
CORE_BUCKETS = 9
SUB_BUCKETS = 10
DRILLDOWN_MIN_PERCENTAGE = 25.0


@dataclass(frozen=True)
class Bucket:
    index: int
    min: float
    max: float
    count: int
    runs: tuple[RunResult, ...]
    percentage: float
    roi_range: Optional[str] = None
    roi_min: Optional[float] = None
    roi_max: Optional[float] = None
    is_outlier_bucket: bool = False

    @property
    def drillable(self) -> bool:
        return self.percentage >= DRILLDOWN_MIN_PERCENTAGE and self.count > 1


@dataclass(frozen=True)
class SubBucket:
    min: float
    max: float
    count: int
    percentage: float


@dataclass(frozen=True)
class Histogram:
    total_runs: int
    buckets: list[Bucket] = field(default_factory=list)

    def ranked(self) -> list[Bucket]:
        """Non-empty buckets, largest share first."""
        non_empty = [bucket for bucket in self.buckets if bucket.count > 0]
        return sorted(non_empty, key=lambda bucket: bucket.percentage, reverse=True)

    def get(self, index: int) -> Bucket:
        for bucket in self.buckets:
            if bucket.index == index:
                return bucket
        raise KeyError(f"Unknown bucket: {index}")


def _make_bucket(
    index: int,
    low: float,
    high: float,
    runs: list[RunResult],
    total_runs: int,
    starting_balance: float,
    timeline_months: int,
    is_outlier: bool = False,
) -> Bucket:
    roi_values = [annualized_roi(run.final_balance, starting_balance, timeline_months) for run in runs]
    return Bucket(
        index=index,
        min=low,
        max=high,
        count=len(runs),
        runs=tuple(runs),
        percentage=len(runs) / total_runs * 100,
        roi_range=format_roi_range(roi_values),
        roi_min=min(roi_values) if roi_values else None,
        roi_max=max(roi_values) if roi_values else None,
        is_outlier_bucket=is_outlier,
    )


def build_histogram(
    results: Iterable[RunResult],
    starting_balance: float,
    timeline_months: int,
    presorted: bool = False,
) -> Histogram:
    """Bucket final balances into 9 core buckets plus a top-2% outlier bucket.

    Batches of 10 runs or fewer get no histogram. When at least 98% of runs
    share the lowest balance the core range is empty and a single bucket
    spanning every run is returned instead. Pass ``presorted`` when
    ``results`` is already in ascending balance order.
    """
    ordered = list(results) if presorted else sort_runs(results)
    total = len(ordered)
    if total <= MIN_RUNS_FOR_HISTOGRAM:
        return Histogram(total_runs=total)

    core_min = ordered[0].final_balance
    core_max = ordered[math.floor(total * CUTOFF_PERCENTILE)].final_balance
    best = ordered[-1].final_balance
    core_range = core_max - core_min

    if core_range <= 0:
        bucket = _make_bucket(0, core_min, best, ordered, total, starting_balance, timeline_months)
        return Histogram(total_runs=total, buckets=[bucket])

    width = core_range / CORE_BUCKETS
    members: list[list[RunResult]] = [[] for _ in range(CORE_BUCKETS)]
    outliers: list[RunResult] = []
    for run in ordered:
        if run.final_balance < core_max:
            index = min(CORE_BUCKETS - 1, math.floor((run.final_balance - core_min) / width))
            members[index].append(run)
        else:
            outliers.append(run)

    buckets = [
        _make_bucket(
            index,
            core_min + index * width,
            core_min + index * width + width,
            runs,
            total,
            starting_balance,
            timeline_months,
        )
        for index, runs in enumerate(members)
    ]
    if outliers:
        buckets.append(
            _make_bucket(
                CORE_BUCKETS,
                core_max,
                best,
                outliers,
                total,
                starting_balance,
                timeline_months,
                is_outlier=True,
            )
        )
    return Histogram(total_runs=total, buckets=buckets)


def sub_bucket_breakdown(runs: Sequence[RunResult]) -> list[SubBucket]:
    """Split a bucket's runs into 10 equal-width sub-buckets.

    Percentages are relative to ``len(runs)``. A single run or a zero-width
    range yields one sub-bucket holding everything.
    """
    total = len(runs)
    if total == 0:
        return []
    low = min(run.final_balance for run in runs)
    high = max(run.final_balance for run in runs)
    spread = high - low
    if spread <= 0 or total == 1:
        return [SubBucket(min=low, max=low, count=total, percentage=100.0)]

    width = spread / SUB_BUCKETS
    counts = [0] * SUB_BUCKETS
    for run in runs:
        index = min(SUB_BUCKETS - 1, math.floor((run.final_balance - low) / width))
        counts[index] += 1

    sub_buckets = [
        SubBucket(
            min=low + index * width,
            max=low + (index + 1) * width,
            count=count,
            percentage=count / total * 100,
        )
        for index, count in enumerate(counts)
        if count > 0
    ]
    return sorted(sub_buckets, key=lambda item: item.percentage, reverse=True)
