"""Summary statistics over a batch of Monte Carlo runs."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from tradesim.simulator.models import RunResult


@dataclass(frozen=True)
class SummaryStatistics:
    total_runs: int
    average_final_balance: float
    median: Optional[RunResult]
    best: Optional[RunResult]
    worst: Optional[RunResult]
    average_scenario: Optional[RunResult]
    survived_count: int
    profitable_count: int
    losing_but_solvent_count: int
    ruined_count: int

    def _rate(self, count: int) -> float:
        return count / self.total_runs if self.total_runs else 0.0

    @property
    def survival_rate(self) -> float:
        return self._rate(self.survived_count)

    @property
    def profitable_rate(self) -> float:
        return self._rate(self.profitable_count)

    @property
    def losing_but_solvent_rate(self) -> float:
        return self._rate(self.losing_but_solvent_count)

    @property
    def ruin_rate(self) -> float:
        return self._rate(self.ruined_count)


def sort_runs(results: Iterable[RunResult]) -> list[RunResult]:
    return sorted(results, key=lambda run: run.final_balance)


def annualized_roi(final_balance: float, starting_balance: float, timeline_months: float) -> float:
    """Geometric yearly return in percent.

    A non-positive starting balance or any non-finite result yields ``0.0``.
    """
    if starting_balance <= 0:
        return 0.0
    total_return = (final_balance - starting_balance) / starting_balance
    years = timeline_months / 12
    try:
        if years <= 0:
            roi = total_return * 100
        elif 1 + total_return < 0:
            roi = -(abs(1 + total_return) ** (1 / years) - 1) * 100
        else:
            roi = ((1 + total_return) ** (1 / years) - 1) * 100
    except OverflowError:
        return 0.0
    if not math.isfinite(roi):
        return 0.0
    return roi


def format_roi_range(roi_values: Sequence[float]) -> Optional[str]:
    if not roi_values:
        return None
    low = f"{min(roi_values):,.1f}"
    high = f"{max(roi_values):,.1f}"
    if low == high:
        return f"{low}%"
    return f"{low}% to {high}%"


def summarize(
    results: Iterable[RunResult],
    starting_balance: float,
    presorted: bool = False,
) -> SummaryStatistics:
    """Counts, rates and named runs. ``presorted`` skips the ascending sort."""
    ordered = list(results) if presorted else sort_runs(results)
    total = len(ordered)
    if total == 0:
        return SummaryStatistics(0, 0.0, None, None, None, None, 0, 0, 0, 0)

    average = sum(run.final_balance for run in ordered) / total
    average_scenario = min(ordered, key=lambda run: abs(run.final_balance - average))

    return SummaryStatistics(
        total_runs=total,
        average_final_balance=average,
        median=ordered[total // 2],
        best=ordered[-1],
        worst=ordered[0],
        average_scenario=average_scenario,
        survived_count=sum(1 for run in ordered if run.survived),
        profitable_count=sum(1 for run in ordered if run.final_balance > starting_balance),
        losing_but_solvent_count=sum(
            1 for run in ordered if 0 < run.final_balance < starting_balance
        ),
        ruined_count=sum(1 for run in ordered if run.final_balance <= 0),
    )
