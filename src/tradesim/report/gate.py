"""Survival gates for strategy readiness."""

from __future__ import annotations

from dataclasses import dataclass

from tradesim.report.stats import SummaryStatistics


@dataclass(frozen=True)
class GateResult:
    survival_rate: float
    ruin_rate: float
    profitable_rate: float
    min_survival_rate: float
    max_ruin_rate: float
    meets_threshold: bool


def assess_gate(
    summary: SummaryStatistics,
    min_survival_rate: float,
    max_ruin_rate: float = 1.0,
) -> GateResult:
    if summary.total_runs == 0:
        return GateResult(0.0, 0.0, 0.0, min_survival_rate, max_ruin_rate, False)

    return GateResult(
        survival_rate=summary.survival_rate,
        ruin_rate=summary.ruin_rate,
        profitable_rate=summary.profitable_rate,
        min_survival_rate=min_survival_rate,
        max_ruin_rate=max_ruin_rate,
        meets_threshold=summary.survival_rate >= min_survival_rate and summary.ruin_rate <= max_ruin_rate,
    )
