"""Structured report for a finished Monte Carlo batch."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable, Optional

from tradesim.report.histogram import Bucket, Histogram, SubBucket, build_histogram, sub_bucket_breakdown
from tradesim.report.stats import SummaryStatistics, sort_runs, summarize
from tradesim.simulator.models import MonthRecord, RunResult, SimulationParameters

SCENARIO_NAMES = ("average", "median", "best", "worst")


@dataclass(frozen=True)
class ScenarioDetail:
    name: str
    months: tuple[MonthRecord, ...]
    total_gross_profit: float
    total_expenses: float
    final_balance: float


class SimulationReport:
    def __init__(
        self,
        params: SimulationParameters,
        runs: list[RunResult],
        summary: SummaryStatistics,
        histogram: Histogram,
    ) -> None:
        self.params = params
        self.runs = runs
        self.summary = summary
        self.histogram = histogram

    @classmethod
    def build(cls, params: SimulationParameters, results: Iterable[RunResult]) -> "SimulationReport":
        runs = sort_runs(results)
        summary = summarize(runs, params.starting_balance, presorted=True)
        histogram = build_histogram(
            runs, params.starting_balance, params.simulation_timeline_months, presorted=True
        )
        return cls(params, runs, summary, histogram)

    def get_sub_bucket_breakdown(self, bucket_id: int) -> list[SubBucket]:
        bucket = self.histogram.get(bucket_id)
        if not bucket.drillable:
            raise ValueError(f"Bucket {bucket_id} is not drillable")
        return sub_bucket_breakdown(bucket.runs)

    def scenario(self, name: str) -> Optional[ScenarioDetail]:
        if name not in SCENARIO_NAMES:
            raise KeyError(f"Unknown scenario: {name}")
        run = {
            "average": self.summary.average_scenario,
            "median": self.summary.median,
            "best": self.summary.best,
            "worst": self.summary.worst,
        }[name]
        if run is None:
            return None
        final_balance = run.monthly_data[-1].end_balance if run.monthly_data else 0.0
        return ScenarioDetail(
            name=name,
            months=run.monthly_data,
            total_gross_profit=run.total_gross_profit,
            total_expenses=run.total_expenses,
            final_balance=final_balance,
        )

    def to_dict(self, include_months: bool = True) -> dict[str, Any]:
        summary = self.summary
        payload: dict[str, Any] = {
            "parameters": asdict(self.params),
            "summary": {
                "total_runs": summary.total_runs,
                "average_final_balance": summary.average_final_balance,
                "median_final_balance": _final(summary.median),
                "best_final_balance": _final(summary.best),
                "worst_final_balance": _final(summary.worst),
                "average_scenario_final_balance": _final(summary.average_scenario),
                "survival_rate": summary.survival_rate,
                "profitable_rate": summary.profitable_rate,
                "losing_but_solvent_rate": summary.losing_but_solvent_rate,
                "ruin_rate": summary.ruin_rate,
                "survived_count": summary.survived_count,
                "profitable_count": summary.profitable_count,
                "losing_but_solvent_count": summary.losing_but_solvent_count,
                "ruined_count": summary.ruined_count,
            },
            "histogram": [_serialize_bucket(bucket) for bucket in self.histogram.ranked()],
            "drilldowns": {
                str(bucket.index): [asdict(item) for item in sub_bucket_breakdown(bucket.runs)]
                for bucket in self.histogram.ranked()
                if bucket.drillable
            },
        }
        if include_months:
            scenarios = {}
            for name in SCENARIO_NAMES:
                detail = self.scenario(name)
                if detail is None:
                    continue
                scenarios[name] = {
                    "total_gross_profit": detail.total_gross_profit,
                    "total_expenses": detail.total_expenses,
                    "final_balance": detail.final_balance,
                    "months": [asdict(month) for month in detail.months],
                }
            payload["scenarios"] = scenarios
        return payload


def _final(run: Optional[RunResult]) -> Optional[float]:
    return run.final_balance if run is not None else None


def _serialize_bucket(bucket: Bucket) -> dict[str, Any]:
    return {
        "id": bucket.index,
        "min": bucket.min,
        "max": bucket.max,
        "count": bucket.count,
        "percentage": bucket.percentage,
        "roi_range": bucket.roi_range,
        "roi_min": bucket.roi_min,
        "roi_max": bucket.roi_max,
        "is_outlier_bucket": bucket.is_outlier_bucket,
        "drillable": bucket.drillable,
    }
