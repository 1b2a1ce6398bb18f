"""Statistics and reporting over simulation results."""

from tradesim.report.gate import GateResult, assess_gate
from tradesim.report.histogram import Bucket, Histogram, SubBucket, build_histogram, sub_bucket_breakdown
from tradesim.report.report import SCENARIO_NAMES, ScenarioDetail, SimulationReport
from tradesim.report.stats import (
    SummaryStatistics,
    annualized_roi,
    format_roi_range,
    sort_runs,
    summarize,
)

__all__ = [
    "Bucket",
    "GateResult",
    "Histogram",
    "SCENARIO_NAMES",
    "ScenarioDetail",
    "SimulationReport",
    "SubBucket",
    "SummaryStatistics",
    "annualized_roi",
    "assess_gate",
    "build_histogram",
    "format_roi_range",
    "sort_runs",
    "sub_bucket_breakdown",
    "summarize",
]
