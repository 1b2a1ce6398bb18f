import json

import pytest

from tradesim.report import SimulationReport, assess_gate
from tradesim.simulator import MonthRecord, RunResult, SimulationParameters, run_monte_carlo


def _params(**overrides):
    values = dict(
        starting_balance=500,
        risk_per_trade=0.02,
        trades_per_week=5,
        win_rate=0.5,
        risk_to_reward=2,
        fee_percentage_of_risk=0.03,
        total_monthly_expenses=0,
        expenses_begin_month=0,
        simulation_timeline_months=12,
        simulation_runs=100,
    )
    values.update(overrides)
    return SimulationParameters(**values)


def _run(final_balance, starting_balance=500.0):
    months = (
        MonthRecord(gross_profit=100.0, expenses_deducted=50.0, net_profit=50.0, end_balance=starting_balance + 50),
        MonthRecord(
            gross_profit=final_balance - starting_balance - 20,
            expenses_deducted=30.0,
            net_profit=final_balance - starting_balance - 50,
            end_balance=final_balance,
        ),
    )
    return RunResult(final_balance=final_balance, survived=final_balance > 0, monthly_data=months)


def _report():
    runs = [_run(1000.0 + value) for value in range(60)] + [_run(0.0)] * 40
    return SimulationReport.build(_params(), runs)


def test_report_sorts_runs_and_builds_histogram():
    report = _report()
    balances = [run.final_balance for run in report.runs]
    assert balances == sorted(balances)
    assert report.summary.total_runs == 100
    assert sum(bucket.count for bucket in report.histogram.buckets) == 100


def test_report_sorts_runs_once(monkeypatch):
    from tradesim.report import histogram, report, stats

    calls = []
    real_sort = stats.sort_runs

    def counting_sort(results):
        calls.append(1)
        return real_sort(results)

    for module in (histogram, report, stats):
        monkeypatch.setattr(module, "sort_runs", counting_sort)
    built = _report()
    assert len(calls) == 1
    assert built.summary.worst.final_balance == 0.0
    assert built.histogram.get(8).runs[-1].final_balance == 1057.0


def test_drill_down_by_bucket_id():
    report = _report()
    sub_buckets = report.get_sub_bucket_breakdown(8)
    assert sum(item.count for item in sub_buckets) == 58
    assert sum(item.percentage for item in sub_buckets) == pytest.approx(100.0)
    assert min(item.min for item in sub_buckets) == 1000.0
    assert max(item.max for item in sub_buckets) == pytest.approx(1057.0)


def test_drill_down_into_identical_outcomes():
    sub_buckets = _report().get_sub_bucket_breakdown(0)
    assert len(sub_buckets) == 1
    assert sub_buckets[0].count == 40
    assert sub_buckets[0].percentage == 100.0


def test_drill_down_rejects_small_or_unknown_buckets():
    report = _report()
    with pytest.raises(ValueError):
        report.get_sub_bucket_breakdown(9)
    with pytest.raises(ValueError):
        report.get_sub_bucket_breakdown(4)
    with pytest.raises(KeyError):
        report.get_sub_bucket_breakdown(99)


def test_scenario_details():
    report = _report()
    best = report.scenario("best")
    assert best.final_balance == 1059.0
    assert len(best.months) == 2
    assert best.total_expenses == pytest.approx(80.0)
    assert best.total_gross_profit == pytest.approx(100.0 + 1059.0 - 520.0)

    worst = report.scenario("worst")
    assert worst.final_balance == 0.0
    assert report.scenario("median").final_balance == 1010.0
    with pytest.raises(KeyError):
        report.scenario("typical")


def test_scenarios_missing_for_empty_batch():
    report = SimulationReport.build(_params(), [])
    assert report.scenario("average") is None
    assert report.histogram.buckets == []
    assert report.to_dict()["scenarios"] == {}


def test_to_dict_is_plain_json():
    payload = _report().to_dict()
    decoded = json.loads(json.dumps(payload))
    assert decoded["summary"]["total_runs"] == 100
    assert decoded["summary"]["ruin_rate"] == pytest.approx(0.4)
    assert [bucket["id"] for bucket in decoded["histogram"]] == [8, 0, 9]
    assert set(decoded["drilldowns"]) == {"8", "0"}
    assert set(decoded["scenarios"]) == {"average", "median", "best", "worst"}
    assert "scenarios" not in _report().to_dict(include_months=False)


def test_end_to_end_seeded_batch():
    params = _params(total_monthly_expenses=40, expenses_begin_month=3, simulation_runs=500)
    results = run_monte_carlo(params, params.simulation_runs, seed=21)
    report = SimulationReport.build(params, results)
    summary = report.summary
    assert summary.total_runs == 500
    assert sum(bucket.count for bucket in report.histogram.buckets) == 500
    assert summary.survival_rate + summary.ruin_rate == pytest.approx(1.0)
    for bucket in report.histogram.ranked():
        if bucket.drillable:
            sub_buckets = report.get_sub_bucket_breakdown(bucket.index)
            assert sum(item.count for item in sub_buckets) == bucket.count


def test_gate_thresholds():
    summary = _report().summary
    passing = assess_gate(summary, min_survival_rate=0.5, max_ruin_rate=0.5)
    assert passing.meets_threshold is True
    assert passing.survival_rate == pytest.approx(0.6)

    failing = assess_gate(summary, min_survival_rate=0.7)
    assert failing.meets_threshold is False

    too_many_ruined = assess_gate(summary, min_survival_rate=0.0, max_ruin_rate=0.3)
    assert too_many_ruined.meets_threshold is False


def test_gate_on_empty_batch():
    summary = SimulationReport.build(_params(), []).summary
    assert assess_gate(summary, min_survival_rate=0.0).meets_threshold is False
