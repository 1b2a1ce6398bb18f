import pytest

from tradesim.report import build_histogram, sub_bucket_breakdown
from tradesim.simulator import MonthRecord, RunResult


def _run(final_balance, starting_balance=50.0):
    month = MonthRecord(
        gross_profit=final_balance - starting_balance,
        expenses_deducted=0.0,
        net_profit=final_balance - starting_balance,
        end_balance=final_balance,
    )
    return RunResult(final_balance=final_balance, survived=final_balance > 0, monthly_data=(month,))


def test_no_histogram_for_ten_runs_or_fewer():
    histogram = build_histogram([_run(float(value)) for value in range(1, 11)], 50, 12)
    assert histogram.buckets == []
    assert histogram.ranked() == []


def test_core_and_outlier_buckets():
    runs = [_run(float(value)) for value in range(100, 0, -1)]
    histogram = build_histogram(runs, 50, 12)

    core = [bucket for bucket in histogram.buckets if not bucket.is_outlier_bucket]
    outlier = [bucket for bucket in histogram.buckets if bucket.is_outlier_bucket]
    assert len(core) == 9
    assert len(outlier) == 1
    assert sum(bucket.count for bucket in histogram.buckets) == 100

    width = (99 - 1) / 9
    for index, bucket in enumerate(core):
        assert bucket.index == index
        assert bucket.min == pytest.approx(1 + index * width)
        assert bucket.max == pytest.approx(1 + (index + 1) * width)
        assert all(bucket.min <= run.final_balance < bucket.max + 1e-9 for run in bucket.runs)

    assert core[0].runs[0].final_balance == 1
    assert core[8].runs[-1].final_balance == 98
    assert outlier[0].index == 9
    assert outlier[0].min == 99
    assert outlier[0].max == 100
    assert [run.final_balance for run in outlier[0].runs] == [99, 100]
    assert outlier[0].percentage == pytest.approx(2.0)
    assert sum(bucket.percentage for bucket in histogram.buckets) == pytest.approx(100.0)


def test_outlier_bucket_holds_runs_from_cutoff_upward():
    runs = [_run(float(value)) for value in range(1, 50)] + [_run(100.0)] * 2
    histogram = build_histogram(runs, 50, 12)
    outlier = histogram.buckets[-1]
    assert outlier.is_outlier_bucket
    assert outlier.min == outlier.max == 100.0
    assert outlier.count == 2
    assert sum(bucket.count for bucket in histogram.buckets) == 51

    runs = [_run(float(value)) for value in range(1, 61)]
    histogram = build_histogram(runs, 50, 12)
    outlier = histogram.get(9)
    assert outlier.is_outlier_bucket
    assert outlier.count == 2


def test_degenerate_range_gives_single_bucket():
    runs = [_run(0.0)] * 50 + [_run(500.0)]
    histogram = build_histogram(runs, 50, 12)
    assert len(histogram.buckets) == 1
    bucket = histogram.buckets[0]
    assert bucket.count == 51
    assert bucket.min == 0
    assert bucket.max == 500
    assert bucket.percentage == pytest.approx(100.0)
    assert bucket.is_outlier_bucket is False


def test_identical_outcomes_single_bucket():
    histogram = build_histogram([_run(0.0)] * 20, 50, 12)
    assert len(histogram.buckets) == 1
    assert histogram.buckets[0].roi_range == "-100.0%"


def test_ranked_and_drillable():
    runs = [_run(0.0)] * 40 + [_run(1000.0 + value) for value in range(60)]
    histogram = build_histogram(runs, 500, 12)
    ranked = histogram.ranked()

    assert [bucket.index for bucket in ranked] == [8, 0, 9]
    assert [bucket.count for bucket in ranked] == [58, 40, 2]
    assert ranked[0].drillable
    assert ranked[1].drillable
    assert not ranked[2].drillable
    assert not histogram.get(3).drillable
    with pytest.raises(KeyError):
        histogram.get(42)


def test_bucket_roi_range():
    runs = [_run(0.0)] * 40 + [_run(1000.0 + value) for value in range(60)]
    histogram = build_histogram(runs, 500, 12)
    bucket = histogram.get(8)
    assert bucket.roi_min == pytest.approx(100.0)
    assert bucket.roi_max == pytest.approx(111.4)
    assert bucket.roi_range == "100.0% to 111.4%"
    assert histogram.get(3).roi_range is None


def test_sub_buckets_relative_to_subset():
    runs = [_run(1.0)] * 3 + [_run(10.0)]
    sub_buckets = sub_bucket_breakdown(runs)
    assert [item.count for item in sub_buckets] == [3, 1]
    assert [item.percentage for item in sub_buckets] == [75.0, 25.0]
    assert sub_buckets[0].min == 1.0
    assert sub_buckets[1].max == pytest.approx(10.0)


def test_sub_buckets_cover_range_without_trimming():
    runs = [_run(float(value)) for value in range(1, 11)]
    sub_buckets = sub_bucket_breakdown(runs)
    assert len(sub_buckets) == 10
    assert sum(item.count for item in sub_buckets) == 10
    assert sum(item.percentage for item in sub_buckets) == pytest.approx(100.0)
    assert min(item.min for item in sub_buckets) == 1.0
    assert max(item.max for item in sub_buckets) == pytest.approx(10.0)


def test_sub_buckets_degenerate():
    assert sub_bucket_breakdown([]) == []
    single = sub_bucket_breakdown([_run(7.0)])
    assert len(single) == 1
    assert single[0].count == 1
    assert single[0].percentage == 100.0
    same = sub_bucket_breakdown([_run(0.0)] * 5)
    assert len(same) == 1
    assert same[0].min == same[0].max == 0.0
    assert same[0].count == 5
