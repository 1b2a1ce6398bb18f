from __future__ import annotations

import os

import streamlit as st

from tradesim.config import DEFAULT_PARAMETERS, MAX_SIMULATION_RUNS, parse_parameters
from tradesim.report import SCENARIO_NAMES, Bucket, SimulationReport
from tradesim.simulator import run_monte_carlo


def _format_currency(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def _format_month_ordinal(n: int) -> str:
    if n <= 0:
        return "Disabled"
    if 11 <= n % 100 <= 13:
        return f"{n}th Month"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix} Month"


def _bucket_label(bucket: Bucket) -> str:
    if bucket.is_outlier_bucket:
        return f"{_format_currency(bucket.min)}+"
    return f"{_format_currency(bucket.min)} - {_format_currency(bucket.max)}"


def _sidebar_inputs() -> dict:
    defaults = DEFAULT_PARAMETERS
    sidebar = st.sidebar
    expenses_begin = sidebar.number_input(
        "Expenses begin month (0 = disabled)", min_value=0, value=int(defaults["expenses_begin_month"]), step=1
    )
    sidebar.caption(_format_month_ordinal(int(expenses_begin)))
    return {
        "starting_balance": sidebar.number_input("Account balance ($)", min_value=1.0, value=float(defaults["starting_balance"])),
        "risk_per_trade_pct": sidebar.number_input("Risk per trade (%)", min_value=0.01, max_value=100.0, value=float(defaults["risk_per_trade_pct"])),
        "trades_per_week": sidebar.number_input("Trades per week", min_value=0, value=int(defaults["trades_per_week"]), step=1),
        "win_rate_pct": sidebar.number_input("Win rate (%)", min_value=0.0, max_value=100.0, value=float(defaults["win_rate_pct"])),
        "risk_to_reward": sidebar.number_input("Risk to reward (1:x)", min_value=0.01, value=float(defaults["risk_to_reward"])),
        "fee_pct_of_risk": sidebar.number_input("Fee (% of risk)", min_value=0.0, value=float(defaults["fee_pct_of_risk"])),
        "total_monthly_expenses": sidebar.number_input("Monthly expenses ($)", min_value=0.0, value=float(defaults["total_monthly_expenses"])),
        "expenses_begin_month": int(expenses_begin),
        "simulation_timeline_months": sidebar.number_input("Timeline (months)", min_value=1, value=int(defaults["simulation_timeline_months"]), step=1),
        "simulation_runs": sidebar.number_input(
            "Simulation runs", min_value=1, max_value=MAX_SIMULATION_RUNS, value=10000, step=1000
        ),
    }


def _render_summary(report: SimulationReport) -> None:
    summary = report.summary
    col_a, col_b, col_c, col_d = st.columns(4)
    col_a.metric("Survival Rate", f"{summary.survival_rate * 100:.2f}%", f"{summary.survived_count:,} runs")
    col_b.metric("Profitable", f"{summary.profitable_rate * 100:.2f}%", f"{summary.profitable_count:,} runs")
    col_c.metric(
        "Loss, not ruined",
        f"{summary.losing_but_solvent_rate * 100:.2f}%",
        f"{summary.losing_but_solvent_count:,} runs",
    )
    col_d.metric("Ruined", f"{summary.ruin_rate * 100:.2f}%", f"{summary.ruined_count:,} runs")

    col_e, col_f, col_g, col_h = st.columns(4)
    col_e.metric("Average Final Balance", _format_currency(summary.average_final_balance))
    if summary.median is not None:
        col_f.metric("Median Final Balance", _format_currency(summary.median.final_balance))
    if summary.best is not None:
        col_g.metric("Best Case", _format_currency(summary.best.final_balance))
    if summary.worst is not None:
        col_h.metric("Worst Case", _format_currency(summary.worst.final_balance))


def _render_distribution(report: SimulationReport) -> None:
    ranked = report.histogram.ranked()
    if not ranked:
        st.info("Outcome distribution needs more than 10 runs.")
        return

    st.subheader("Outcome Distribution")
    st.table(
        [
            {
                "Range": _bucket_label(bucket),
                "Simulations": f"{bucket.count:,}",
                "Share": f"{bucket.percentage:.2f}%",
                "ROI (ann.)": bucket.roi_range or "",
            }
            for bucket in ranked
        ]
    )

    drillable = [bucket for bucket in ranked if bucket.drillable]
    if not drillable:
        return
    labels = {_bucket_label(bucket): bucket.index for bucket in drillable}
    choice = st.selectbox("Drill into bucket", ["-"] + list(labels))
    if choice == "-":
        return
    sub_buckets = report.get_sub_bucket_breakdown(labels[choice])
    if len(sub_buckets) == 1 and sub_buckets[0].min == sub_buckets[0].max:
        st.write(
            f"All {sub_buckets[0].count:,} simulations in this bucket had a final balance of "
            f"{_format_currency(sub_buckets[0].min)}."
        )
        return
    st.table(
        [
            {
                "Range": f"{_format_currency(item.min)} - {_format_currency(item.max)}",
                "Simulations": f"{item.count:,}",
                "Share": f"{item.percentage:.2f}%",
            }
            for item in sub_buckets
        ]
    )


def _render_scenarios(report: SimulationReport) -> None:
    st.subheader("Scenario Details")
    tabs = st.tabs([name.title() for name in SCENARIO_NAMES])
    for tab, name in zip(tabs, SCENARIO_NAMES):
        detail = report.scenario(name)
        with tab:
            if detail is None:
                st.write("No data")
                continue
            st.table(
                [
                    {
                        "Month": index,
                        "Trade Profit": _format_currency(month.gross_profit),
                        "Expenses": _format_currency(month.expenses_deducted),
                        "Net Profit": _format_currency(month.net_profit),
                        "Ending Balance": _format_currency(month.end_balance),
                    }
                    for index, month in enumerate(detail.months, start=1)
                ]
            )
            st.caption(
                f"Total trading profits {_format_currency(detail.total_gross_profit)} | "
                f"Total deducted expenses {_format_currency(detail.total_expenses)} | "
                f"Final balance {_format_currency(detail.final_balance)}"
            )


def main() -> None:
    st.set_page_config(page_title="Trading Lifetime Simulator", layout="wide")
    st.title("Monte Carlo Trading Lifetime Simulator")

    inputs = _sidebar_inputs()
    workers = int(os.getenv("TRADESIM_WORKERS", "1"))

    if st.sidebar.button("Run simulation"):
        try:
            params = parse_parameters(inputs)
        except ValueError as exc:
            st.error(f"Simulation aborted: {exc}")
            return
        progress = st.progress(0.0)

        def on_progress(completed: int, total: int) -> None:
            if completed == total or completed % max(1, total // 100) == 0:
                progress.progress(completed / total)

        with st.spinner(f"Simulating {params.simulation_runs:,} possible futures..."):
            results = run_monte_carlo(params, params.simulation_runs, workers=workers, on_progress=on_progress)
        st.session_state["report"] = SimulationReport.build(params, results)

    report = st.session_state.get("report")
    if report is None:
        st.write("Enter your inputs then press the button.")
        return

    _render_summary(report)
    _render_distribution(report)
    _render_scenarios(report)


if __name__ == "__main__":
    main()
