import random

from tradesim.report import SimulationReport
from tradesim.simulator import SimulationParameters, closed_form_month_profit, run_monte_carlo, simulate_month


params = SimulationParameters(
    starting_balance=5000,
    risk_per_trade=0.02,
    trades_per_week=5,
    win_rate=0.5,
    risk_to_reward=2,
    fee_percentage_of_risk=0.03,
    total_monthly_expenses=300,
    expenses_begin_month=3,
    simulation_timeline_months=12,
    simulation_runs=2000,
)

rng = random.Random(7)
print("One month (sampled):", round(simulate_month(5000, 0.02, 5, 0.5, 2, 0.03, rng=rng), 2))
print("One month (closed form):", round(closed_form_month_profit(5000, 0.02, 5, 0.5, 2, 0.03), 2))

results = run_monte_carlo(params, params.simulation_runs, seed=7)
report = SimulationReport.build(params, results)
summary = report.summary
print("Survival rate:", f"{summary.survival_rate:.2%}")
print("Ruin rate:", f"{summary.ruin_rate:.2%}")
print("Average final balance:", round(summary.average_final_balance, 2))

for bucket in report.histogram.ranked():
    marker = " *" if bucket.drillable else ""
    print(f"  {bucket.min:,.2f} - {bucket.max:,.2f}: {bucket.percentage:.2f}% | ROI {bucket.roi_range}{marker}")

drillable = [bucket for bucket in report.histogram.ranked() if bucket.drillable]
if drillable:
    print("Drill-down for bucket", drillable[0].index)
    for item in report.get_sub_bucket_breakdown(drillable[0].index):
        print(f"  {item.min:,.2f} - {item.max:,.2f}: {item.percentage:.2f}%")
