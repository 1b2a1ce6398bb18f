"""Month-by-month lifetime simulation."""

from __future__ import annotations

from typing import Optional

from tradesim.simulator.engine import simulate_month
from tradesim.simulator.models import MonthRecord, RandomSource, SimulationParameters


def simulate_lifetime(
    params: SimulationParameters,
    rng: Optional[RandomSource] = None,
) -> list[MonthRecord]:
    current_balance = params.starting_balance
    months: list[MonthRecord] = []

    for index in range(params.simulation_timeline_months):
        gross_profit = simulate_month(
            current_balance,
            params.risk_per_trade,
            params.trades_per_week,
            params.win_rate,
            params.risk_to_reward,
            params.fee_percentage_of_risk,
            rng=rng,
        )
        if params.expenses_active(index + 1):
            net_profit = gross_profit - params.total_monthly_expenses
        else:
            net_profit = gross_profit

        current_balance += net_profit
        months.append(
            MonthRecord(
                gross_profit=gross_profit,
                expenses_deducted=gross_profit - net_profit,
                net_profit=net_profit,
                end_balance=current_balance,
            )
        )
        if current_balance <= 0:
            break

    return months
