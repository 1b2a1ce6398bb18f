"""Simulation data structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class RandomSource(Protocol):
    def random(self) -> float:
        ...


@dataclass(frozen=True)
class SimulationParameters:
    starting_balance: float
    risk_per_trade: float
    trades_per_week: int
    win_rate: float
    risk_to_reward: float
    fee_percentage_of_risk: float = 0.0
    total_monthly_expenses: float = 0.0
    expenses_begin_month: int = 0  # <= 0 disables expenses
    simulation_timeline_months: int = 12
    simulation_runs: int = 1000

    @property
    def expenses_enabled(self) -> bool:
        return self.expenses_begin_month >= 1

    def expenses_active(self, month_number: int) -> bool:
        """Whether expenses are charged in the given 1-based month."""
        return self.expenses_enabled and month_number >= self.expenses_begin_month


@dataclass(frozen=True)
class MonthRecord:
    gross_profit: float
    expenses_deducted: float
    net_profit: float
    end_balance: float


@dataclass(frozen=True)
class RunResult:
    final_balance: float
    survived: bool
    monthly_data: tuple[MonthRecord, ...] = ()

    @property
    def months_simulated(self) -> int:
        return len(self.monthly_data)

    @property
    def total_gross_profit(self) -> float:
        return sum(month.gross_profit for month in self.monthly_data)

    @property
    def total_expenses(self) -> float:
        return sum(month.expenses_deducted for month in self.monthly_data)
