"""Simulation core."""

from tradesim.simulator.engine import closed_form_month_profit, simulate_month
from tradesim.simulator.lifetime import simulate_lifetime
from tradesim.simulator.models import (
    MonthRecord,
    RandomSource,
    RunResult,
    SimulationParameters,
)
from tradesim.simulator.monte_carlo import run_monte_carlo, run_single, seeded_trial, trial_seeds

__all__ = [
    "MonthRecord",
    "RandomSource",
    "RunResult",
    "SimulationParameters",
    "closed_form_month_profit",
    "run_monte_carlo",
    "run_single",
    "seeded_trial",
    "simulate_lifetime",
    "simulate_month",
    "trial_seeds",
]
