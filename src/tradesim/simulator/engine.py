"""Trade-by-trade account simulation for a single month."""

from __future__ import annotations

import random
from typing import Optional

from tradesim.simulator.models import RandomSource

WEEKS_PER_MONTH = 4


def simulate_month(
    account_balance: float,
    risk_per_trade: float,
    trades_per_week: int,
    win_rate: float,
    risk_to_reward: float,
    fee_percentage_of_risk: float,
    rng: Optional[RandomSource] = None,
) -> float:
    """Simulate one month of trades and return the net dollar change.

    Each trade risks a fraction of the current, already compounded balance.
    A win pays ``risk_to_reward`` times the amount risked, a loss costs the
    amount risked, and both pay ``fee_percentage_of_risk`` of the amount
    risked. Trading stops as soon as the balance is no longer positive.
    """
    source = rng if rng is not None else random
    trades_per_month = trades_per_week * WEEKS_PER_MONTH
    current_balance = account_balance

    for _ in range(trades_per_month):
        if current_balance <= 0:
            break
        amount_risked = current_balance * risk_per_trade
        if source.random() < win_rate:
            current_balance += amount_risked * risk_to_reward - amount_risked * fee_percentage_of_risk
        else:
            current_balance -= amount_risked * (1 + fee_percentage_of_risk)

    return current_balance - account_balance


def closed_form_month_profit(
    account_balance: float,
    risk_per_trade: float,
    trades_per_week: int,
    win_rate: float,
    risk_to_reward: float,
    fee_percentage_of_risk: float,
) -> float:
    """Deterministic month profit from the expected number of wins.

    Compounds ``balance * win_factor ** wins * loss_factor ** losses``. There
    is no mid-month ruin check, so this differs from :func:`simulate_month`
    and is only meant for quick estimates.
    """
    trades_per_month = trades_per_week * WEEKS_PER_MONTH
    wins = round(trades_per_month * win_rate)
    losses = trades_per_month - wins
    win_factor = 1 + risk_per_trade * (risk_to_reward - fee_percentage_of_risk)
    loss_factor = 1 - risk_per_trade * (1 + fee_percentage_of_risk)
    return account_balance * win_factor**wins * loss_factor**losses - account_balance
