"""Monte Carlo aggregation over independent trading lifetimes."""

from __future__ import annotations

import random
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import Callable, Optional

from tradesim.simulator.lifetime import simulate_lifetime
from tradesim.simulator.models import RandomSource, RunResult, SimulationParameters

ProgressCallback = Callable[[int, int], None]


def run_single(params: SimulationParameters, rng: Optional[RandomSource] = None) -> RunResult:
    months = simulate_lifetime(params, rng=rng)
    if not months:
        return RunResult(final_balance=0.0, survived=False, monthly_data=())
    final_month = months[-1]
    return RunResult(
        final_balance=final_month.end_balance,
        survived=final_month.end_balance > 0,
        monthly_data=tuple(months),
    )


def seeded_trial(params: SimulationParameters, trial_seed: int) -> RunResult:
    return run_single(params, rng=random.Random(trial_seed))


def trial_seeds(num_runs: int, seed: Optional[int] = None) -> list[int]:
    """One 64-bit seed per trial, reproducible when ``seed`` is given."""
    master = random.Random(seed) if seed is not None else random.SystemRandom()
    return [master.getrandbits(64) for _ in range(num_runs)]


def run_monte_carlo(
    params: SimulationParameters,
    num_runs: int,
    rng: Optional[RandomSource] = None,
    seed: Optional[int] = None,
    workers: int = 1,
    on_progress: Optional[ProgressCallback] = None,
) -> list[RunResult]:
    """Run ``num_runs`` independent lifetimes.

    With ``rng`` every trial draws from that single stream in order. Otherwise
    each trial gets its own ``random.Random`` seeded from ``seed`` (or from OS
    entropy), which keeps results identical for any ``workers`` count.
    ``workers > 1`` spreads seeded trials over a process pool.
    """
    if num_runs <= 0:
        return []
    if rng is not None and workers > 1:
        raise ValueError("A shared random source cannot be used with multiple workers")

    if rng is not None:
        results: list[RunResult] = []
        for completed in range(1, num_runs + 1):
            results.append(run_single(params, rng=rng))
            if on_progress is not None:
                on_progress(completed, num_runs)
        return results

    seeds = trial_seeds(num_runs, seed)
    trial = partial(seeded_trial, params)

    if workers <= 1:
        results = []
        for completed, trial_seed in enumerate(seeds, start=1):
            results.append(trial(trial_seed))
            if on_progress is not None:
                on_progress(completed, num_runs)
        return results

    chunksize = max(1, num_runs // (workers * 8))
    with ProcessPoolExecutor(max_workers=workers) as executor:
        results = []
        for completed, result in enumerate(executor.map(trial, seeds, chunksize=chunksize), start=1):
            results.append(result)
            if on_progress is not None:
                on_progress(completed, num_runs)
    return results
