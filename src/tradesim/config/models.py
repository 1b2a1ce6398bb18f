"""Configuration models for reproducible runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from tradesim.simulator.models import SimulationParameters

MAX_SIMULATION_RUNS = 100_000


@dataclass(frozen=True)
class RunConfig:
    seed: Optional[int] = None
    workers: int = 1


@dataclass(frozen=True)
class MonitoringConfig:
    audit_log_path: str = "runtime/audit.log"


@dataclass(frozen=True)
class GateConfig:
    min_survival_rate: float = 0.0
    max_ruin_rate: float = 1.0


@dataclass(frozen=True)
class SimulatorConfig:
    name: str
    version: str
    run_id_prefix: str
    parameters: SimulationParameters
    run: RunConfig = field(default_factory=RunConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    gate: GateConfig = field(default_factory=GateConfig)
