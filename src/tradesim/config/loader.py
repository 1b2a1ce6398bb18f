"""Load, validate and freeze configuration files."""

from __future__ import annotations

import hashlib
import json
import math
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import yaml

from tradesim.config.models import (
    MAX_SIMULATION_RUNS,
    GateConfig,
    MonitoringConfig,
    RunConfig,
    SimulatorConfig,
)
from tradesim.simulator.models import SimulationParameters

# Percent-valued keys mirror the input form; they are stored as fractions.
DEFAULT_PARAMETERS: dict[str, Any] = {
    "starting_balance": 25000,
    "risk_per_trade_pct": 2,
    "trades_per_week": 5,
    "win_rate_pct": 50,
    "risk_to_reward": 2,
    "fee_pct_of_risk": 3,
    "total_monthly_expenses": 4000,
    "expenses_begin_month": 0,
    "simulation_timeline_months": 12,
    "simulation_runs": 100000,
}


def load_config(path: str | Path) -> SimulatorConfig:
    path = Path(path)
    data = _load_yaml(path)

    name = str(_require(data, "name"))
    version = str(_require(data, "version"))
    run_id_prefix = str(data.get("run_id_prefix", name))

    return SimulatorConfig(
        name=name,
        version=version,
        run_id_prefix=run_id_prefix,
        parameters=parse_parameters(_section(data, "parameters")),
        run=_parse_run(_section(data, "run")),
        monitoring=_parse_monitoring(_section(data, "monitoring")),
        gate=_parse_gate(_section(data, "gate")),
    )


def compute_config_hash(path: str | Path) -> str:
    return hashlib.sha256(Path(path).read_bytes()).hexdigest()


def default_lock_path(path: str | Path) -> Path:
    path = Path(path)
    return path.with_suffix(path.suffix + ".lock.json")


def freeze_config(path: str | Path, lock_path: Optional[str | Path] = None) -> Path:
    """Write a lock file pinning the SHA-256 of ``path``."""
    path = Path(path)
    target = Path(lock_path) if lock_path is not None else default_lock_path(path)
    payload = {
        "config_path": str(path),
        "config_hash": compute_config_hash(path),
        "frozen_at_utc": datetime.now(timezone.utc).isoformat(),
    }
    target.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return target


def verify_config_lock(path: str | Path, lock_path: Optional[str | Path] = None) -> bool:
    target = Path(lock_path) if lock_path is not None else default_lock_path(path)
    if not target.exists():
        return False
    payload = json.loads(target.read_text(encoding="utf-8"))
    return payload.get("config_hash") == compute_config_hash(path)


def parse_parameters(data: dict[str, Any]) -> SimulationParameters:
    if not isinstance(data, dict):
        raise ValueError("parameters must be a mapping")
    merged = {**DEFAULT_PARAMETERS, **data}
    unknown = set(merged) - set(DEFAULT_PARAMETERS)
    if unknown:
        raise ValueError(f"Unknown parameter keys: {', '.join(sorted(unknown))}")

    params = SimulationParameters(
        starting_balance=_number(merged, "starting_balance"),
        risk_per_trade=_number(merged, "risk_per_trade_pct") / 100,
        trades_per_week=_integer(merged, "trades_per_week"),
        win_rate=_number(merged, "win_rate_pct") / 100,
        risk_to_reward=_number(merged, "risk_to_reward"),
        fee_percentage_of_risk=_number(merged, "fee_pct_of_risk") / 100,
        total_monthly_expenses=_number(merged, "total_monthly_expenses"),
        expenses_begin_month=_integer(merged, "expenses_begin_month"),
        simulation_timeline_months=_integer(merged, "simulation_timeline_months"),
        simulation_runs=_integer(merged, "simulation_runs"),
    )
    validate_parameters(params)
    return params


def validate_parameters(params: SimulationParameters) -> None:
    if params.starting_balance <= 0:
        raise ValueError("starting_balance must be positive")
    if not 0 < params.risk_per_trade <= 1:
        raise ValueError("risk_per_trade must be in (0, 100] percent")
    if params.trades_per_week < 0:
        raise ValueError("trades_per_week must not be negative")
    if not 0 <= params.win_rate <= 1:
        raise ValueError("win_rate must be in [0, 100] percent")
    if params.risk_to_reward <= 0:
        raise ValueError("risk_to_reward must be positive")
    if params.fee_percentage_of_risk < 0:
        raise ValueError("fee_pct_of_risk must not be negative")
    if params.total_monthly_expenses < 0:
        raise ValueError("total_monthly_expenses must not be negative")
    if params.simulation_timeline_months <= 0:
        raise ValueError("simulation_timeline_months must be positive")
    if params.simulation_runs <= 0:
        raise ValueError("simulation_runs must be positive")
    if params.simulation_runs > MAX_SIMULATION_RUNS:
        raise ValueError(f"simulation_runs cannot exceed {MAX_SIMULATION_RUNS:,}")


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config must be a mapping")
    return data


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing required config key: {key}")
    return data[key]


def _number(data: dict[str, Any], key: str, label: Optional[str] = None) -> float:
    label = label or key
    value = data[key]
    if isinstance(value, bool):
        raise ValueError(f"Invalid {label}: {value}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {label}: {value}") from exc
    if not math.isfinite(number):
        raise ValueError(f"Invalid {label}: {value}")
    return number


def _integer(data: dict[str, Any], key: str, label: Optional[str] = None) -> int:
    number = _number(data, key, label)
    if not number.is_integer():
        raise ValueError(f"Invalid {label or key}: {data[key]} is not a whole number")
    return int(number)


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{key} must be a mapping")
    return value


def _parse_run(data: dict[str, Any]) -> RunConfig:
    seed = None
    if data.get("seed") is not None:
        seed = _integer(data, "seed", "run.seed")
    workers = _integer({"workers": 1, **data}, "workers", "run.workers")
    if workers < 1:
        raise ValueError("run.workers must be at least 1")
    return RunConfig(seed=seed, workers=workers)


def _parse_monitoring(data: dict[str, Any]) -> MonitoringConfig:
    audit_log_path = data.get("audit_log_path", "runtime/audit.log")
    if not isinstance(audit_log_path, str) or not audit_log_path:
        raise ValueError(f"Invalid monitoring.audit_log_path: {audit_log_path}")
    return MonitoringConfig(audit_log_path=audit_log_path)


def _parse_gate(data: dict[str, Any]) -> GateConfig:
    merged = {"min_survival_rate": 0.0, "max_ruin_rate": 1.0, **data}
    rates = {}
    for key in ("min_survival_rate", "max_ruin_rate"):
        rate = _number(merged, key, f"gate.{key}")
        if not 0 <= rate <= 1:
            raise ValueError(f"gate.{key} must be in [0, 1]")
        rates[key] = rate
    return GateConfig(**rates)


def serialize_config(config: SimulatorConfig) -> dict[str, Any]:
    return asdict(config)
