"""Config loading and freezing."""

from tradesim.config.loader import (
    DEFAULT_PARAMETERS,
    compute_config_hash,
    default_lock_path,
    freeze_config,
    load_config,
    parse_parameters,
    serialize_config,
    validate_parameters,
    verify_config_lock,
)
from tradesim.config.models import (
    MAX_SIMULATION_RUNS,
    GateConfig,
    MonitoringConfig,
    RunConfig,
    SimulatorConfig,
)

__all__ = [
    "DEFAULT_PARAMETERS",
    "GateConfig",
    "MAX_SIMULATION_RUNS",
    "MonitoringConfig",
    "RunConfig",
    "SimulatorConfig",
    "compute_config_hash",
    "default_lock_path",
    "freeze_config",
    "load_config",
    "parse_parameters",
    "serialize_config",
    "validate_parameters",
    "verify_config_lock",
]
