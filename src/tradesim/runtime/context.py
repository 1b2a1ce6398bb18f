"""Run context creation and metadata."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from tradesim.config.loader import compute_config_hash


@dataclass(frozen=True)
class RunContext:
    run_id: str
    config_path: Path
    config_hash: str
    started_at: datetime
    seed: Optional[int] = None

    def metadata(self) -> dict[str, object]:
        return {
            "run_id": self.run_id,
            "config_path": str(self.config_path),
            "config_hash": self.config_hash,
            "started_at_utc": self.started_at.isoformat(),
            "seed": self.seed,
        }


def create_run_context(
    config_path: str | Path,
    run_id_prefix: str,
    seed: Optional[int] = None,
    run_id: Optional[str] = None,
) -> RunContext:
    """Build a run id of the form ``<prefix>-<utc stamp>-<hash8>[-s<seed>]``."""
    path = Path(config_path)
    config_hash = compute_config_hash(path)
    started_at = datetime.now(timezone.utc)
    if run_id is None:
        run_id = f"{run_id_prefix}-{started_at:%Y%m%dT%H%M%SZ}-{config_hash[:8]}"
        if seed is not None:
            run_id = f"{run_id}-s{seed}"
    return RunContext(run_id, path, config_hash, started_at, seed)
