"""Append-only JSON-lines trail of simulation runs."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional

# Lifecycle of one CLI run, in the order the events are written.
RUN_EVENTS = ("run_start", "simulation_complete", "gate", "report_written")


class AuditLog:
    def __init__(self, path: str | Path, run_id: Optional[str] = None, config_hash: Optional[str] = None) -> None:
        self.path = Path(path)
        self.run_id = run_id
        self.config_hash = config_hash
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, event: str, payload: dict[str, Any]) -> dict[str, Any]:
        if event not in RUN_EVENTS:
            raise ValueError(f"Unknown audit event: {event}")
        record = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "run_id": self.run_id,
            "config_hash": self.config_hash,
            "event": event,
            "payload": payload,
        }
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, default=str))
            handle.write("\n")
        return record

    def events(self, run_id: Optional[str] = None) -> Iterator[dict[str, Any]]:
        """Records in file order, restricted to ``run_id`` when given."""
        if not self.path.exists():
            return
        with self.path.open("r", encoding="utf-8") as handle:
            for line in handle:
                line = line.strip()
                if not line:
                    continue
                record = json.loads(line)
                if run_id is None or record.get("run_id") == run_id:
                    yield record
