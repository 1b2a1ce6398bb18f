import json

import pytest

from tradesim.monitoring import AuditLog
from tradesim.runtime import create_run_context


def test_audit_log_appends_json_lines(tmp_path):
    path = tmp_path / "nested" / "audit.log"
    audit = AuditLog(path, run_id="run-1", config_hash="abc")
    audit.log("run_start", {"runs": 10})
    audit.log("simulation_complete", {"survival_rate": 0.9})

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["event"] == "run_start"
    assert first["run_id"] == "run-1"
    assert first["config_hash"] == "abc"
    assert first["payload"] == {"runs": 10}
    assert first["ts"].endswith("Z")
    assert [event["event"] for event in audit.events()] == ["run_start", "simulation_complete"]


def test_events_on_missing_file(tmp_path):
    audit = AuditLog(tmp_path / "audit.log")
    assert list(audit.events()) == []


def test_events_filtered_by_run(tmp_path):
    path = tmp_path / "audit.log"
    AuditLog(path, run_id="a").log("run_start", {})
    second = AuditLog(path, run_id="b")
    second.log("run_start", {})
    second.log("gate", {"meets_threshold": True})
    assert [event["run_id"] for event in second.events()] == ["a", "b", "b"]
    assert [event["event"] for event in second.events("b")] == ["run_start", "gate"]


def test_unknown_event_rejected(tmp_path):
    audit = AuditLog(tmp_path / "audit.log")
    with pytest.raises(ValueError, match="order_fill"):
        audit.log("order_fill", {})
    assert not audit.path.exists()


def test_run_context_id(tmp_path):
    config = tmp_path / "sim.yaml"
    config.write_text("name: x\nversion: 1\n", encoding="utf-8")

    context = create_run_context(config, "baseline", seed=7)
    prefix, stamp, short_hash, seed = context.run_id.split("-")
    assert prefix == "baseline"
    assert stamp.endswith("Z")
    assert context.config_hash.startswith(short_hash)
    assert seed == "s7"
    assert context.metadata()["seed"] == 7

    explicit = create_run_context(config, "baseline", run_id="manual")
    assert explicit.run_id == "manual"
    assert explicit.seed is None
