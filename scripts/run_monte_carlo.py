from __future__ import annotations

import argparse
import json
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from tradesim.config import load_config, validate_parameters
from tradesim.monitoring import AuditLog
from tradesim.report import SimulationReport, assess_gate
from tradesim.runtime import create_run_context
from tradesim.simulator import run_monte_carlo


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a Monte Carlo trading simulation")
    parser.add_argument("--config", required=True)
    parser.add_argument("--output", required=True)
    parser.add_argument("--runs", type=int, default=None, help="Override simulation_runs")
    parser.add_argument("--seed", type=int, default=None, help="Override run.seed")
    parser.add_argument("--workers", type=int, default=None, help="Override run.workers")
    parser.add_argument("--min-survival", type=float, default=None, help="Fail below this survival rate (0-1)")
    parser.add_argument("--skip-months", action="store_true", help="Omit monthly scenario data from the report")
    args = parser.parse_args()

    config_path = Path(args.config)
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        config = load_config(config_path)
        params = config.parameters
        if args.runs is not None:
            params = replace(params, simulation_runs=args.runs)
            validate_parameters(params)
    except ValueError as exc:
        raise SystemExit(f"Config error: {exc}") from exc

    seed = args.seed if args.seed is not None else config.run.seed
    workers = args.workers if args.workers is not None else config.run.workers
    min_survival = args.min_survival if args.min_survival is not None else config.gate.min_survival_rate
    if workers < 1:
        raise SystemExit("--workers must be at least 1")
    if not 0 <= min_survival <= 1:
        raise SystemExit("--min-survival must be in [0, 1]")

    context = create_run_context(config_path, config.run_id_prefix, seed=seed)
    audit = AuditLog(Path(config.monitoring.audit_log_path), run_id=context.run_id, config_hash=context.config_hash)
    audit.log("run_start", {"config": str(config_path), "runs": params.simulation_runs, "workers": workers})

    print(f"Simulating {params.simulation_runs:,} possible futures...")
    results = run_monte_carlo(params, params.simulation_runs, seed=seed, workers=workers)
    report = SimulationReport.build(params, results)
    summary = report.summary
    audit.log(
        "simulation_complete",
        {
            "total_runs": summary.total_runs,
            "survival_rate": summary.survival_rate,
            "ruin_rate": summary.ruin_rate,
            "average_final_balance": summary.average_final_balance,
        },
    )

    gate = assess_gate(summary, min_survival, config.gate.max_ruin_rate)
    audit.log("gate", {"meets_threshold": gate.meets_threshold, "survival_rate": gate.survival_rate})

    payload = {
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        "run": context.metadata(),
        "gate": {
            "min_survival_rate": gate.min_survival_rate,
            "max_ruin_rate": gate.max_ruin_rate,
            "meets_threshold": gate.meets_threshold,
        },
        **report.to_dict(include_months=not args.skip_months),
    }
    output_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    audit.log("report_written", {"output": str(output_path)})
    logged = sum(1 for _ in audit.events(context.run_id))

    print(f"Survival rate: {summary.survival_rate * 100:.2f}%  Ruin rate: {summary.ruin_rate * 100:.2f}%")
    print(f"Wrote {output_path}")
    print(f"Audit: {logged} events for {context.run_id} in {audit.path}")
    if not gate.meets_threshold:
        raise SystemExit("Gate failed")


if __name__ == "__main__":
    main()
