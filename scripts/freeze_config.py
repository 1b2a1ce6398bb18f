from __future__ import annotations

import argparse
from pathlib import Path

from tradesim.config import compute_config_hash, freeze_config, load_config, verify_config_lock


def main() -> None:
    parser = argparse.ArgumentParser(description="Pin a simulator config to its SHA-256 hash")
    parser.add_argument("config")
    parser.add_argument("--lock", default=None, help="Lock file path (default: <config>.lock.json)")
    parser.add_argument("--check", action="store_true", help="Verify an existing lock instead of writing one")
    args = parser.parse_args()

    path = Path(args.config)
    try:
        config = load_config(path)
    except ValueError as exc:
        raise SystemExit(f"Invalid config {path}: {exc}") from exc

    label = f"{config.name} v{config.version}"
    if args.check:
        if not verify_config_lock(path, args.lock):
            raise SystemExit(f"{label}: lock missing or stale for {path}")
        print(f"{label}: lock ok ({compute_config_hash(path)[:12]})")
        return

    lock_path = freeze_config(path, args.lock)
    print(f"{label}: frozen {path} -> {lock_path} ({compute_config_hash(path)[:12]})")


if __name__ == "__main__":
    main()
