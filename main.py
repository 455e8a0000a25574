#!/usr/bin/env python3
"""
Tennis Lessons CLI.

Usage:
    python main.py acquire --source all
    python main.py eda
    python main.py model
    python main.py audit
"""

import sys
import logging
import argparse
from pathlib import Path

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("tennis_lessons")

SOURCES = ["atp", "slam_pbp"]


def cmd_acquire(args):
    from tennis_lessons.orchestration.config import load_config
    from tennis_lessons.ingestion.base import clone_git_repo

    cfg = load_config(args.config)
    sources = [args.source] if args.source != "all" else SOURCES
    for src in sources:
        c = cfg["data_acquisition"][src]
        clone_git_repo(c["repo_url"], c["clone_dir"])


def cmd_eda(args):
    from tennis_lessons.orchestration.pipeline import run_eda

    result = run_eda(args.config)
    if "error" in result:
        log.error(f"EDA lesson stopped: {result['error']}")
        sys.exit(1)
    log.info(f"EDA report: {result['report_path']}")


def cmd_model(args):
    from tennis_lessons.orchestration.pipeline import run_modelling

    result = run_modelling(args.config)
    if "error" in result:
        log.error(f"Modelling lesson stopped: {result['error']}")
        sys.exit(1)
    log.info(f"Best model: {result['best_model']}")
    log.info(f"Modelling report: {result['report_path']}")


def cmd_audit(args):
    from tennis_lessons.orchestration.config import load_config
    cfg = load_config(args.config)

    for name, key, pattern in [
        ("Match data", "atp", "*_matches_*.csv"),
        ("Slam PBP", "slam_pbp", "*-points.csv"),
    ]:
        d = Path(cfg["data_acquisition"][key]["clone_dir"])
        if d.exists():
            csvs = list(d.rglob(pattern))
            sz = sum(f.stat().st_size for f in csvs) / (1024 * 1024)
            log.info(f"{name}: {len(csvs)} CSVs, {sz:.1f} MB")
        else:
            log.info(f"{name}: NOT DOWNLOADED")


def main():
    p = argparse.ArgumentParser(description="Tennis Lessons CLI")
    p.add_argument("--config", default="configs/default.yaml")
    sub = p.add_subparsers(dest="command")

    acq = sub.add_parser("acquire")
    acq.add_argument("--source", choices=[*SOURCES, "all"], default="all")

    sub.add_parser("eda")
    sub.add_parser("model")
    sub.add_parser("audit")

    args = p.parse_args()
    if args.command == "acquire":
        cmd_acquire(args)
    elif args.command == "eda":
        cmd_eda(args)
    elif args.command == "model":
        cmd_model(args)
    elif args.command == "audit":
        cmd_audit(args)
    else:
        p.print_help()


if __name__ == "__main__":
    main()
