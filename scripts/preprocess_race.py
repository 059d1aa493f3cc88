"""
Preprocess Endurance Timing CSV Exports into Race History JSON

Reads one timing export (or every export in a directory), ranks the field lap
by lap, builds the race timeline and writes one JSON document per export next
to it.

USAGE:
    python scripts/preprocess_race.py data/imola_6h.csv
    python scripts/preprocess_race.py data/ --config config/local.yaml
    python scripts/preprocess_race.py data/spa_6h.csv --output out/spa.json
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from racehistory.pipelines.preprocess import collect_inputs, process_batch
from racehistory.utils import config_loader
from racehistory.utils.config_loader import CONFIG_ENV_VAR

logger = logging.getLogger("preprocess_race")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Preprocess endurance timing CSV exports into race history JSON"
    )
    parser.add_argument("input", type=Path, help="CSV export or directory of exports")
    parser.add_argument(
        "-o", "--output", type=Path, default=None, help="Output JSON file (single input only)"
    )
    parser.add_argument(
        "--config", type=str, default=None, help=f"Config file (overrides ${CONFIG_ENV_VAR})"
    )
    parser.add_argument(
        "--no-validate", action="store_true", help="Skip JSON schema validation of the output"
    )
    parser.add_argument("--progress", action="store_true", help="Show a progress bar")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        if args.config:
            os.environ[CONFIG_ENV_VAR] = args.config
            config_loader.reload()
        log_config = config_loader.get_section("logging")
    except (FileNotFoundError, ValueError) as e:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
        logger.error(f"Invalid configuration: {e}")
        return 2

    logging.basicConfig(
        level=getattr(logging, log_config.get("level", "INFO")),
        format=log_config.get("format", "%(levelname)s: %(message)s"),
    )

    csv_config = config_loader.get_section("csv")
    output_config = config_loader.get_section("output")

    inputs = collect_inputs(args.input, config_loader.get("batch.pattern", "*.csv"))
    if not inputs:
        logger.error(f"No CSV exports found in {args.input}")
        return 1

    try:
        report = process_batch(
            inputs,
            output_path=args.output,
            show_progress=args.progress,
            event_names=config_loader.get("events", {}),
            delimiter=csv_config.get("delimiter", ";"),
            encoding=csv_config.get("encoding", "utf-8"),
            validate=output_config.get("validate_schema", True) and not args.no_validate,
            create_backup=output_config.get("create_backup", False),
            indent=output_config.get("indent", 2),
        )
    except ValueError as e:
        logger.error(str(e))
        return 2

    for path, message in report.failed.items():
        logger.error(f"✗ {path}: {message}")

    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
