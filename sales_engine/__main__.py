"""
Command Line Entry Point

Runs the engine over generated sample sources and prints the validator report.
Usage:
    python -m sales_engine
    python -m sales_engine --seed 7 --orders 200 --json
    python -m sales_engine --output data/generated
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from sales_engine.config import configure_logging
from sales_engine.data import generate_sources
from sales_engine.pipeline import PipelineResult, SourceBatch, run_pipeline
from sales_engine.quality import ValidationStatus

logger = structlog.get_logger(__name__)


def build_batches(sources: dict) -> List[SourceBatch]:
    """Map generated source names to their schemas"""
    return [
        SourceBatch("sales", sources["sales_q1"], name="sales_q1"),
        SourceBatch("sales", sources["sales_q2"], name="sales_q2"),
        SourceBatch("products", sources["products"]),
        SourceBatch("customers", sources["customers"]),
        SourceBatch("returns", sources["returns"]),
        SourceBatch("shipping", sources["shipping"]),
        SourceBatch("fees", sources["fees"]),
        SourceBatch("targets", sources["targets"]),
    ]


def write_tables(result: PipelineResult, output_dir: Path) -> None:
    """Write every canonical table and the fact table as CSV"""
    output_dir.mkdir(parents=True, exist_ok=True)
    for entity, df in result.tables.items():
        df.write_csv(output_dir / f"{entity}.csv")
    result.fact_sales.write_csv(output_dir / "fact_sales.csv")
    logger.info("Tables written", output_dir=str(output_dir), tables=len(result.tables) + 1)


def print_report(result: PipelineResult) -> None:
    print(f"{'check':<48} {'status':<6} violations")
    for entry in result.report():
        print(f"{entry['check_name']:<48} {entry['status']:<6} {entry['violation_count']}")
    print(
        f"\n{result.validation.status.value.upper()}: "
        f"{result.validation.passed_checks}/{result.validation.total_checks} checks passed, "
        f"{result.invalid_rows} invalid rows, {result.fact_sales.height} fact rows"
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Sales Integration Engine")
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for the sample sources (default: 42)"
    )
    parser.add_argument(
        "--orders",
        type=int,
        default=60,
        help="Orders per quarterly export (default: 60)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory to write the resulting tables to as CSV"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the validator report as JSON"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL"
    )

    args = parser.parse_args(argv)
    configure_logging(log_level=args.log_level)

    sources = generate_sources(seed=args.seed, orders_per_quarter=args.orders)
    result = run_pipeline(build_batches(sources))

    if args.output:
        write_tables(result, args.output)

    if args.json:
        print(json.dumps(result.report(), indent=2))
    else:
        print_report(result)

    return 1 if result.validation.status == ValidationStatus.FAILED else 0


if __name__ == "__main__":
    sys.exit(main())
