"""
Command-line interface for the order cleaning pipeline.

Usage:
    python -m order_etl.cli.batch_cli <command> [options]
"""

import argparse
import json
import os
import sys

from dotenv import load_dotenv

from order_etl.batch import OrderCleaningPipeline, sample_raw_orders
from order_etl.core.rules import PolicyConfigError
from order_etl.observability.logger import get_logger
from order_etl.observability.metrics import start_metrics_server
from order_etl.warehouse.memory_store import InMemoryCanonicalOrderStore, InMemoryRawOrderStore

logger = get_logger(__name__)

DEFAULT_POLICY_PATH = "config/cleaning_policy.yaml"


def _pool_from_args(args):
    """Build a connection pool from CLI arguments (DB_* env vars fill the gaps)."""
    from order_etl.warehouse.connection import DatabaseConnectionPool

    return DatabaseConnectionPool(
        host=args.db_host,
        port=args.db_port,
        database=args.db_name,
        user=args.db_user,
        password=args.db_password
    )


def init_db_command(args) -> int:
    """
    Create the order tables, optionally seeding sample raw orders.

    Args:
        args: Command-line arguments
    """
    from order_etl.warehouse.schema_mgmt import SchemaManager

    try:
        with _pool_from_args(args) as pool:
            manager = SchemaManager(pool)
            if args.drop:
                logger.info("Dropping existing order tables...")
                manager.drop_tables()
            manager.create_tables()
            if args.seed:
                manager.seed_sample_orders()
        return 0
    except Exception as e:
        logger.error(f"Error initializing database: {e}", exc_info=True)
        return 1


def run_command(args) -> int:
    """
    Clean the raw order table into the canonical order table.

    Args:
        args: Command-line arguments
    """
    from order_etl.warehouse.postgres_store import (
        PostgresCanonicalOrderStore,
        PostgresRawOrderStore,
    )

    if args.metrics_port or os.getenv("METRICS_PORT"):
        start_metrics_server(args.metrics_port)

    try:
        pipeline = OrderCleaningPipeline(policy_path=args.policy)
        with _pool_from_args(args) as pool:
            outcome = pipeline.process(
                raw_store=PostgresRawOrderStore(pool),
                canonical_store=PostgresCanonicalOrderStore(pool),
                delete_discarded=args.delete_duplicates,
                dry_run=args.dry_run
            )

        logger.info("=" * 60)
        logger.info("PROCESSING COMPLETE")
        logger.info("=" * 60)
        logger.info(f"Total raw orders: {outcome['total_records']}")
        logger.info(f"Accepted (canonical): {outcome['accepted_records']}")
        logger.info(f"Rejected: {outcome['rejected_records']}")
        logger.info(f"Duplicates discarded: {outcome['duplicate_records']}")
        logger.info(f"Written to clean_data: {outcome['written_records']}")
        if args.delete_duplicates:
            logger.info(f"Raw duplicates deleted: {outcome['deleted_duplicates']}")
        logger.info("=" * 60)

        for rejected in outcome["result"].rejected:
            logger.info(
                f"Rejected order {rejected.order_id}: {'; '.join(rejected.error_messages)}"
            )

        if args.dry_run:
            logger.info("DRY RUN: No data was written to the database")
        return 0
    except Exception as e:
        logger.error(f"Error during batch processing: {e}", exc_info=True)
        return 1


def demo_command(args) -> int:
    """
    Run the sample orders through in-memory stores and print the result as JSON.

    Args:
        args: Command-line arguments
    """
    try:
        pipeline = OrderCleaningPipeline(policy_path=args.policy)
        canonical_store = InMemoryCanonicalOrderStore()
        outcome = pipeline.process(InMemoryRawOrderStore(sample_raw_orders()), canonical_store)
    except PolicyConfigError as e:
        logger.error(f"Invalid cleaning policy: {e}")
        return 1
    result = outcome["result"]

    print(json.dumps(
        {
            "summary": result.summary(),
            "accepted": [r.model_dump(mode="json") for r in canonical_store.scan_all()],
            "rejected": [r.model_dump(mode="json") for r in result.rejected],
            "discarded": [d.model_dump(mode="json") for d in result.discarded],
        },
        indent=2
    ))
    return 0


def _add_db_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--db-host", default=None, help="Database host (default: $DB_HOST or localhost)")
    parser.add_argument("--db-port", type=int, default=None, help="Database port (default: $DB_PORT or 5432)")
    parser.add_argument("--db-name", default=None, help="Database name (default: $DB_NAME or orders)")
    parser.add_argument("--db-user", default=None, help="Database user (default: $DB_USER or etl)")
    parser.add_argument("--db-password", default=None, help="Database password (default: $DB_PASSWORD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Order cleaning pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create tables and load the sample raw orders
  python -m order_etl.cli.batch_cli init-db --seed

  # Clean messy_data into clean_data, deleting raw duplicates
  python -m order_etl.cli.batch_cli run --delete-duplicates

  # Report what would be cleaned without writing
  python -m order_etl.cli.batch_cli run --dry-run

  # Run the sample orders in memory
  python -m order_etl.cli.batch_cli demo
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser("init-db", help="Create the order tables")
    init_parser.add_argument("--seed", action="store_true", help="Load sample raw orders")
    init_parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    _add_db_arguments(init_parser)

    run_parser = subparsers.add_parser("run", help="Clean raw orders into the canonical table")
    run_parser.add_argument(
        "--policy",
        default=DEFAULT_POLICY_PATH,
        help=f"Path to cleaning policy YAML file (default: {DEFAULT_POLICY_PATH})"
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Clean and report without writing to the database"
    )
    run_parser.add_argument(
        "--delete-duplicates",
        action="store_true",
        help="Delete discarded duplicates from the raw table"
    )
    run_parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Expose Prometheus metrics on this port (default: $METRICS_PORT, off if unset)"
    )
    _add_db_arguments(run_parser)

    demo_parser = subparsers.add_parser("demo", help="Clean the sample orders in memory")
    demo_parser.add_argument(
        "--policy",
        default=DEFAULT_POLICY_PATH,
        help=f"Path to cleaning policy YAML file (default: {DEFAULT_POLICY_PATH})"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "init-db": init_db_command,
        "run": run_command,
        "demo": demo_command,
    }
    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
