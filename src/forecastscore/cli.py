"""CLI entry point for forecastscore.

Provides commands for operating the scoring engine:
  - recalculate: Rescore every prediction of a forecast
  - set-actual: Record a forecast's outcome and rescore it
  - clear-actual: Remove a forecast's outcome and its prediction metrics
  - migrate: Run database migrations
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from forecastscore.config import AppConfig, load_config
from forecastscore.errors import ForecastNotFoundError, RecalculationError, ValidationError
from forecastscore.orchestrator import MetricsOrchestrator, RecalculationResult
from forecastscore.registry.db import Database
from forecastscore.registry.queries import Registry
from forecastscore.settlement.actuals import ActualValueManager


def setup_logging(verbose: bool = False, level: str = "INFO") -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _database(config: AppConfig) -> Database:
    return Database(
        config.db_dsn,
        min_size=config.db_pool_min_size,
        max_size=config.db_pool_max_size,
    )


def _print_result(result: RecalculationResult) -> None:
    print(f"Forecast: {result.forecast_id} ({result.forecast_type})")
    print(f"  Predictions: {result.total}")
    print(f"  Updated: {result.updated}")
    if result.skipped:
        print(f"  Skipped (unscored type): {result.skipped}")
    if result.invalid:
        print(f"  Invalid: {len(result.invalid)}")
        for prediction_id, reason in result.invalid:
            print(f"    {prediction_id}: {reason}")


def cmd_recalculate(args: argparse.Namespace) -> None:
    """Rescore every prediction of a forecast."""
    config = load_config()

    async def _run() -> RecalculationResult:
        async with _database(config) as db:
            orchestrator = MetricsOrchestrator(Registry(db), config.recalc_concurrency)
            return await orchestrator.recalculate_metrics_for_forecast(args.forecast_id)

    _print_result(asyncio.run(_run()))


def cmd_set_actual(args: argparse.Namespace) -> None:
    """Record a forecast's outcome and rescore its predictions."""
    config = load_config()

    async def _run() -> RecalculationResult:
        async with _database(config) as db:
            registry = Registry(db)
            orchestrator = MetricsOrchestrator(registry, config.recalc_concurrency)
            manager = ActualValueManager(registry, orchestrator)
            return await manager.set_actual_value(args.forecast_id, args.value)

    _print_result(asyncio.run(_run()))


def cmd_clear_actual(args: argparse.Namespace) -> None:
    """Remove a forecast's outcome and its prediction metrics."""
    config = load_config()

    async def _run() -> int:
        async with _database(config) as db:
            registry = Registry(db)
            manager = ActualValueManager(registry, MetricsOrchestrator(registry))
            return await manager.clear_actual_value(args.forecast_id)

    cleared = asyncio.run(_run())
    print(f"Cleared actual value of {args.forecast_id} and metrics of {cleared} predictions.")


def cmd_migrate(args: argparse.Namespace) -> None:
    """Run database migrations."""
    config = load_config()
    migrations_dir = str(Path(__file__).parent / "registry" / "migrations")

    async def _run() -> list[str]:
        async with _database(config) as db:
            return await db.run_migrations(migrations_dir)

    applied = asyncio.run(_run())
    print(f"Migrations complete ({len(applied)} applied).")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="forecastscore",
        description="Prediction scoring engine: accuracy, ROI and financing metrics",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subs = parser.add_subparsers(dest="command", required=True)

    # recalculate
    p_recalc = subs.add_parser("recalculate", help="Rescore every prediction of a forecast")
    p_recalc.add_argument("forecast_id", help="Forecast ID")

    # set-actual
    p_set = subs.add_parser("set-actual", help="Record a forecast outcome and rescore")
    p_set.add_argument("forecast_id", help="Forecast ID")
    p_set.add_argument("value", help="Actual value (true/false/yes/no or a number)")

    # clear-actual
    p_clear = subs.add_parser("clear-actual", help="Remove a forecast outcome and its metrics")
    p_clear.add_argument("forecast_id", help="Forecast ID")

    # migrate
    subs.add_parser("migrate", help="Run database migrations")

    args = parser.parse_args(argv)
    setup_logging(args.verbose, load_config().log_level)

    commands = {
        "recalculate": cmd_recalculate,
        "set-actual": cmd_set_actual,
        "clear-actual": cmd_clear_actual,
        "migrate": cmd_migrate,
    }
    try:
        commands[args.command](args)
    except (ForecastNotFoundError, ValidationError, RecalculationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
