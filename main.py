import argparse
import asyncio
import logging
import sys

from techjobs.config.settings import settings
from techjobs.core.runner import bootstrap_if_empty, build_coordinator, run_scheduled

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape London tech internships into the job store."
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="once",
        choices=["once", "bootstrap", "schedule"],
        help="once: single run; bootstrap: run only if the store is empty; "
        "schedule: bootstrap, then run on the --cron schedule",
    )
    parser.add_argument(
        "--cron",
        default=settings.CRON_SCHEDULE,
        help="crontab expression for scheduled runs (default: %(default)s)",
    )
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    """
    Main entry point.
    """
    args = parse_args(argv)
    coordinator = build_coordinator()

    try:
        if args.command == "bootstrap":
            await bootstrap_if_empty(coordinator)
        elif args.command == "schedule":
            await bootstrap_if_empty(coordinator)
            await run_scheduled(coordinator, args.cron)
        else:
            report = await coordinator.run_ingestion()
            for outcome in report.outcomes:
                status = "ok" if outcome.ok else f"failed ({outcome.error})"
                print(f"{outcome.source.value}: {len(outcome.jobs)} jobs in {outcome.elapsed:.1f}s, {status}")
            print(f"Inserted {report.inserted_count} new jobs; state {report.state}")
            return 0 if report.error is None else 1
    finally:
        coordinator.store.close()
    return 0


def cli():
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    cli()
