import asyncio
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from techjobs.browser.manager import BrowserManager
from techjobs.config.settings import settings
from techjobs.core.cache import SearchCache
from techjobs.core.coordinator import IngestionCoordinator
from techjobs.core.models import IngestionReport
from techjobs.store.sql import SqlJobStore

logger = logging.getLogger(__name__)

INGESTION_JOB_ID = "ingestion"


def build_coordinator(database_url: Optional[str] = None) -> IngestionCoordinator:
    """
    Wire a coordinator to the configured store, the search cache (when
    enabled) and a fresh browser manager.
    """
    store = SqlJobStore(database_url or settings.DATABASE_URL)
    cache = SearchCache() if settings.CACHE_ENABLED else None
    return IngestionCoordinator(store=store, cache=cache, browser=BrowserManager())


async def bootstrap_if_empty(coordinator: IngestionCoordinator) -> Optional[IngestionReport]:
    """
    Run ingestion once if the store holds no jobs yet. Returns the run's
    report, or None when nothing was run.
    """
    try:
        coordinator.store.connect()
        job_count = coordinator.store.count()
    except Exception as e:
        logger.error(f"Bootstrap check failed: {e}")
        return None

    if job_count:
        logger.info(f"Store already holds {job_count} jobs; skipping initial scrape.")
        return None

    logger.info("No jobs found in database. Running initial scrape...")
    report = await coordinator.run_ingestion()

    try:
        logger.info(f"Initial scrape completed. Jobs in database: {coordinator.store.count()}")
    except Exception as e:
        logger.error(f"Could not count jobs after initial scrape: {e}")
    return report


async def scheduled_ingestion(coordinator: IngestionCoordinator) -> None:
    logger.info("Running scheduled job scraping...")
    report = await coordinator.run_ingestion()
    if report.error:
        logger.error(f"Scheduled scrape ended in {report.state}: {report.error}")


def create_scheduler(
    coordinator: IngestionCoordinator,
    cron_schedule: Optional[str] = None,
    timezone: Optional[str] = None,
) -> AsyncIOScheduler:
    """
    Build (without starting) a scheduler that runs ingestion on a crontab
    expression. Missed or overlapping fires collapse into a single run.
    """
    cron_schedule = cron_schedule or settings.CRON_SCHEDULE
    timezone = timezone or settings.TIMEZONE_ID

    scheduler = AsyncIOScheduler(timezone=timezone)
    scheduler.add_job(
        scheduled_ingestion,
        CronTrigger.from_crontab(cron_schedule, timezone=timezone),
        args=[coordinator],
        id=INGESTION_JOB_ID,
        name="job scraping",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    logger.info(f"Scheduled job scraping with cron '{cron_schedule}' ({timezone})")
    return scheduler


async def run_scheduled(
    coordinator: IngestionCoordinator,
    cron_schedule: Optional[str] = None,
) -> None:
    """Run ingestion on the cron schedule until cancelled."""
    scheduler = create_scheduler(coordinator, cron_schedule)
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped.")
