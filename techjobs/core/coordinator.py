"""
Ingestion coordinator: runs every job board adapter concurrently, persists
the first sighting of each URL and invalidates cached search results.

One run moves through

    IDLE -> CONNECTING_STORE -> SCRAPING -> PERSISTING -> CACHE_INVALIDATING -> IDLE

and ends in FAILED only when the store can't be reached (or something
unexpected escapes a stage). run_ingestion() never raises.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Any, List, Optional, Sequence

from techjobs.adapters.registry import ADAPTERS
from techjobs.browser.manager import BrowserManager
from techjobs.config.settings import settings
from techjobs.core.cache import SearchCache
from techjobs.core.models import IngestionReport, SourceOutcome
from techjobs.core.normalize import normalize
from techjobs.store.base import DuplicateKeyError, JobStore

logger = logging.getLogger(__name__)


class IngestionState(str, Enum):
    IDLE = "IDLE"
    CONNECTING_STORE = "CONNECTING_STORE"
    SCRAPING = "SCRAPING"
    PERSISTING = "PERSISTING"
    CACHE_INVALIDATING = "CACHE_INVALIDATING"
    FAILED = "FAILED"


class IngestionCoordinator:
    """
    Orchestrates one ingestion run across all sources.

    `adapters` overrides the registry (each needs SOURCE and an async run());
    otherwise one adapter per registered board is built on `browser`.
    """

    def __init__(
        self,
        store: JobStore,
        cache: Optional[SearchCache] = None,
        adapters: Optional[Sequence[Any]] = None,
        browser: Optional[BrowserManager] = None,
    ):
        self.store = store
        self.cache = cache
        self.browser = browser
        self._adapters = list(adapters) if adapters is not None else None
        self.state = IngestionState.IDLE
        self._running = asyncio.Lock()

    def _transition(self, state: IngestionState) -> None:
        logger.debug(f"Ingestion state: {self.state.value} -> {state.value}")
        self.state = state

    def build_adapters(self) -> List[Any]:
        if self._adapters is not None:
            return list(self._adapters)
        if self.browser is None:
            self.browser = BrowserManager()
        return [adapter_cls(self.browser) for adapter_cls in ADAPTERS.values()]

    async def run_ingestion(self) -> IngestionReport:
        if self._running.locked():
            logger.warning("Ingestion already in progress; skipping this trigger.")
            return IngestionReport(state=self.state.value, error="ingestion already in progress")

        async with self._running:
            return await self._run()

    async def _run(self) -> IngestionReport:
        logger.info("Starting job scraping...")
        report = IngestionReport()
        started = time.monotonic()

        try:
            self._transition(IngestionState.CONNECTING_STORE)
            self.store.connect()

            self._transition(IngestionState.SCRAPING)
            report.outcomes = await self.scrape_all()
            report.failed_sources = sum(1 for outcome in report.outcomes if not outcome.ok)

            self._transition(IngestionState.PERSISTING)
            report.inserted_count = self.persist(report.outcomes)

            self._transition(IngestionState.CACHE_INVALIDATING)
            self.invalidate_cache()

            self._transition(IngestionState.IDLE)
            logger.info(
                f"Scraping completed in {time.monotonic() - started:.2f}s. "
                f"Added {report.inserted_count} new jobs. "
                f"Failed scrapers: {report.failed_sources}"
            )
        except Exception as e:
            self._transition(IngestionState.FAILED)
            report.error = f"{type(e).__name__}: {e}"
            logger.error(f"Error during job scraping: {e}")

        report.state = self.state.value
        return report

    # --- SCRAPING ----------------------------------------------------------

    async def scrape_all(self) -> List[SourceOutcome]:
        """
        Run every adapter concurrently and wait for all of them to settle.
        One adapter's failure never cancels or hides another's results.
        """
        adapters = self.build_adapters()
        try:
            results = await asyncio.gather(
                *(self._run_adapter(adapter) for adapter in adapters),
                return_exceptions=True,
            )
        finally:
            if self.browser is not None:
                await self.browser.close()

        outcomes: List[SourceOutcome] = []
        for adapter, result in zip(adapters, results):
            if isinstance(result, BaseException):
                logger.error(f"Scraper {adapter.SOURCE.value} failed: {result!r}")
                outcomes.append(SourceOutcome(source=adapter.SOURCE, error=repr(result)))
            else:
                outcomes.append(result)
        return outcomes

    async def _run_adapter(self, adapter: Any) -> SourceOutcome:
        started = time.monotonic()
        try:
            jobs = await adapter.run()
        except Exception as e:
            elapsed = time.monotonic() - started
            logger.error(f"Error in {adapter.SOURCE.value} scraper after {elapsed:.2f}s: {e}")
            return SourceOutcome(
                source=adapter.SOURCE,
                error=f"{type(e).__name__}: {e}",
                elapsed=elapsed,
            )

        elapsed = time.monotonic() - started
        return SourceOutcome(
            source=adapter.SOURCE,
            jobs=list(jobs or []),
            error=getattr(adapter, "failure", None),
            elapsed=elapsed,
        )

    # --- PERSISTING --------------------------------------------------------

    def persist(self, outcomes: Sequence[SourceOutcome]) -> int:
        """
        Insert every job whose URL isn't stored yet. Existing records are
        never touched: the first sighting of a URL wins.
        """
        inserted = 0
        for outcome in outcomes:
            for job in outcome.jobs:
                canonical = normalize(job)
                if canonical is None:
                    continue
                try:
                    if self.store.find_by_url(canonical.url) is not None:
                        continue
                    self.store.insert(canonical)
                    inserted += 1
                except DuplicateKeyError:
                    logger.debug(f"Job inserted concurrently, skipping: {canonical.url}")
                except Exception as e:
                    logger.error(f"Error saving job: {canonical.title} ({canonical.url}): {e}")
        return inserted

    # --- CACHE_INVALIDATING ------------------------------------------------

    def invalidate_cache(self) -> None:
        if self.cache is None:
            logger.debug("No search cache configured; skipping invalidation.")
            return
        try:
            cleared = self.cache.invalidate_all(settings.CACHE_PREFIX)
            logger.info(f"Cache cleared successfully ({cleared} entries).")
        except Exception as e:
            logger.error(f"Failed to clear cache: {e}")
