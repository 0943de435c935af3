"""
Shared scraping flow for every job board.

A board is described almost entirely by data: its search URL, its origin
for resolving relative links and a SourceSelectors table listing, per field,
the selectors to try in order. Subclasses only override the small hooks
where a board genuinely behaves differently (URL construction, date text).
"""

import asyncio
import logging
import time
import urllib.parse
from dataclasses import dataclass
from typing import Any, List, Optional, Set, Tuple

from playwright.async_api import BrowserContext, Locator, Page

from techjobs.config.settings import settings
from techjobs.core.dates import parse_posted_date
from techjobs.core.extract import extract_attribute, extract_text
from techjobs.core.models import DEFAULT_LOCATION, CanonicalJob, RawJob, Source
from techjobs.core.normalize import normalize
from techjobs.core.retry import with_retry

logger = logging.getLogger(__name__)

# Last-resort discovery when none of a board's container selectors match:
# anything mentioning London that sits inside a block offering an action.
HEURISTIC_LISTING_SELECTORS: Tuple[str, ...] = (
    'div:has-text("London") >> xpath=./ancestor-or-self::div[contains(., "Apply") or contains(., "View")][1]',
)

NO_RESULTS_MARKERS: Tuple[str, ...] = (
    "No results found",
    "No jobs found",
    "0 results",
)

CAPTCHA_SELECTORS: Tuple[str, ...] = (
    'iframe[src*="hcaptcha"]',
    'iframe[src*="recaptcha"]',
    'iframe[src*="challenges.cloudflare.com"]',
    "#px-captcha",
    ".g-recaptcha",
)

BLOCKING_KEYWORDS: Tuple[str, ...] = (
    "verify you are human",
    "verify you're human",
    "security check",
    "access denied",
)

IGNORED_HREF_PREFIXES = ("#", "javascript:", "mailto:", "tel:")

# For each matched element: true when it contains none of the other matches.
INNERMOST_SCRIPT = "els => els.map(el => !els.some(other => other !== el && el.contains(other)))"


@dataclass(frozen=True)
class SourceSelectors:
    """
    Ordered selector candidates per field. Earlier entries are preferred;
    later ones cover older or alternative markup.
    """

    listing_containers: Tuple[str, ...]
    title: Tuple[str, ...]
    company: Tuple[str, ...]
    link: Tuple[str, ...]
    location: Tuple[str, ...] = ()
    description: Tuple[str, ...] = ()
    posted_date: Tuple[str, ...] = ()
    listing_posted_date: Tuple[str, ...] = ()
    heuristic_listings: Tuple[str, ...] = HEURISTIC_LISTING_SELECTORS
    no_results: Tuple[str, ...] = NO_RESULTS_MARKERS


class JobPortalAdapter:
    """
    Base class for all job board adapters.

    run() never raises: listing-level problems skip the listing, anything
    worse ends the run with whatever was gathered and is recorded in
    `failure` for the caller's report.
    """

    SOURCE: Source
    BASE_URL: str
    SEARCH_URL: str
    SELECTORS: SourceSelectors
    MAX_LISTINGS: int = settings.MAX_LISTINGS
    WAIT_UNTIL: str = "domcontentloaded"

    def __init__(self, browser: Any):
        # Anything with an async new_context(); normally a BrowserManager.
        self.browser = browser
        self.failure: Optional[str] = None

    @property
    def name(self) -> str:
        return self.SOURCE.value

    async def run(self) -> List[CanonicalJob]:
        logger.info(f"Starting {self.name} scraper...")
        started = time.monotonic()
        self.failure = None
        jobs: List[CanonicalJob] = []
        context: Optional[BrowserContext] = None

        try:
            context = await self.browser.new_context()
            page = await context.new_page()
            await self.open_search_page(page)

            listings = await self.discover_listings(page)
            logger.info(f"{self.name}: found {len(listings)} potential job listings")

            seen_urls: Set[str] = set()
            for index, listing in enumerate(listings[: self.MAX_LISTINGS]):
                if index:
                    await asyncio.sleep(settings.REQUEST_DELAY)
                job = await self.scrape_listing(context, listing, seen_urls)
                if job is not None:
                    jobs.append(job)

        except Exception as e:
            self.failure = f"{type(e).__name__}: {e}"
            logger.error(f"Error in {self.name} scraper: {e}")
        finally:
            if context is not None:
                try:
                    await context.close()
                except Exception as e:
                    logger.warning(f"Error closing {self.name} browser context: {e}")

        elapsed = time.monotonic() - started
        logger.info(
            f"{self.name} scraper completed in {elapsed:.2f}s. Found {len(jobs)} jobs."
        )
        return jobs

    # --- Search page -------------------------------------------------------

    @with_retry()
    async def open_search_page(self, page: Page) -> None:
        logger.info(f"Navigating to {self.name} search: {self.SEARCH_URL}")
        await page.goto(
            self.SEARCH_URL,
            wait_until=self.WAIT_UNTIL,
            timeout=settings.LISTING_TIMEOUT,
        )

    async def discover_listings(self, page: Page) -> List[Locator]:
        """
        Find listing elements, trying container selectors in priority order
        and then the heuristic fallbacks.
        """
        containers = self.SELECTORS.listing_containers
        try:
            await page.wait_for_selector(
                ", ".join(containers), timeout=settings.SELECTOR_TIMEOUT
            )
        except Exception:
            logger.warning(
                f"{self.name}: no standard listing selector appeared, "
                "looking for any job-related elements"
            )
            await self.capture_snapshot(page)

            if await self.shows_no_results(page):
                logger.info(f"No job listings found on {self.name}.")
                return []
            if await self.detect_bot_challenge(page):
                self.failure = "bot challenge page served"
                return []

        for selector in containers:
            found = await self._locate_all(page, selector)
            if found:
                logger.info(f"{self.name}: found job listings with selector: {selector}")
                return found

        logger.info(f"{self.name}: attempting to locate job listings using content hints")
        for selector in self.SELECTORS.heuristic_listings:
            found = await self._locate_innermost(page, selector)
            if found:
                logger.info(f"{self.name}: heuristic selector matched {len(found)} elements")
                return found

        self.failure = "no listing selectors matched"
        logger.warning(f"{self.name}: {self.failure}")
        return []

    async def _locate_all(self, page: Page, selector: str) -> List[Locator]:
        try:
            return await page.locator(selector).all()
        except Exception as e:
            logger.debug(f"{self.name}: selector '{selector}' failed: {e}")
            return []

    async def _locate_innermost(self, page: Page, selector: str) -> List[Locator]:
        """
        Heuristic selectors also match the wrappers around job cards; keep
        only elements that contain no other match.
        """
        try:
            locator = page.locator(selector)
            innermost = await locator.evaluate_all(INNERMOST_SCRIPT)
            found = await locator.all()
        except Exception as e:
            logger.debug(f"{self.name}: selector '{selector}' failed: {e}")
            return []
        return [element for element, keep in zip(found, innermost) if keep]

    async def shows_no_results(self, page: Page) -> bool:
        try:
            html = (await page.content()).lower()
        except Exception as e:
            logger.debug(f"{self.name}: could not read page content: {e}")
            return False
        return any(marker.lower() in html for marker in self.SELECTORS.no_results)

    async def detect_bot_challenge(self, page: Page) -> bool:
        try:
            for selector in CAPTCHA_SELECTORS:
                if await page.locator(selector).count() > 0:
                    logger.warning(f"{self.name}: CAPTCHA detected ({selector})")
                    return True
            html = (await page.content()).lower()
            if any(keyword in html for keyword in BLOCKING_KEYWORDS):
                logger.warning(f"{self.name}: possible bot challenge page detected")
                return True
        except Exception as e:
            logger.debug(f"{self.name}: error in bot detection: {e}")
        return False

    async def capture_snapshot(self, page: Page) -> None:
        """Save a screenshot of the search page for diagnosing selector drift."""
        try:
            settings.DEBUG_DIR.mkdir(parents=True, exist_ok=True)
            path = settings.DEBUG_DIR / f"{self.name.lower()}-debug.png"
            await page.screenshot(path=str(path), full_page=True)
            logger.info(f"{self.name}: saved diagnostic screenshot to {path}")
        except Exception as e:
            logger.debug(f"{self.name}: could not capture screenshot: {e}")

    # --- Listings ----------------------------------------------------------

    async def scrape_listing(
        self,
        context: BrowserContext,
        listing: Locator,
        seen_urls: Optional[Set[str]] = None,
    ) -> Optional[CanonicalJob]:
        try:
            raw = await self.extract_listing(listing)
        except Exception as e:
            logger.warning(f"Error processing {self.name} job listing: {e}")
            return None

        if not raw.title or not raw.company or not raw.url:
            logger.info(f"{self.name}: skipping listing due to missing essential information")
            return None

        if seen_urls is not None:
            if raw.url in seen_urls:
                logger.info(f"{self.name}: skipping repeated listing {raw.url}")
                return None
            seen_urls.add(raw.url)

        await self.enrich_from_detail(context, raw)

        job = normalize(raw)
        if job is None:
            logger.info(f"{self.name}: listing rejected during normalization ({raw.url})")
        return job

    async def extract_listing(self, listing: Locator) -> RawJob:
        s = self.SELECTORS
        title = await extract_text(listing, s.title)
        company = await extract_text(listing, s.company)
        location = await extract_text(listing, s.location) or DEFAULT_LOCATION
        url = await self.resolve_listing_url(listing)

        return RawJob(
            source=self.SOURCE,
            title=title,
            company=company,
            location=location,
            url=url,
            posted_date=await self.listing_posted_date(listing),
        )

    async def resolve_listing_url(self, listing: Locator) -> str:
        href = await extract_attribute(listing, self.SELECTORS.link, "href")
        if not href:
            # Heuristic discovery can hand back the anchor itself.
            try:
                href = (await listing.get_attribute("href")) or ""
            except Exception as e:
                logger.debug(f"{self.name}: listing has no href: {e}")
        return self.canonical_url(self.absolute_url(href))

    def absolute_url(self, href: str) -> str:
        href = (href or "").strip()
        if not href or href.startswith(IGNORED_HREF_PREFIXES):
            return ""
        return urllib.parse.urljoin(self.BASE_URL + "/", href)

    def canonical_url(self, url: str) -> str:
        """Hook for boards whose links carry per-visit tracking parameters."""
        return url

    async def listing_posted_date(self, listing: Locator):
        selectors = self.SELECTORS.listing_posted_date
        if not selectors:
            return None
        text = await extract_attribute(listing, selectors, "datetime")
        if not text:
            text = await extract_text(listing, selectors)
        return self.parse_posted_date(text)

    # --- Detail page -------------------------------------------------------

    async def enrich_from_detail(self, context: BrowserContext, raw: RawJob) -> None:
        """
        Fill description and posting date from the job's own page. Failure
        keeps the listing; normalization supplies the defaults.
        """
        page: Optional[Page] = None
        try:
            page = await context.new_page()
            await page.goto(
                raw.url, wait_until="domcontentloaded", timeout=settings.DETAIL_TIMEOUT
            )
            raw.description = await extract_text(page, self.SELECTORS.description)

            if raw.posted_date is None:
                date_text = await extract_text(page, self.SELECTORS.posted_date)
                raw.posted_date = self.parse_posted_date(date_text)
        except Exception as e:
            logger.warning(f"Error fetching {self.name} job details page {raw.url}: {e}")
        finally:
            if page is not None:
                try:
                    await page.close()
                except Exception as e:
                    logger.debug(f"{self.name}: error closing details page: {e}")

        if raw.posted_date is None:
            logger.debug(f"{self.name}: no posting date for {raw.url}, using ingestion time")

    def parse_posted_date(self, text: str):
        return parse_posted_date(text)
