"""
Indeed UK adapter.

Card links are click-tracking redirects, so the detail URL is rebuilt from
the job key (data-jk) into the stable /viewjob?jk=<key> form.
"""

import logging

from playwright.async_api import Locator

from techjobs.adapters.base import JobPortalAdapter, SourceSelectors
from techjobs.core.extract import extract_attribute
from techjobs.core.models import Source

logger = logging.getLogger(__name__)

BASE_URL = "https://uk.indeed.com"
SEARCH_URL = (
    "https://uk.indeed.com/jobs?q=technology+internship"
    "&l=London%2C+Greater+London&sc=0kf%3Ajt%28internship%29%3B"
)
VIEW_JOB_URL = f"{BASE_URL}/viewjob?jk={{job_key}}"

MAX_LISTINGS = 15

JOB_KEY_SELECTORS = (
    "a[data-jk]",
    "[data-jk]",
)

SELECTORS = SourceSelectors(
    listing_containers=(
        ".job_seen_beacon",
        "#mosaic-provider-jobcards ul li div.slider_item",
        "#mosaic-provider-jobcards ul li",
    ),
    title=(
        "h2.jobTitle span[title]",
        ".jobTitle a",
        "a.jcs-JobTitle",
    ),
    company=(
        '[data-testid="company-name"]',
        ".companyName",
    ),
    location=(
        '[data-testid="text-location"]',
        ".companyLocation",
    ),
    link=(
        ".jobTitle a",
        "a.jcs-JobTitle",
        "a[data-jk]",
    ),
    description=(
        "#jobDescriptionText",
        'div[class*="jobsearch-JobComponent-description"]',
    ),
    posted_date=(
        ".jobsearch-JobMetadataFooter > div",
        '[data-testid="jobsearch-JobMetadataFooter"] span',
    ),
    listing_posted_date=(
        '[data-testid="myJobsStateDate"]',
        "span.date",
    ),
)


class IndeedAdapter(JobPortalAdapter):
    SOURCE = Source.INDEED
    BASE_URL = BASE_URL
    SEARCH_URL = SEARCH_URL
    SELECTORS = SELECTORS
    MAX_LISTINGS = MAX_LISTINGS

    async def job_key(self, listing: Locator) -> str:
        key = await extract_attribute(listing, JOB_KEY_SELECTORS, "data-jk")
        if key:
            return key
        try:
            key = await listing.get_attribute("data-jk")
            if key:
                return key.strip()
            # Title anchors are also rendered as id="job_<key>"
            # and spans as id="jobTitle-<key>".
            anchor_id = await extract_attribute(
                listing, ('a[id^="job_"]', 'span[id^="jobTitle-"]'), "id"
            )
        except Exception as e:
            logger.debug(f"Indeed: could not read job key: {e}")
            return ""
        for prefix in ("job_", "jobTitle-"):
            if anchor_id.startswith(prefix):
                return anchor_id[len(prefix):]
        return ""

    async def resolve_listing_url(self, listing: Locator) -> str:
        key = await self.job_key(listing)
        if key:
            return VIEW_JOB_URL.format(job_key=key)
        return await super().resolve_listing_url(listing)
