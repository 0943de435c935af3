"""
LinkedIn adapter for the public (logged-out) jobs search.

Result cards carry a <time datetime="..."> element, which is preferred over
the relative "2 weeks ago" text on the detail page.
"""

import urllib.parse

from techjobs.adapters.base import JobPortalAdapter, SourceSelectors
from techjobs.core.models import Source

BASE_URL = "https://www.linkedin.com"
SEARCH_URL = (
    "https://www.linkedin.com/jobs/search/?keywords=internship%20technology"
    "&location=London%2C%20England%2C%20United%20Kingdom&f_TPR=&f_JT=I"
)

# LinkedIn is the quickest to rate-limit logged-out traffic.
MAX_LISTINGS = 10

SELECTORS = SourceSelectors(
    listing_containers=(
        ".jobs-search__results-list > li",
        "div.base-search-card",
        "div.job-search-card",
    ),
    title=(
        ".base-search-card__title",
        "h3",
    ),
    company=(
        ".base-search-card__subtitle",
        "h4 a",
        "h4",
    ),
    location=(
        ".job-search-card__location",
        ".base-search-card__metadata span",
    ),
    link=(
        "a.base-card__full-link",
        'a[href*="/jobs/view/"]',
    ),
    description=(
        ".description__text",
        ".show-more-less-html__markup",
        'div[class*="description"]',
    ),
    posted_date=(
        ".posted-time-ago__text",
        "span.posted-time-ago__text",
    ),
    listing_posted_date=(
        "time.job-search-card__listdate",
        "time.job-search-card__listdate--new",
        "time",
    ),
)


class LinkedInAdapter(JobPortalAdapter):
    SOURCE = Source.LINKEDIN
    BASE_URL = BASE_URL
    SEARCH_URL = SEARCH_URL
    SELECTORS = SELECTORS
    MAX_LISTINGS = MAX_LISTINGS

    def canonical_url(self, url: str) -> str:
        # Card links carry refId/trackingId parameters that change per visit,
        # which would defeat URL deduplication.
        if not url:
            return url
        parsed = urllib.parse.urlparse(url)
        return urllib.parse.urlunparse(parsed._replace(query="", fragment=""))
