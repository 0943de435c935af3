"""
Bright Network adapter.

The search page renders client-side, so navigation waits for the network to
go idle. Cards rarely carry a posting date; most records fall back to
ingestion time.
"""

from techjobs.adapters.base import (
    HEURISTIC_LISTING_SELECTORS,
    JobPortalAdapter,
    SourceSelectors,
)
from techjobs.core.models import Source

BASE_URL = "https://www.brightnetwork.co.uk"
SEARCH_URL = (
    "https://www.brightnetwork.co.uk/search/?content_type=vacancy"
    "&vacancy_type=internship&location=london"
    "&industry=technology-it-software-development"
)

SELECTORS = SourceSelectors(
    listing_containers=(
        ".vacancy-item",
        ".job-card",
        ".internship-item",
        "article.job-listing",
        '[data-testid="job-card"]',
    ),
    title=(
        ".vacancy-item__title",
        "h2",
        ".job-title",
        'a:has-text("intern")',
    ),
    company=(
        ".vacancy-item__company",
        ".company-name",
        ".employer",
    ),
    location=(
        ".vacancy-item__location",
        ".location",
        '[data-testid="location"]',
    ),
    link=(
        "a.vacancy-item__title",
        "a.job-link",
        'a:has-text("View")',
        "a",
    ),
    description=(
        ".vacancy__description",
        ".job-description",
        '[data-testid="description"]',
        'div[class*="description"]',
        'section:has-text("Description")',
    ),
    posted_date=(
        ".vacancy__posted-date",
        '[data-testid="posted-date"]',
    ),
    heuristic_listings=('a:has-text("internship")',) + HEURISTIC_LISTING_SELECTORS,
)


class BrightNetworkAdapter(JobPortalAdapter):
    SOURCE = Source.BRIGHT_NETWORK
    BASE_URL = BASE_URL
    SEARCH_URL = SEARCH_URL
    SELECTORS = SELECTORS
    WAIT_UNTIL = "networkidle"
