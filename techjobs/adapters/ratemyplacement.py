"""
RateMyPlacement adapter. Dates are absolute ("3rd March 2024").
"""

from techjobs.adapters.base import JobPortalAdapter, SourceSelectors
from techjobs.core.models import Source

BASE_URL = "https://www.ratemyplacement.co.uk"
SEARCH_URL = (
    "https://www.ratemyplacement.co.uk/search?show=jobs&location=london"
    "&seo=internships&type=internship&industry=it-technology"
)

SELECTORS = SourceSelectors(
    listing_containers=(
        ".search-result",
        '[data-testid="search-result"]',
        "article.job",
    ),
    title=(
        ".search-result__title",
        "h2",
        "h3",
    ),
    company=(
        ".search-result__company-name",
        ".company-name",
    ),
    location=(
        ".search-result__location",
        ".location",
    ),
    link=(
        "a.search-result__title",
        "h2 a",
        "a",
    ),
    description=(
        ".job-description",
        ".vacancy-description",
        '[class*="description"]',
    ),
    posted_date=(
        ".job-info__date",
        ".posted-date",
    ),
)


class RateMyPlacementAdapter(JobPortalAdapter):
    SOURCE = Source.RATE_MY_PLACEMENT
    BASE_URL = BASE_URL
    SEARCH_URL = SEARCH_URL
    SELECTORS = SELECTORS
