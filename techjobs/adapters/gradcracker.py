"""
Gradcracker adapter. Detail pages print an absolute date such as
"Posted: 15th April 2023".
"""

from techjobs.adapters.base import JobPortalAdapter, SourceSelectors
from techjobs.core.models import Source

BASE_URL = "https://www.gradcracker.com"
SEARCH_URL = (
    "https://www.gradcracker.com/search/computing-technology-jobs/"
    "internships-placements/london"
)

SELECTORS = SourceSelectors(
    listing_containers=(
        ".job-result",
        "article.job",
        '[data-testid="job-result"]',
    ),
    title=(
        ".job-result-title",
        "h2 a",
        "h2",
    ),
    company=(
        ".job-result-company-name",
        ".company-name",
        ".employer-name",
    ),
    location=(
        ".job-result-location",
        ".location",
    ),
    link=(
        "a.job-result-title",
        "h2 a",
        "a[href*='/hub/']",
        "a",
    ),
    description=(
        ".job-description",
        ".job-content",
        "article .content",
    ),
    posted_date=(
        ".job-posted-date",
        ".posted-date",
    ),
)


class GradcrackerAdapter(JobPortalAdapter):
    SOURCE = Source.GRADCRACKER
    BASE_URL = BASE_URL
    SEARCH_URL = SEARCH_URL
    SELECTORS = SELECTORS
