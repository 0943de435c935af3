"""
Normalization and validation of scraped listings into CanonicalJob records.
"""

import logging
import urllib.parse
from datetime import datetime, timezone
from typing import Any, Optional

from techjobs.core.models import (
    DEFAULT_LOCATION,
    DESCRIPTION_SENTINEL,
    CanonicalJob,
    Source,
)

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> str:
    return value.strip() if value else ""


def is_absolute_url(url: str) -> bool:
    parsed = urllib.parse.urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def normalize_location(location: Optional[str]) -> str:
    """
    Collapse any location mentioning London to "London"; anything else is
    qualified as "<location>, London". Blank locations become "London".
    """
    text = _clean(location)
    if not text or "london" in text.lower():
        return DEFAULT_LOCATION
    return f"{text}, {DEFAULT_LOCATION}"


def normalize(raw: Any, now: Optional[datetime] = None) -> Optional[CanonicalJob]:
    """
    Shape a RawJob (or an already-canonical job) into a CanonicalJob.
    Returns None when title, company or an absolute url is missing.
    """
    title = _clean(raw.title)
    company = _clean(raw.company)
    url = _clean(raw.url)

    if not title or not company or not url:
        logger.debug(
            f"Rejected listing from {raw.source}: missing title/company/url "
            f"(title={title!r}, company={company!r}, url={url!r})"
        )
        return None

    if not is_absolute_url(url):
        logger.debug(f"Rejected listing from {raw.source}: relative url {url!r}")
        return None

    posted_date = raw.posted_date
    if posted_date is None:
        # Recency is unknown; ingestion time stands in for the posting date.
        posted_date = now or datetime.now(timezone.utc)

    # A canonical record already carries a normalized location; collapsing
    # "Reading, London" a second time would turn it into "London".
    if isinstance(raw, CanonicalJob):
        location = _clean(raw.location) or DEFAULT_LOCATION
    else:
        location = normalize_location(raw.location)

    return CanonicalJob(
        title=title,
        company=company,
        location=location,
        url=url,
        description=_clean(raw.description) or DESCRIPTION_SENTINEL,
        posted_date=posted_date,
        source=Source(raw.source),
    )
