"""
Posting-date parsing for job boards.

Boards either print an absolute date ("Posted: 15th April 2023") or a
relative one ("3 days ago", "30+ days ago", "Today"). Anything that can't be
understood returns None so the caller can fall back to ingestion time.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

NOW_PHRASES = ("just posted", "just now", "today")
YESTERDAY_PHRASES = ("yesterday",)

RELATIVE_PATTERN = re.compile(
    r"\b(\d+|an?|one)\+?\s*(minute|min|hour|hr|day|week|month|year)s?\s+ago\b"
)
MONTH_PATTERN = re.compile(
    r"\b(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sept?(?:ember)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\b"
)
NUMERIC_PATTERN = re.compile(r"\b(\d{4}-\d{1,2}-\d{1,2}|\d{1,2}[/.]\d{1,2}[/.]\d{2,4})\b")
ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ][\d:.]+(?:Z|[+-]\d{2}:?\d{2})?)?$")


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _relative_delta(amount: int, unit: str):
    if unit in ("minute", "min"):
        return timedelta(minutes=amount)
    if unit in ("hour", "hr"):
        return timedelta(hours=amount)
    if unit == "day":
        return timedelta(days=amount)
    if unit == "week":
        return timedelta(weeks=amount)
    if unit == "month":
        return relativedelta(months=amount)
    return relativedelta(years=amount)


def parse_relative_date(text: str, now: datetime) -> Optional[datetime]:
    lowered = text.lower()

    match = RELATIVE_PATTERN.search(lowered)
    if match:
        raw_amount, unit = match.groups()
        amount = 1 if raw_amount in ("a", "an", "one") else int(raw_amount)
        return now - _relative_delta(amount, unit)

    if any(phrase in lowered for phrase in YESTERDAY_PHRASES):
        return now - timedelta(days=1)
    if any(re.search(rf"\b{phrase}\b", lowered) for phrase in NOW_PHRASES):
        return now
    return None


def parse_absolute_date(text: str, now: datetime) -> Optional[datetime]:
    # Machine-readable datetime attributes are ISO 8601; dayfirst would
    # read 2024-03-01 as the 3rd of January.
    if ISO_PATTERN.match(text.strip()):
        try:
            return _utc(date_parser.isoparse(text.strip()))
        except ValueError as e:
            logger.debug(f"Could not parse ISO date {text!r}: {e}")

    lowered = text.lower()
    has_month = MONTH_PATTERN.search(lowered) and re.search(r"\d", lowered)
    if not (has_month or NUMERIC_PATTERN.search(lowered)):
        return None

    # Missing components (usually the year) come from the current date.
    default = datetime(now.year, 1, 1)
    try:
        parsed = date_parser.parse(text, fuzzy=True, dayfirst=True, default=default)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Could not parse absolute date {text!r}: {e}")
        return None
    return _utc(parsed)


def parse_posted_date(text: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse a board's posting-date text into an aware UTC datetime.
    Relative phrasing is checked first since dateutil would happily read
    "3 days ago" as the 3rd of the current month.
    """
    if not text or not text.strip():
        return None
    now = _utc(now) if now else datetime.now(timezone.utc)

    return parse_relative_date(text, now) or parse_absolute_date(text, now)
