from datetime import datetime, timedelta, timezone

import pytest
from freezegun import freeze_time

from techjobs.core.dates import parse_posted_date

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@freeze_time("2024-06-15 12:00:00")
@pytest.mark.parametrize(
    "text, expected",
    [
        ("Just posted", NOW),
        ("Posted today", NOW),
        ("Yesterday", NOW - timedelta(days=1)),
        ("3 days ago", NOW - timedelta(days=3)),
        ("Posted 30+ days ago", NOW - timedelta(days=30)),
        ("an hour ago", NOW - timedelta(hours=1)),
        ("2 weeks ago", NOW - timedelta(weeks=2)),
        ("1 month ago", datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)),
    ],
)
def test_relative_dates(text, expected):
    assert parse_posted_date(text) == expected


@freeze_time("2024-06-15 12:00:00")
@pytest.mark.parametrize(
    "text, expected",
    [
        ("Posted: 15th April 2023", datetime(2023, 4, 15, tzinfo=timezone.utc)),
        ("12/03/2024", datetime(2024, 3, 12, tzinfo=timezone.utc)),
        ("2024-03-01", datetime(2024, 3, 1, tzinfo=timezone.utc)),
        ("2024-03-01T10:15:00+01:00", datetime(2024, 3, 1, 9, 15, tzinfo=timezone.utc)),
        ("Posted 2 May", datetime(2024, 5, 2, tzinfo=timezone.utc)),
    ],
)
def test_absolute_dates(text, expected):
    assert parse_posted_date(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        None,
        "",
        "   ",
        "Closing soon",
        "Apply now!",
        "Marketing team, 5 roles",
        "12 month placement",
        "Junior developer, 2 openings",
        "Mayfair office, 3 days a week",
        "Decide by Friday",
        "You may apply online",
    ],
)
def test_unparseable_text_returns_none(text):
    assert parse_posted_date(text, now=NOW) is None
    assert parse_posted_date(text) is None


def test_explicit_now():
    now = datetime(2020, 1, 10, tzinfo=timezone.utc)
    assert parse_posted_date("2 days ago", now=now) == datetime(2020, 1, 8, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("5 mins ago", NOW - timedelta(minutes=5)),
        ("Posted 2 hrs ago", NOW - timedelta(hours=2)),
        ("Sept 3, 2023", datetime(2023, 9, 3, tzinfo=timezone.utc)),
        ("1 Jun", datetime(2024, 6, 1, tzinfo=timezone.utc)),
    ],
)
def test_abbreviations_against_explicit_now(text, expected):
    assert parse_posted_date(text, now=NOW) == expected
