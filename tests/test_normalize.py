from datetime import datetime, timezone

import pytest
from freezegun import freeze_time

from techjobs.core.models import DESCRIPTION_SENTINEL, RawJob, Source
from techjobs.core.normalize import is_absolute_url, normalize, normalize_location


def raw(**overrides):
    fields = dict(
        source=Source.GRADCRACKER,
        title="Software Engineering Intern",
        company="Acme",
        location="London",
        url="https://www.gradcracker.com/hub/1/software-intern",
        description="Build things",
        posted_date=datetime(2024, 4, 15, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return RawJob(**fields)


@pytest.mark.parametrize(
    "missing",
    [
        {"title": ""},
        {"title": "   "},
        {"company": ""},
        {"url": ""},
        {"url": "/hub/1/relative"},
        {"url": "ftp://example.com/job"},
    ],
)
def test_rejects_incomplete_listings(missing):
    assert normalize(raw(**missing)) is None


@pytest.mark.parametrize(
    "location, expected",
    [
        ("London", "London"),
        ("Central London", "London"),
        ("london bridge", "London"),
        ("LONDON, UK", "London"),
        ("", "London"),
        ("   ", "London"),
        ("Reading", "Reading, London"),
        ("  Canary Wharf ", "Canary Wharf, London"),
    ],
)
def test_normalize_location(location, expected):
    assert normalize_location(location) == expected


def test_fields_are_trimmed_and_defaults_filled():
    job = normalize(raw(title="  Data Intern ", company=" Acme  ", description="   "))
    assert job.title == "Data Intern"
    assert job.company == "Acme"
    assert job.description == DESCRIPTION_SENTINEL
    assert job.source is Source.GRADCRACKER


@freeze_time("2024-06-01 09:30:00")
def test_missing_posted_date_defaults_to_now():
    job = normalize(raw(posted_date=None))
    assert job.posted_date == datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)


def test_explicit_now_is_used_for_missing_dates():
    now = datetime(2023, 1, 2, tzinfo=timezone.utc)
    assert normalize(raw(posted_date=None), now=now).posted_date == now


def test_normalization_is_idempotent():
    once = normalize(raw(location="Reading"))
    twice = normalize(once)
    assert once.location == "Reading, London"
    assert twice == once


def test_source_string_is_accepted():
    job = normalize(raw(source="LinkedIn"))
    assert job.source is Source.LINKEDIN


def test_is_absolute_url():
    assert is_absolute_url("https://uk.indeed.com/viewjob?jk=abc")
    assert not is_absolute_url("/viewjob?jk=abc")
    assert not is_absolute_url("https://")
