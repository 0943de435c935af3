from datetime import datetime, timezone

import pytest

from techjobs.core.models import Source
from techjobs.store.base import DuplicateKeyError, StoreUnavailableError
from techjobs.store.sql import SqlJobStore


def test_insert_and_find_by_url(store, make_job):
    stored = store.insert(make_job())

    assert stored.id is not None
    assert stored.source is Source.GRADCRACKER
    assert stored.posted_date == datetime(2024, 5, 1, tzinfo=timezone.utc)
    assert stored.created_at.tzinfo is not None

    found = store.find_by_url("https://example.com/jobs/1")
    assert found.id == stored.id
    assert found.title == "Software Intern"
    assert store.find_by_url("https://example.com/jobs/missing") is None
    assert store.count() == 1


def test_duplicate_url_raises_and_keeps_original(store, make_job):
    store.insert(make_job(title="Original"))

    with pytest.raises(DuplicateKeyError):
        store.insert(make_job(title="Changed"))

    assert store.count() == 1
    assert store.find_by_url("https://example.com/jobs/1").title == "Original"


def test_recent_is_newest_first(store, make_job):
    store.insert(make_job(url="https://example.com/a", posted_date=datetime(2024, 1, 1, tzinfo=timezone.utc)))
    store.insert(make_job(url="https://example.com/b", posted_date=datetime(2024, 3, 1, tzinfo=timezone.utc)))
    store.insert(make_job(url="https://example.com/c", posted_date=datetime(2024, 2, 1, tzinfo=timezone.utc)))

    assert [job.url for job in store.recent()] == [
        "https://example.com/b",
        "https://example.com/c",
        "https://example.com/a",
    ]
    assert len(store.recent(limit=2)) == 2


def test_search_is_case_insensitive_substring(store, make_job):
    store.insert(make_job(url="https://example.com/a", title="Python Intern", location="London"))
    store.insert(make_job(url="https://example.com/b", title="Intern", company="PyCorp", location="Reading, London"))
    store.insert(make_job(url="https://example.com/c", title="Design Intern", description="Figma work", location="London"))

    assert {job.url for job in store.search(keyword="PYTHON")} == {"https://example.com/a"}
    assert {job.url for job in store.search(keyword="py")} == {"https://example.com/a", "https://example.com/b"}
    assert {job.url for job in store.search(keyword="figma")} == {"https://example.com/c"}
    assert {job.url for job in store.search(location="reading")} == {"https://example.com/b"}
    assert len(store.search()) == 3
    assert store.search(keyword="100%") == []


def test_saved_references(store, make_job):
    first = store.insert(make_job(url="https://example.com/a"))
    second = store.insert(make_job(url="https://example.com/b"))

    reference = store.save_reference("session-1", first.id)
    assert reference.session_key == "session-1"
    assert reference.job_id == first.id

    store.save_reference("session-1", second.id)
    store.save_reference("session-2", first.id)

    with pytest.raises(DuplicateKeyError):
        store.save_reference("session-1", first.id)

    assert {job.id for job in store.saved_jobs("session-1")} == {first.id, second.id}
    assert [job.id for job in store.saved_jobs("session-2")] == [first.id]

    assert store.remove_reference("session-1", first.id) is True
    assert store.remove_reference("session-1", first.id) is False
    assert [job.id for job in store.saved_jobs("session-1")] == [second.id]


def test_connect_is_idempotent_and_close_resets():
    s = SqlJobStore("sqlite:///:memory:")
    assert not s.is_connected
    s.connect()
    s.connect()
    assert s.is_connected
    s.close()
    assert not s.is_connected


def test_lazy_connect_on_first_use():
    s = SqlJobStore("sqlite:///:memory:")
    assert s.count() == 0
    assert s.is_connected
    s.close()


def test_unreachable_store_raises_store_unavailable(tmp_path):
    s = SqlJobStore(f"sqlite:///{tmp_path / 'missing-dir' / 'jobs.db'}")
    with pytest.raises(StoreUnavailableError):
        s.connect()
    assert not s.is_connected
