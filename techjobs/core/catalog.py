"""
Read/save operations over the stored catalog, for whatever API layer sits on
top. Only ingestion inserts jobs; this side reads them and manages the
per-session saved lists.
"""

import logging
from typing import List, Optional

from techjobs.core.cache import SearchCache, make_key
from techjobs.core.models import SavedReference, StoredJob
from techjobs.store.base import DuplicateKeyError, JobStore

logger = logging.getLogger(__name__)

ANONYMOUS_SESSION = "anonymous-user"
RESULT_LIMIT = 100


class CatalogError(Exception):
    """Base class for catalog operation failures."""


class JobNotFoundError(CatalogError):
    pass


class AlreadySavedError(CatalogError):
    pass


class SavedJobNotFoundError(CatalogError):
    pass


def session_or_default(session_key: Optional[str]) -> str:
    session_key = (session_key or "").strip()
    return session_key or ANONYMOUS_SESSION


class Catalog:
    def __init__(self, store: JobStore, cache: Optional[SearchCache] = None):
        self.store = store
        self.cache = cache

    def list_recent(self, limit: int = RESULT_LIMIT) -> List[StoredJob]:
        return self.store.recent(limit=limit)

    def search(
        self,
        keyword: Optional[str] = None,
        location: Optional[str] = None,
    ) -> List[StoredJob]:
        """
        Case-insensitive substring search, newest first. Results are cached
        per parameter set until the TTL lapses or the next ingestion run.
        """
        key = make_key({"keyword": keyword, "location": location})

        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug(f"Search cache hit: {key}")
                return cached

        jobs = self.store.search(keyword=keyword, location=location, limit=RESULT_LIMIT)

        if self.cache is not None:
            self.cache.set(key, jobs)
        return jobs

    def save(self, session_key: Optional[str], job_id: int) -> SavedReference:
        session_key = session_or_default(session_key)
        if self.store.get(job_id) is None:
            raise JobNotFoundError(f"Job not found: {job_id}")
        try:
            reference = self.store.save_reference(session_key, job_id)
        except DuplicateKeyError as e:
            raise AlreadySavedError(f"Job {job_id} already saved") from e
        logger.info(f"Saved job {job_id} for session {session_key}")
        return reference

    def saved(self, session_key: Optional[str]) -> List[StoredJob]:
        return self.store.saved_jobs(session_or_default(session_key))

    def remove(self, session_key: Optional[str], job_id: int) -> None:
        session_key = session_or_default(session_key)
        if not self.store.remove_reference(session_key, job_id):
            raise SavedJobNotFoundError(f"Saved job not found: {job_id}")
        logger.info(f"Removed saved job {job_id} for session {session_key}")
