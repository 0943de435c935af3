from abc import ABC, abstractmethod
from typing import List, Optional

from techjobs.core.models import CanonicalJob, SavedReference, StoredJob


class StoreError(Exception):
    """Base class for job store failures."""


class StoreUnavailableError(StoreError):
    """The store could not be reached or initialised."""


class DuplicateKeyError(StoreError):
    """A record with the same unique key already exists."""


class JobStore(ABC):
    """
    Document store for job records and saved references.

    Job records are append-only: insert() never overwrites an existing URL.
    """

    @abstractmethod
    def connect(self) -> None:
        """Establish the connection if not already live. Idempotent."""

    @abstractmethod
    def close(self) -> None:
        pass

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        pass

    # --- Ingestion side ---

    @abstractmethod
    def find_by_url(self, url: str) -> Optional[StoredJob]:
        pass

    @abstractmethod
    def insert(self, job: CanonicalJob) -> StoredJob:
        """Persist a new job. Raises DuplicateKeyError if its URL is taken."""

    @abstractmethod
    def count(self) -> int:
        pass

    # --- Catalog side ---

    @abstractmethod
    def get(self, job_id: int) -> Optional[StoredJob]:
        pass

    @abstractmethod
    def recent(self, limit: int = 100) -> List[StoredJob]:
        pass

    @abstractmethod
    def search(
        self,
        keyword: Optional[str] = None,
        location: Optional[str] = None,
        limit: int = 100,
    ) -> List[StoredJob]:
        pass

    @abstractmethod
    def save_reference(self, session_key: str, job_id: int) -> SavedReference:
        """Raises DuplicateKeyError if the pair is already saved."""

    @abstractmethod
    def saved_jobs(self, session_key: str) -> List[StoredJob]:
        pass

    @abstractmethod
    def remove_reference(self, session_key: str, job_id: int) -> bool:
        """Returns False when there was nothing to remove."""
