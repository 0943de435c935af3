from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

DESCRIPTION_SENTINEL = "No description available"
DEFAULT_LOCATION = "London"


class Source(str, Enum):
    """Job boards the pipeline scrapes. The value is what gets stored."""

    BRIGHT_NETWORK = "BrightNetwork"
    GRADCRACKER = "Gradcracker"
    INDEED = "Indeed"
    LINKEDIN = "LinkedIn"
    RATE_MY_PLACEMENT = "RateMyPlacement"


@dataclass
class RawJob:
    """
    Listing as pulled off a job board, before normalization.
    Any string field may still be empty or padded with whitespace.
    """

    source: Source
    title: str = ""
    company: str = ""
    location: str = ""
    url: str = ""
    description: str = ""
    posted_date: Optional[datetime] = None


@dataclass(frozen=True)
class CanonicalJob:
    """
    Canonical job record shared by every source.
    `url` is the identity key used for deduplication.
    """

    title: str
    company: str
    location: str
    url: str
    description: str
    posted_date: datetime
    source: Source


@dataclass(frozen=True)
class StoredJob:
    id: int
    title: str
    company: str
    location: str
    url: str
    description: str
    posted_date: datetime
    source: Source
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class SavedReference:
    session_key: str
    job_id: int
    created_at: Optional[datetime] = None


@dataclass
class SourceOutcome:
    """Result of running one adapter during an ingestion run."""

    source: Source
    jobs: List[CanonicalJob] = field(default_factory=list)
    error: Optional[str] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class IngestionReport:
    inserted_count: int = 0
    failed_sources: int = 0
    outcomes: List[SourceOutcome] = field(default_factory=list)
    state: str = "IDLE"
    error: Optional[str] = None
