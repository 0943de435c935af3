"""
SQLAlchemy-backed job store. Any SQLAlchemy URL works; SQLite is the default.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from sqlalchemy import create_engine, delete, func, or_, select, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from techjobs.config.settings import settings
from techjobs.core.models import CanonicalJob, SavedReference, Source, StoredJob
from techjobs.store.base import DuplicateKeyError, JobStore, StoreUnavailableError
from techjobs.store.models import Base, JobRecord, SavedJobRecord

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_stored(row: JobRecord) -> StoredJob:
    return StoredJob(
        id=row.id,
        title=row.title,
        company=row.company,
        location=row.location,
        url=row.url,
        description=row.description,
        posted_date=_aware(row.posted_date),
        source=Source(row.source),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlJobStore(JobStore):
    def __init__(self, url: str = settings.DATABASE_URL):
        self.url = url
        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def _engine_options(self) -> dict:
        if self.url.startswith("sqlite") and (":memory:" in self.url or self.url == "sqlite://"):
            # One shared connection, otherwise every session sees an empty database.
            return {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        if self.url.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}

    def connect(self) -> None:
        if self._engine is not None:
            return
        try:
            display_url = make_url(self.url).render_as_string(hide_password=True)
            engine = create_engine(self.url, **self._engine_options())
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
        except (SQLAlchemyError, ImportError) as e:
            raise StoreUnavailableError(f"Cannot reach job store: {e}") from e

        self._engine = engine
        self._sessionmaker = sessionmaker(bind=engine, expire_on_commit=False)
        logger.info(f"Connected to job store at {display_url}")

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("Job store connection closed.")

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._sessionmaker is None:
            self.connect()
        with self._sessionmaker() as session:
            yield session

    # --- Ingestion side ---

    def find_by_url(self, url: str) -> Optional[StoredJob]:
        with self._session() as session:
            row = session.scalars(select(JobRecord).where(JobRecord.url == url)).first()
            return _to_stored(row) if row else None

    def insert(self, job: CanonicalJob) -> StoredJob:
        row = JobRecord(
            title=job.title,
            company=job.company,
            location=job.location,
            url=job.url,
            description=job.description,
            posted_date=job.posted_date,
            source=job.source.value,
        )
        with self._session() as session:
            session.add(row)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateKeyError(f"Job already stored: {job.url}") from e
            return _to_stored(row)

    def count(self) -> int:
        with self._session() as session:
            return session.scalar(select(func.count()).select_from(JobRecord)) or 0

    # --- Catalog side ---

    def get(self, job_id: int) -> Optional[StoredJob]:
        with self._session() as session:
            row = session.get(JobRecord, job_id)
            return _to_stored(row) if row else None

    def recent(self, limit: int = 100) -> List[StoredJob]:
        with self._session() as session:
            rows = session.scalars(
                select(JobRecord).order_by(JobRecord.posted_date.desc(), JobRecord.id.desc()).limit(limit)
            ).all()
            return [_to_stored(row) for row in rows]

    def search(
        self,
        keyword: Optional[str] = None,
        location: Optional[str] = None,
        limit: int = 100,
    ) -> List[StoredJob]:
        query = select(JobRecord)
        if location:
            query = query.where(JobRecord.location.icontains(location, autoescape=True))
        if keyword:
            query = query.where(
                or_(
                    JobRecord.title.icontains(keyword, autoescape=True),
                    JobRecord.company.icontains(keyword, autoescape=True),
                    JobRecord.description.icontains(keyword, autoescape=True),
                )
            )
        query = query.order_by(JobRecord.posted_date.desc(), JobRecord.id.desc()).limit(limit)

        with self._session() as session:
            return [_to_stored(row) for row in session.scalars(query).all()]

    def save_reference(self, session_key: str, job_id: int) -> SavedReference:
        row = SavedJobRecord(user_session=session_key, job_id=job_id)
        with self._session() as session:
            session.add(row)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateKeyError(f"Job {job_id} already saved for {session_key}") from e
            return SavedReference(
                session_key=row.user_session,
                job_id=row.job_id,
                created_at=_aware(row.created_at),
            )

    def saved_jobs(self, session_key: str) -> List[StoredJob]:
        query = (
            select(JobRecord)
            .join(SavedJobRecord, SavedJobRecord.job_id == JobRecord.id)
            .where(SavedJobRecord.user_session == session_key)
            .order_by(SavedJobRecord.created_at.desc(), SavedJobRecord.id.desc())
        )
        with self._session() as session:
            return [_to_stored(row) for row in session.scalars(query).all()]

    def remove_reference(self, session_key: str, job_id: int) -> bool:
        with self._session() as session:
            result = session.execute(
                delete(SavedJobRecord).where(
                    SavedJobRecord.user_session == session_key,
                    SavedJobRecord.job_id == job_id,
                )
            )
            session.commit()
            return result.rowcount > 0
