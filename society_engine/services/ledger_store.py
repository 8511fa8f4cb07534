"""Ledger store: transactional access to the society database.

Every engine command runs as one short transaction through LedgerStore.run().
The store owns the SQLAlchemy engine and session factory and translates
lock/availability failures into TransientStoreError after a bounded number of
retries.
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from society_engine.models import Base
from society_engine.services.errors import TransientStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRY_BACKOFF_SECONDS = 0.05


def _is_memory_sqlite(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in database_url


class LedgerStore:
    """Durable keyed storage with all-or-nothing multi-record writes.

    Args:
        database_url: SQLAlchemy database URL (e.g., "sqlite:///./society.db")
        timeout: Seconds to wait for a lock or connection before giving up
        max_retries: How many times a command is re-run after a transient failure
        echo: Log SQL statements

    Example:
        ```python
        store = LedgerStore("sqlite:///./society.db")
        store.create_all()
        bill = store.run(lambda db: db.get(MaintenanceBill, 1))
        ```
    """

    def __init__(
        self,
        database_url: str,
        *,
        timeout: float = 5.0,
        max_retries: int = 3,
        echo: bool = False,
    ):
        self.database_url = database_url
        self.max_retries = max_retries

        # SQLite uses StaticPool for in-memory databases so every session sees one DB
        if database_url.startswith("sqlite"):
            engine_kwargs = {"connect_args": {"check_same_thread": False, "timeout": timeout}}
            if _is_memory_sqlite(database_url):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs = {"pool_pre_ping": True, "pool_timeout": timeout}

        self.engine = create_engine(database_url, echo=echo, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings) -> "LedgerStore":
        """Build a store from application settings."""
        return cls(
            settings.database_url,
            timeout=settings.store_timeout_seconds,
            max_retries=settings.store_max_retries,
            echo=settings.database_echo,
        )

    def create_all(self) -> None:
        """Create all tables from ORM metadata (development and tests)."""
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session for read-only queries."""
        session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Session whose work is committed on success and rolled back on any error."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def run(self, command: Callable[[Session], T], description: str = "command") -> T:
        """Run command(session) in one transaction, retrying transient store failures.

        The whole command is re-executed on retry, so it re-reads current state and
        either completes or fails with the conflict that a concurrent writer caused.

        Raises:
            TransientStoreError: If the store keeps failing after max_retries retries
        """
        attempt = 0
        while True:
            try:
                with self.transaction() as session:
                    return command(session)
            except OperationalError as e:
                attempt += 1
                if attempt > self.max_retries:
                    logger.error(
                        "Store unavailable for %s after %d attempts: %s",
                        description,
                        attempt,
                        e.orig,
                    )
                    raise TransientStoreError(
                        f"Store unavailable while running {description}; please retry"
                    ) from e
                logger.warning(
                    "Transient store failure during %s (attempt %d/%d): %s",
                    description,
                    attempt,
                    self.max_retries,
                    e.orig,
                )
                time.sleep(RETRY_BACKOFF_SECONDS * attempt)


__all__ = ["LedgerStore"]
