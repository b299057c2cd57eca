"""
Database handle: engine + session factory with an explicit lifecycle.

Constructed once at process start, `init()` creates the tables, `session()` hands out one session per request,
`dispose()` closes the connection pool at shutdown.
"""

import logging
from typing import Generator, Optional

from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.core.exceptions import StorageNotConfiguredError
from src.db.schema import Base

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, url: Optional[str], echo: bool = False) -> None:
        self.url = url
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker[Session]] = None

        if url is None:
            logger.warning("No database URL configured: comment storage is unavailable.")
            return

        self.engine = create_engine(url, echo=echo, **_engine_options(url))
        self._session_factory = sessionmaker(autoflush=False, bind=self.engine)

    @property
    def configured(self) -> bool:
        return self.engine is not None

    def init(self) -> bool:
        """Ensure all tables are created. Failing to reach the database is logged, not raised."""
        if self.engine is None:
            return False
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError:
            logger.exception("Failed to initialize database")
            return False
        logger.info("Database initialized successfully")
        return True

    def session(self) -> Generator[Session, None, None]:
        """One session per request (use as FastAPI dependency)."""
        if self._session_factory is None:
            raise StorageNotConfiguredError("Missing DATABASE_URL: cannot open a database session.")
        db = self._session_factory()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def _engine_options(url: str) -> dict:
    """SQLite needs some care when used from the threadpool FastAPI runs sync handlers in."""
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options: dict = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
        # a single shared connection, otherwise every connection gets its own empty in-memory database
        options["poolclass"] = StaticPool
    return options
