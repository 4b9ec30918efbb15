"""
Work Time Store - Owns the engine and session factory of the local database

One instance is opened at start-up and closed at shutdown. Services never
reach for a global engine; they receive a Session created by this store.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, text, Engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from atams.db import Base
from atams.exceptions import ServiceUnavailableException
from atams.logging import get_logger

from timecheck.models import WorkSession  # noqa: F401  (registers the table)

logger = get_logger(__name__)


class WorkTimeStore:
    """
    Local file-backed store for work sessions

    Usage:
        store = WorkTimeStore("sqlite:///./WorkTime.sqlite")
        store.open()
        with store.session() as db:
            service.check_in(db)
        store.close()
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> "WorkTimeStore":
        """
        Create the database file and table if needed

        Raises:
            ServiceUnavailableException: If the database cannot be opened or created
        """
        if self.is_open:
            return self

        url = make_url(self.database_url)
        if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
            try:
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.error(f"Cannot create database directory for {url.database}: {e}")
                raise ServiceUnavailableException("Storage unavailable", {"error": str(e)})

        connect_args = {}
        if url.get_backend_name() == "sqlite":
            # sessions may be opened and used on different threadpool workers
            connect_args["check_same_thread"] = False

        try:
            engine = create_engine(self.database_url, echo=self.echo, connect_args=connect_args)
            Base.metadata.create_all(bind=engine)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Cannot open work time store: {e}")
            raise ServiceUnavailableException("Storage unavailable", {"error": str(e)})

        self._engine = engine
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        logger.info(f"Work time store opened ({url.render_as_string(hide_password=True)})")
        return self

    def close(self) -> None:
        """Dispose all pooled connections"""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Work time store closed")

    def new_session(self) -> Session:
        if self._session_factory is None:
            raise ServiceUnavailableException("Storage is not open")
        return self._session_factory()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Yield a session and close it afterwards

        Raises:
            ServiceUnavailableException: If the database fails while in use
        """
        db = self.new_session()
        try:
            yield db
        except OperationalError as e:
            db.rollback()
            logger.error(f"Work time store failed: {e}")
            raise ServiceUnavailableException("Storage unavailable", {"error": str(e)})
        finally:
            db.close()

    def __enter__(self) -> "WorkTimeStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
