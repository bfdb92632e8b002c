import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from flask import g
from sqlalchemy import BigInteger, DateTime, Integer, JSON, create_engine, event
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import TypeDecorator

from storefront.core.config import config

logger = logging.getLogger(__name__)

Base = declarative_base()

# SQLite only auto-increments INTEGER PRIMARY KEY columns.
BigIntPK = BigInteger().with_variant(Integer, "sqlite")

# JSONB on Postgres (indexable, GIN-friendly); plain JSON elsewhere.
JSONDocument = JSON().with_variant(JSONB, "postgresql")


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware timestamp column.

    SQLite drops tzinfo on the way in, so values read back from it are naive.
    Both directions are normalised to UTC so comparisons against
    datetime.now(timezone.utc) never mix naive and aware values.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


engine: Optional[Engine] = None
SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False)


def build_engine(url: str) -> Engine:
    """
    Create an engine for the given URL.

    Pool sizing only applies to server databases. An in-memory SQLite
    database lives inside a single connection, so it gets a StaticPool to
    stay visible to every session.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        sqlite_engine = create_engine(url, echo=config.database.echo, **kwargs)

        # SQLite ignores ON DELETE clauses unless enforcement is switched on per connection.
        @event.listens_for(sqlite_engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine

    return create_engine(
        url,
        pool_size=config.database.pool_size,
        max_overflow=config.database.max_overflow,
        pool_timeout=config.database.pool_timeout,
        pool_recycle=config.database.pool_recycle,
        pool_pre_ping=True,
        echo=config.database.echo,
    )


def init_engine(url: Optional[str] = None) -> Engine:
    """Bind the module-level engine and session factory to a database URL."""
    global engine
    if engine is not None:
        engine.dispose()
    engine = build_engine(url or config.database.url)
    SessionLocal.configure(bind=engine)
    logger.info(f"Database engine bound to {engine.url.render_as_string(hide_password=True)}")
    return engine


def create_all() -> None:
    # Importing the models registers every table on Base.metadata.
    import storefront.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_all() -> None:
    import storefront.models  # noqa: F401

    Base.metadata.drop_all(bind=engine)


@contextmanager
def session_scope() -> Iterator[Session]:
    """Standalone unit of work for scripts and CLI commands."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Session:
    """Request-scoped session, closed by close_db at teardown."""
    if "db" not in g:
        g.db = SessionLocal()
    return g.db


def close_db(exc: Optional[BaseException] = None) -> None:
    session = g.pop("db", None)
    if session is None:
        return
    if exc is not None:
        session.rollback()
    session.close()
