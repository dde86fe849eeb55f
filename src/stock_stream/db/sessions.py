"""Database engine and session management."""
import os
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from stock_stream.db.models import Stock  # noqa: F401  # pylint: disable=unused-import

_DEFAULT_URL = "sqlite:///./stocks.db"


def create_db_engine(url: str | None = None) -> Engine:
    """Create a SQLModel engine; falls back to DATABASE_URL, then a local SQLite file."""
    url = url or os.getenv("DATABASE_URL", _DEFAULT_URL)
    kwargs: dict = {"echo": os.getenv("SQL_ECHO", "0") == "1"}
    if url.startswith("sqlite"):
        # Store lookups run in worker threads (asyncio.to_thread)
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise each thread sees an empty database
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(pool_pre_ping=True, pool_size=5, max_overflow=10)
    return create_engine(url, **kwargs)


@contextmanager
def get_session(engine: Engine) -> Generator[Session, None, None]:
    """Yield a database session; commits on success, rolls back on error."""
    session = Session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Create all tables. Safe to call on startup (idempotent for existing tables)."""
    SQLModel.metadata.create_all(engine)
