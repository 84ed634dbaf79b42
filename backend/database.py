from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from pathlib import Path
import logging

from config import settings

logger = logging.getLogger(__name__)


def _set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA busy_timeout=5000")  # Wait up to 5s for locks instead of failing immediately
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database_engine(url: str, echo: bool = False, **engine_kwargs) -> Engine:
    """
    Build an engine for the given SQLAlchemy URL.

    SQLite connections get WAL mode and foreign keys; other dialects get a
    larger connection pool. Extra keyword arguments go to create_engine.
    """
    is_sqlite = url.startswith('sqlite')

    options = {'echo': echo, 'pool_pre_ping': True}
    if is_sqlite:
        options['connect_args'] = {'check_same_thread': False}
        db_path = url.split('///', 1)[1] if '///' in url else ''
        if db_path and db_path != ':memory:':
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    else:
        options.update(
            pool_size=20,
            max_overflow=30,
            pool_recycle=3600  # Recycle connections after 1 hour to prevent stale connections
        )
    options.update(engine_kwargs)

    new_engine = create_engine(url, **options)
    if is_sqlite:
        event.listen(new_engine, "connect", _set_sqlite_pragma)
    return new_engine


engine = create_database_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

SessionLocal = sessionmaker(bind=engine)
Base = declarative_base()

def get_db():
    """Dependency for FastAPI routes"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
