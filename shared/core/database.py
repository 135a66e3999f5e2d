import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from shared.core.config import settings
from shared.core.exceptions import StoreError

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_engine(database_url: str, serialize_writes: bool = True) -> Engine:
    """Create an engine; on SQLite enable foreign keys and, optionally,
    let `transaction()` take the write lock up front."""
    is_sqlite = database_url.startswith("sqlite")
    is_memory = is_sqlite and (
        database_url in ("sqlite://", "sqlite:///:memory:"))
    serialize_writes = serialize_writes and is_sqlite

    kwargs = {"execution_options": {"serialize_writes": serialize_writes}}
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
        if is_memory:
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(pool_pre_ping=True, pool_recycle=300)

    engine = create_engine(database_url, **kwargs)

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            if serialize_writes:
                # driver autocommit: reads hold no lock, transaction() issues BEGIN IMMEDIATE
                dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(settings.DATABASE_URL, settings.SERIALIZE_WRITES)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _begin_write(db: Session) -> None:
    """Take the SQLite write lock before the first read of a serialized block."""
    conn = db.connection()
    if not conn.get_execution_options().get("serialize_writes"):
        return
    if not conn.connection.dbapi_connection.in_transaction:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


@contextmanager
def transaction(db: Session):
    """Commit everything written inside the block, or nothing."""
    try:
        _begin_write(db)
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Database error, transaction rolled back")
        raise StoreError(f"Database error: {e.__class__.__name__}") from e
    except Exception:
        db.rollback()
        raise
