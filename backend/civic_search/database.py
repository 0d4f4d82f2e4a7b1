"""
Database setup and session management using SQLAlchemy.

The engine and session factory are built explicitly by the application
(see ``civic_search.main``) and handed to the unit of work; nothing here
opens a connection at import time.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .domain.search.geo import great_circle_radians

# Base class for all database models
Base = declarative_base()


def install_sqlite_hooks(engine: Engine, *, busy_timeout_ms: int = 15000) -> None:
    """Set SQLite pragmas and register SQL functions on every new connection.

    ``great_circle_radians(lat1, lng1, lat2, lng2)`` is the same Python
    function the domain uses, so geo queries in SQL and in tests agree.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function(
            "great_circle_radians", 4, great_circle_radians, deterministic=True
        )
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_db_engine(
    database_url: str,
    *,
    echo: bool = False,
    busy_timeout_ms: int = 15000,
) -> Engine:
    """Create an engine for *database_url*.

    In-memory SQLite URLs share one connection (StaticPool) so every
    session sees the same database.
    """
    is_sqlite = database_url.startswith("sqlite")
    kwargs = {}
    if is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(database_url, echo=echo, **kwargs)
    if is_sqlite:
        install_sqlite_hooks(engine, busy_timeout_ms=busy_timeout_ms)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """
    Initialize database by creating all tables.
    Should be called on application startup.
    """
    # Import all models here to ensure they are registered
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
