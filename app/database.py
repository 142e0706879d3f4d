"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL. All models are auto-imported here
so create_tables() creates every table and index in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings


def engine_options(url: str, production: bool) -> dict:
    """
    Keyword arguments for create_engine().
    Production talks TLS to Postgres but does not verify the server
    certificate (sslmode=require), matching managed hosts with self-signed certs.
    """
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    options = {
        "pool_pre_ping": True,          # Auto-reconnect if DB connection drops
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "echo": False,                  # Set True to log all SQL queries (debug only)
    }
    if url.startswith("postgresql"):
        options["connect_args"] = {"sslmode": "require" if production else "disable"}
    return options


engine = create_engine(
    settings.SQLALCHEMY_URL,
    **engine_options(settings.SQLALCHEMY_URL, settings.IS_PRODUCTION),
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """
    Creates raw_events and bin_events plus their indexes.
    Safe to call multiple times: existing tables and indexes are skipped.
    """
    from app.models.raw_event import RawEvent   # noqa
    from app.models.bin_event import BinEvent   # noqa

    Base.metadata.create_all(bind=bind or engine)
