"""
Database connection, session factory, and table creation.
Uses SQLAlchemy; SQLite by default, any SQLAlchemy URL works. All models are
imported in create_tables() so every table is created in one call.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import settings


def build_engine(url: str):
    """Create an engine with pool options suited to the database dialect."""
    if url.startswith("sqlite"):
        # Requests run on a thread pool, so the connection must cross threads
        return create_engine(url, connect_args={"check_same_thread": False}, echo=False)
    return create_engine(
        url,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=10,
        max_overflow=20,
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_tables(bind=None):
    """
    Creates all DB tables. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from app.models.space import Space               # noqa
    from app.models.reservation import Reservation   # noqa
    from app.models.report import Report             # noqa

    Base.metadata.create_all(bind=bind or engine)
