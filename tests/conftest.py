"""Pytest configuration and shared fixtures."""

import os
import sys
import tempfile

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Must be set before app.config is imported anywhere
_scratch = tempfile.mkdtemp(prefix="parking-tests-")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_DIR", os.path.join(_scratch, "logs"))
os.environ.setdefault("UPLOAD_DIR", os.path.join(_scratch, "uploads"))
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import create_tables
from app.stores.file_store import FileStorage
from app.stores.memory_store import MemoryStorage
from app.stores.sql_store import SqlStorage

SPACE_CODES = ["A1", "A2", "A3", "A4", "A5", "B1", "B2", "B3", "B4", "B5"]


def make_sql_storage() -> SqlStorage:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    return SqlStorage(sessionmaker(autocommit=False, autoflush=False, bind=engine))


@pytest.fixture(params=["memory", "file", "sql"])
def storage(request, tmp_path):
    """A seeded storage, once per backend."""
    if request.param == "memory":
        s = MemoryStorage()
    elif request.param == "file":
        s = FileStorage(str(tmp_path / "db.json"))
    else:
        s = make_sql_storage()
    s.seed_spaces(SPACE_CODES)
    return s
