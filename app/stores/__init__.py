"""
Storage backend selection.
STORAGE_BACKEND picks memory | file | sql; every backend implements the
same ParkingStorage contract from app.stores.interfaces.
"""

from functools import lru_cache

from app.config import settings
from app.stores.interfaces import ParkingStorage
from app.utils.logger import get_logger

logger = get_logger(__name__)


def build_storage(backend: str) -> ParkingStorage:
    backend = backend.lower()
    if backend == "memory":
        from app.stores.memory_store import MemoryStorage
        return MemoryStorage()
    if backend == "file":
        from app.stores.file_store import FileStorage
        return FileStorage(settings.DATA_FILE)
    if backend == "sql":
        from app.database import SessionLocal, create_tables
        from app.stores.sql_store import SqlStorage
        create_tables()
        return SqlStorage(SessionLocal)
    raise ValueError(f"Unknown STORAGE_BACKEND '{backend}' (expected memory, file or sql)")


@lru_cache
def get_storage() -> ParkingStorage:
    """FastAPI dependency: the process-wide storage, seeded on first use."""
    storage = build_storage(settings.STORAGE_BACKEND)
    added = storage.seed_spaces(settings.SPACE_CODES)
    logger.info(f"Storage '{storage.name}' ready ({added} new spaces seeded)")
    return storage
