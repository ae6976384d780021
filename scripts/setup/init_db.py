"""
Initialize storage — creates tables (SQL backend) and seeds the parking spaces.
Run once before first launch, or after changing SPACE_CODES.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.config import settings
from app.domain.errors import StorageFailure
from app.stores import build_storage


def main():
    print("🗄️  Parking Storage Initialization")
    print("=" * 40)
    print(f"📦 Backend: {settings.STORAGE_BACKEND}")
    if settings.STORAGE_BACKEND == "sql":
        print(f"📡 Database: {settings.DATABASE_URL}")
    elif settings.STORAGE_BACKEND == "file":
        print(f"📄 Data file: {settings.DATA_FILE}")

    try:
        storage = build_storage(settings.STORAGE_BACKEND)
        added = storage.seed_spaces(settings.SPACE_CODES)
    except StorageFailure as e:
        print(f"❌ Cannot initialize storage: {e.detail}")
        sys.exit(1)

    print(f"✅ {added} new spaces seeded")

    with storage.snapshot() as uow:
        spaces = uow.spaces.list_all()

    print(f"\n🅿️  Spaces ({len(spaces)} total):")
    for s in spaces:
        print(f"   ✓ {s.code:<4} {s.state.value}")

    print("\n🎉 Storage ready! You can now start the backend:")
    print(f"   uvicorn app.main:app --host 0.0.0.0 --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
