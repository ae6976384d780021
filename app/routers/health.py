"""
System health check endpoint.
Returns status of backend + storage.
"""

from datetime import datetime

from fastapi import APIRouter, Depends

from app.domain.errors import StorageFailure
from app.stores import get_storage
from app.stores.interfaces import ParkingStorage

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(storage: ParkingStorage = Depends(get_storage)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "storage": storage.name,
        "spaces": None,
    }

    try:
        with storage.snapshot() as uow:
            result["spaces"] = len(uow.spaces.list_all())
    except StorageFailure as e:
        result["status"] = "degraded"
        result["spaces"] = f"error: {e.detail}"

    return result
