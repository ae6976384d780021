"""
Reservation history listing.
Newest entry first, ties broken by newest exit. A missing timestamp ranks
below every real one, so reservations never checked in come last.
"""

from datetime import datetime
from typing import Optional

from app.domain.models import Reservation
from app.stores.interfaces import ParkingStorage


def _ts_key(value: Optional[datetime]) -> tuple:
    return (value is not None, value or datetime.min)


def sort_history(reservations: list[Reservation]) -> list[Reservation]:
    return sorted(
        reservations,
        key=lambda r: (_ts_key(r.entry_time), _ts_key(r.exit_time)),
        reverse=True,
    )


def list_history(storage: ParkingStorage) -> list[Reservation]:
    with storage.snapshot() as uow:
        return sort_history(uow.reservations.list_all())
