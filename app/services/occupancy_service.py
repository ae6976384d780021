"""
Space occupancy state machine: Free → Reserved → Occupied → Free.

reserve    validates space + holder, creates the reservation, marks Reserved
check_in   stamps entry on the awaiting-entry reservation, marks Occupied
check_out  stamps exit on the awaiting-exit reservation, marks Free

Each operation runs inside one storage transaction, so the checks and the
writes of reserve cannot interleave with another request.
check_in / check_out are lenient: the space state flips even when no
matching reservation exists.
"""

from datetime import datetime
from typing import Optional

from app.domain.errors import (
    DuplicateActiveReservationError,
    SpaceNotFoundError,
    SpaceUnavailableError,
    ValidationError,
)
from app.domain.models import OpenPhase, Reservation, ReservationDraft, SpaceState
from app.stores.interfaces import ParkingStorage
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _require(field: str, value: Optional[str]) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(field)
    return value


def reserve(storage: ParkingStorage, holder_id: str, plate: str, space_code: str,
            driver_name: str, property_card_ref: str, photo_ref: Optional[str] = None) -> Reservation:
    _require("dni", holder_id)
    _require("codigo_espacio", space_code)

    with storage.transaction() as uow:
        space = uow.spaces.get_by_code(space_code)
        if not space:
            logger.warning(f"[RESERVE] Unknown space {space_code}")
            raise SpaceNotFoundError(space_code)

        if space.state is not SpaceState.FREE:
            logger.warning(f"[RESERVE] Space {space_code} is {space.state.value} — rejected dni={holder_id}")
            raise SpaceUnavailableError(space_code, space.state)

        if uow.reservations.find_active_by_holder(holder_id):
            logger.warning(f"[RESERVE] dni={holder_id} already has an active reservation")
            raise DuplicateActiveReservationError(holder_id)

        reservation = uow.reservations.create(ReservationDraft(
            holder_id=holder_id,
            plate=plate,
            space_code=space_code,
            driver_name=driver_name,
            property_card_ref=property_card_ref,
            photo_ref=photo_ref,
        ))
        uow.spaces.set_state(space_code, SpaceState.RESERVED)

    logger.info(f"[RESERVE] Space {space_code} reserved by dni={holder_id} (reservation {reservation.id})")
    return reservation


def check_in(storage: ParkingStorage, space_code: str) -> None:
    with storage.transaction() as uow:
        reservation = uow.reservations.find_open_by_space(space_code, OpenPhase.AWAITING_ENTRY)
        if reservation:
            uow.reservations.mark_entry(reservation.id, datetime.utcnow())
        else:
            logger.warning(f"[CHECK-IN] No reservation awaiting entry on {space_code}")

        if not uow.spaces.set_state(space_code, SpaceState.OCCUPIED):
            logger.warning(f"[CHECK-IN] Unknown space {space_code} — nothing to update")
            return

    logger.info(f"[CHECK-IN] Space {space_code} occupied")


def check_out(storage: ParkingStorage, space_code: str) -> None:
    with storage.transaction() as uow:
        reservation = uow.reservations.find_open_by_space(space_code, OpenPhase.AWAITING_EXIT)
        if reservation:
            uow.reservations.mark_exit(reservation.id, datetime.utcnow())
        else:
            logger.warning(f"[CHECK-OUT] No checked-in reservation on {space_code}")

        if not uow.spaces.set_state(space_code, SpaceState.FREE):
            logger.warning(f"[CHECK-OUT] Unknown space {space_code} — nothing to update")
            return

    logger.info(f"[CHECK-OUT] Space {space_code} free")


def list_spaces(storage: ParkingStorage):
    """All spaces ordered by id."""
    with storage.snapshot() as uow:
        return uow.spaces.list_all()
