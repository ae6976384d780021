"""Domain records shared by every storage backend.

These are plain frozen dataclasses. The SQLAlchemy tables live in app/models/
and are converted to these records by the SQL store.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are kept as naive UTC; aware values (legacy "...Z" rows) are converted."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class SpaceState(str, Enum):
    """Occupancy state of a space. Values are the persisted/wire strings."""

    FREE = "libre"
    RESERVED = "reservado"
    OCCUPIED = "ocupado"


class OpenPhase(str, Enum):
    """Which open reservation of a space a lookup is after."""

    AWAITING_ENTRY = "awaiting-entry"   # no entry_time yet
    AWAITING_EXIT = "awaiting-exit"     # entry_time set, exit_time not set


@dataclass(frozen=True)
class Space:
    id: int
    code: str
    state: SpaceState


@dataclass(frozen=True)
class ReservationDraft:
    """Input for ReservationLedger.create: everything but the id and timestamps."""

    holder_id: str
    plate: str
    space_code: str
    driver_name: str
    property_card_ref: str
    photo_ref: Optional[str] = None


@dataclass(frozen=True)
class Reservation:
    id: int
    holder_id: str
    plate: str
    space_code: str
    driver_name: str
    property_card_ref: str
    photo_ref: Optional[str] = None
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.exit_time is None

    def matches_phase(self, phase: OpenPhase) -> bool:
        if phase is OpenPhase.AWAITING_ENTRY:
            return self.entry_time is None and self.exit_time is None
        return self.entry_time is not None and self.exit_time is None


@dataclass(frozen=True)
class ReportDraft:
    reporter_name: str
    holder_id: str
    description: str
    screenshot_ref: Optional[str] = None


@dataclass(frozen=True)
class Report:
    id: int
    reporter_name: str
    holder_id: str
    description: str
    screenshot_ref: Optional[str] = None
